"""Abstract base class for the plant details store.

The store is keyed storage only: one :class:`SpeciesRecord` per species
name, with a detail sheet per locale and a shared image list.  It holds no
business rules beyond refusing to persist a record without any locale;
deciding *when* to read or write belongs to the resolution pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.plant import DetailSheet, Locale, SpeciesRecord


# Concrete implementation: SQLitePlantStore (src/providers/store/)
class IPlantStore(ABC):
    """Contract for species record persistence."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if needed.  Safe to call more than once."""

    @abstractmethod
    async def find_by_species(self, species_id: str) -> SpeciesRecord | None:
        """Return the stored record for *species_id*, or ``None``.

        Raises
        ------
        src.utils.errors.StoreError
            If the backend cannot be read.
        """

    @abstractmethod
    async def insert(self, record: SpeciesRecord) -> SpeciesRecord:
        """Persist a new record and return it as stored.

        If a record for the same species appeared in the meantime, the new
        locales and images are merged into it instead of failing.

        Raises
        ------
        src.utils.errors.StoreError
            If the record has no locale or the backend write fails.
        """

    @abstractmethod
    async def update(
        self,
        species_id: str,
        details: dict[Locale, DetailSheet],
        images: list[str] | None = None,
    ) -> SpeciesRecord | None:
        """Add *details* (and *images* when non-empty) to an existing record.

        Locales not named in *details* are left untouched.  Returns the
        record as stored, or ``None`` if no record exists for *species_id*.

        Raises
        ------
        src.utils.errors.StoreError
            If the backend write fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for the backend, e.g. ``"sqlite"``."""
