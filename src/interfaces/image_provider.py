"""Abstract base class for plant image providers.

An image provider turns a species name into a list of direct image URLs.
Providers are consulted in priority order by
:class:`src.services.image_aggregator.ImageAggregator`; the first one to
return anything wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: TrefleImageProvider, WikipediaImageProvider
# Located in: src/providers/images/
class IImageProvider(ABC):
    """Contract for services that find photographs of a plant species."""

    @abstractmethod
    async def find_images(self, species_id: str, limit: int | None = None) -> list[str]:
        """Return image URLs for *species_id*, best first.

        The list is deduplicated and bounded by the provider's own cap, or
        by *limit* when that is smaller.
        An empty list means "nothing found".

        Raises
        ------
        src.utils.errors.ProviderUnavailableError
            Only for failures the provider could not absorb itself; the
            aggregator treats this the same as an empty result.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the provider tag, e.g. ``"trefle"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (credentials present)."""
