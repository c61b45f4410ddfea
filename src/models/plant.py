"""Domain models for plant detail resolution.

A species is identified by its scientific name.  For each species the
service keeps one :class:`SpeciesRecord`: a fact sheet per supported locale
plus one image list shared by every locale.

Key relationships:
    - SpeciesRecord holds 0..2 DetailSheet objects keyed by Locale
      (never 0 once persisted -- the store enforces that too)
    - ImageSourceResult is produced by the image aggregator and collapses
      into SpeciesRecord.images before persistence
    - ResolvedPlantDetails is what one resolution hands back to the caller
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MAX_ADVICE_ITEMS = 5


class Locale(str, Enum):  # noqa: UP042 (StrEnum needs 3.11)
    """Languages a detail sheet can be generated in."""

    FR = "fr"
    EN = "en"


# Fan-out order for generation.  Also the order locales are logged in.
SUPPORTED_LOCALES: tuple[Locale, ...] = (Locale.FR, Locale.EN)


class ImageSource(str, Enum):  # noqa: UP042
    """Which provider produced the image list of a resolution."""

    TREFLE = "trefle"
    WIKIPEDIA = "wikipedia"
    NONE = "none"


class DetailSheet(BaseModel):
    """Normalised botanical fact sheet for one species in one locale.

    Field names are the canonical JSON keys and stay in English whatever the
    locale.  Every field is optional and serialises as an explicit ``null``
    when unknown, so consumers can tell "not known" from "no such key".
    Values are whatever the model produced after normalisation (usually
    strings; ``easy`` is sometimes a number, some fields arrive as lists).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    common_name: Any = None
    scientific_name: Any = None
    easy: Any = None                 # difficulty tier, "1" (easy) to "3"
    exposure: Any = None
    exposure_tag: Any = None         # 1-2 word tag, e.g. "Full sun"
    water: Any = None
    family: Any = None
    description: Any = None
    watering: Any = None
    care: Any = None
    growth: Any = None
    flowering: Any = None
    resistance: Any = None
    temperature: Any = None
    multiplication: Any = None       # propagation methods
    diseases: Any = None
    advice: list[Any] | None = None  # at most MAX_ADVICE_ITEMS entries
    interest: Any = None
    toxicity: Any = None
    frequency: Any = None
    origin: Any = None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(cls.model_fields)

    @classmethod
    def empty(cls) -> DetailSheet:
        """The all-null sheet served when a locale could not be produced."""
        return cls()


class SpeciesRecord(BaseModel):
    """Cached state for one species, as stored in the plant store."""

    model_config = ConfigDict(frozen=True)

    species_id: str = Field(min_length=1)
    details_by_locale: dict[Locale, DetailSheet] = Field(default_factory=dict)
    images: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def details_for(self, locale: Locale) -> DetailSheet | None:
        return self.details_by_locale.get(locale)

    def missing_locales(self) -> list[Locale]:
        return [loc for loc in SUPPORTED_LOCALES if loc not in self.details_by_locale]

    def merged_with(
        self,
        details: dict[Locale, DetailSheet],
        images: list[str] | None = None,
    ) -> SpeciesRecord:
        """Return a copy augmented with *details* and, if non-empty, *images*.

        Locales not present in *details* keep their existing sheet; the
        existing image list is only replaced by a non-empty one.
        """
        merged_details = {**self.details_by_locale, **details}
        update: dict[str, Any] = {"details_by_locale": merged_details}
        if images:
            update["images"] = list(images)
        return self.model_copy(update=update)


class ImageSourceResult(BaseModel):
    """Image URLs found for a species and the provider that found them."""

    model_config = ConfigDict(frozen=True)

    urls: list[str] = Field(default_factory=list)
    source: ImageSource = ImageSource.NONE

    @classmethod
    def nothing(cls) -> ImageSourceResult:
        return cls(urls=[], source=ImageSource.NONE)


class ResolvedPlantDetails(BaseModel):
    """Outcome of one resolution for the requested locale."""

    model_config = ConfigDict(frozen=True)

    species_id: str
    locale: Locale
    details: DetailSheet = Field(default_factory=DetailSheet.empty)
    images: list[str] = Field(default_factory=list)
    image_source: ImageSource | None = None   # None when images came from the cache
    from_cache: bool = False
    persisted: bool = False
    generated_locales: list[Locale] = Field(default_factory=list)

    def event_payload(self) -> dict[str, Any]:
        """Summary sent to the webhook after this resolution was stored."""
        return {
            "scientific_name": self.species_id,
            "locales_generated": [loc.value for loc in self.generated_locales],
            "image_count": len(self.images),
            "image_source": self.image_source.value if self.image_source else None,
        }

    def to_response(self) -> dict[str, Any]:
        """Flatten to the wire shape: every sheet field plus ``images``."""
        body = self.details.model_dump(mode="json")
        body["images"] = list(self.images)
        return body
