"""Resolution pipeline for plant detail requests.

Turns ``(species, locale)`` into a fact sheet plus images, reading from and
writing back to the plant store:

    CacheCheck --hit--> Served
        |
       miss
        v
    Generate (missing locales) + Aggregate images (if none stored)
        |                       concurrently, join-all
        v
    Guard: at least one locale produced, else DetailsUnavailableError
        |
        v
    Persist (insert or merge-update)  -->  Served

Store failures never fail a request: a broken read is treated as a miss,
a broken write is logged and the freshly generated answer is still served.
"""

from __future__ import annotations

import asyncio

import structlog

from src.interfaces.plant_store import IPlantStore
from src.models.plant import (
    SUPPORTED_LOCALES,
    DetailSheet,
    ImageSourceResult,
    Locale,
    ResolvedPlantDetails,
    SpeciesRecord,
)
from src.services.detail_generator import DetailGenerator
from src.services.image_aggregator import ImageAggregator
from src.utils.errors import DetailsUnavailableError, InvalidRequestError, StoreError
from src.utils.logging import get_logger


class PlantDetailsPipeline:
    """Cache-or-populate orchestration over the generator, aggregator and store.

    All collaborators are injected; the pipeline holds no per-request state
    and one instance serves every request.
    """

    def __init__(
        self,
        store: IPlantStore,
        detail_generator: DetailGenerator,
        image_aggregator: ImageAggregator,
        max_images: int | None = None,
    ) -> None:
        self._store = store
        self._generator = detail_generator
        self._images = image_aggregator
        self._max_images = max_images
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(self, species_id: str, locale: Locale) -> ResolvedPlantDetails:
        """Return *species_id*'s details in *locale*, generating them on a miss.

        Raises
        ------
        InvalidRequestError
            If *species_id* is blank.
        DetailsUnavailableError
            If no locale could be generated this round.  Nothing is stored.
            This includes a known species whose only missing locale failed,
            even though the record already holds the other one.
        """
        species_id = (species_id or "").strip()
        if not species_id:
            raise InvalidRequestError(message="scientificName is required")

        existing = await self._load(species_id)
        if existing is not None:
            cached = existing.details_for(locale)
            if cached is not None:
                self._logger.info(
                    "plant_details_cache_hit",
                    species=species_id,
                    locale=locale.value,
                    images=len(existing.images),
                )
                return ResolvedPlantDetails(
                    species_id=species_id,
                    locale=locale,
                    details=cached,
                    images=existing.images,
                    from_cache=True,
                )

        to_generate = existing.missing_locales() if existing else list(SUPPORTED_LOCALES)
        need_images = existing is None or not existing.images
        self._logger.info(
            "plant_details_cache_miss",
            species=species_id,
            locale=locale.value,
            generating=[loc.value for loc in to_generate],
            fetch_images=need_images,
            known_species=existing is not None,
        )

        generated, image_result = await self._fan_out(species_id, to_generate, need_images)

        if not generated:
            self._logger.error(
                "plant_details_unavailable",
                species=species_id,
                attempted=[loc.value for loc in to_generate],
            )
            raise DetailsUnavailableError(provider_name=self._generator.provider_name)

        new_images = image_result.urls if image_result is not None else []
        stored = await self._persist(species_id, existing, generated, new_images)

        if stored is not None:
            images = stored.images
        elif new_images:
            images = new_images
        else:
            images = existing.images if existing else []

        details = generated.get(locale)
        if details is None:
            self._logger.warning(
                "requested_locale_not_generated",
                species=species_id,
                locale=locale.value,
                generated=[loc.value for loc in generated],
            )

        return ResolvedPlantDetails(
            species_id=species_id,
            locale=locale,
            details=details or DetailSheet.empty(),
            images=images,
            image_source=image_result.source if image_result is not None else None,
            from_cache=False,
            persisted=stored is not None,
            generated_locales=list(generated),
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _load(self, species_id: str) -> SpeciesRecord | None:
        try:
            return await self._store.find_by_species(species_id)
        except StoreError as exc:
            self._logger.warning("plant_store_read_failed", species=species_id, error=str(exc))
            return None

    async def _fan_out(
        self,
        species_id: str,
        locales: list[Locale],
        need_images: bool,
    ) -> tuple[dict[Locale, DetailSheet], ImageSourceResult | None]:
        """Run every generation and the image lookup concurrently, waiting for all."""
        branches = [self._generator.generate(species_id, loc) for loc in locales]
        if need_images:
            branches.append(self._images.aggregate(species_id, self._max_images))

        outcomes = await asyncio.gather(*branches, return_exceptions=True)

        generated: dict[Locale, DetailSheet] = {}
        for loc, outcome in zip(locales, outcomes[: len(locales)]):
            if isinstance(outcome, BaseException):
                self._logger.warning(
                    "detail_branch_crashed",
                    species=species_id,
                    locale=loc.value,
                    error=str(outcome),
                )
            elif outcome is not None:
                generated[loc] = outcome

        image_result: ImageSourceResult | None = None
        if need_images:
            outcome = outcomes[-1]
            if isinstance(outcome, BaseException):
                self._logger.warning("image_branch_crashed", species=species_id, error=str(outcome))
                image_result = ImageSourceResult.nothing()
            else:
                image_result = outcome

        return generated, image_result

    async def _persist(
        self,
        species_id: str,
        existing: SpeciesRecord | None,
        generated: dict[Locale, DetailSheet],
        new_images: list[str],
    ) -> SpeciesRecord | None:
        """Merge this round's output into the store; ``None`` if the write failed."""
        try:
            if existing is not None:
                stored = await self._store.update(species_id, generated, new_images or None)
                if stored is not None:
                    return stored
            record = SpeciesRecord(
                species_id=species_id,
                details_by_locale=generated,
                images=new_images,
            )
            return await self._store.insert(record)
        except StoreError as exc:
            self._logger.error(
                "plant_store_write_failed",
                species=species_id,
                locales=[loc.value for loc in generated],
                error=str(exc),
            )
            return None
