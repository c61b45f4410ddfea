"""Image aggregation across a prioritised chain of image providers.

Providers are tried strictly in order (Trefle first, Wikipedia second in
the default wiring).  The first one that returns at least one URL wins
outright; later providers are not consulted and results are never merged
across sources.  The aggregator never raises: an unavailable provider is
skipped, and a provider that blows up counts as having found nothing.

Non-empty results are memoised per species in the injected cache, so a
request retried after a failed generation does not hit the image APIs a
second time.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.image_provider import IImageProvider
from src.models.plant import ImageSource, ImageSourceResult
from src.utils.logging import get_logger

_CACHE_KEY_PREFIX = "images:"


def dedupe_urls(urls: Sequence[str], limit: int | None = None) -> list[str]:
    """Drop blank and repeated URLs, keep discovery order, then truncate."""
    unique = list(dict.fromkeys(u for u in urls if u))
    return unique[:limit] if limit is not None else unique


def _source_tag(provider_name: str) -> ImageSource:
    try:
        return ImageSource(provider_name)
    except ValueError:
        return ImageSource.NONE


class ImageAggregator:
    """Collects image URLs for a species from the first provider that has any.

    Parameters
    ----------
    providers:
        Image providers in priority order.
    cache:
        Optional short-lived cache for non-empty results.
    """

    def __init__(
        self,
        providers: Sequence[IImageProvider],
        cache: ICacheProvider | None = None,
    ) -> None:
        self._providers = list(providers)
        self._cache = cache
        self._logger = get_logger(__name__)

    async def aggregate(self, species_id: str, max_images: int | None = None) -> ImageSourceResult:
        """Return images for *species_id* and the provider that found them.

        ``ImageSourceResult.nothing()`` when every provider came back empty.
        """
        cache_key = f"{_CACHE_KEY_PREFIX}{species_id.lower()}"
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if isinstance(cached, ImageSourceResult) and cached.urls:
                self._logger.debug("image_cache_hit", species=species_id)
                return self._truncate(cached, max_images)

        for provider in self._providers:
            name = provider.get_provider_name()
            if not provider.is_available():
                self._logger.debug("image_provider_skipped", provider=name, species=species_id)
                continue
            try:
                urls = await provider.find_images(species_id, max_images)
            except Exception as exc:  # noqa: BLE001
                self._logger.warning(
                    "image_provider_failed",
                    provider=name,
                    species=species_id,
                    error=str(exc),
                )
                continue

            urls = dedupe_urls(urls, max_images)
            if not urls:
                self._logger.info("image_provider_empty", provider=name, species=species_id)
                continue

            result = ImageSourceResult(urls=urls, source=_source_tag(name))
            if self._cache is not None:
                await self._cache.set(cache_key, result)
            self._logger.info(
                "images_aggregated",
                species=species_id,
                source=name,
                count=len(urls),
            )
            return result

        self._logger.info("images_not_found", species=species_id)
        return ImageSourceResult.nothing()

    @staticmethod
    def _truncate(result: ImageSourceResult, max_images: int | None) -> ImageSourceResult:
        if max_images is None or len(result.urls) <= max_images:
            return result
        return result.model_copy(update={"urls": result.urls[:max_images]})
