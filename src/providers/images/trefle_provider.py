"""Trefle botanical database image provider.

Primary image source.  Two requests per species:

  1. ``GET /plants/search?q=<species>``   -> first hit's id
  2. ``GET /plants/{id}``                 -> image lists grouped by category

Trefle nests the image map differently depending on whether the hit is a
plant or a species record, so three locations are probed.  From the map we
take up to ``per_category_limit`` photos from each of the configured
categories, in category order.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from src.config.settings import Settings
from src.interfaces.image_provider import IImageProvider
from src.utils.errors import ProviderUnavailableError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_CATEGORIES: tuple[str, ...] = ("leaf", "habit", "flower")


def _find_image_map(node: Any) -> dict[str, Any] | None:
    """Return the first ``images`` mapping found on *node* or its main species."""
    for _ in range(3):
        if not isinstance(node, dict):
            return None
        images = node.get("images")
        if isinstance(images, dict) and images:
            return images
        node = node.get("main_species")
    return None


def select_category_images(
    image_map: dict[str, Any],
    categories: Sequence[str],
    per_category_limit: int,
) -> list[str]:
    """Pick at most *per_category_limit* distinct URLs per category.

    The overall result never exceeds ``per_category_limit * len(categories)``.
    """
    max_total = per_category_limit * len(categories)
    collected: list[str] = []
    seen: set[str] = set()

    for category in categories:
        entries = image_map.get(category) or []
        taken = 0
        for entry in entries:
            if taken >= per_category_limit or len(collected) >= max_total:
                break
            url = entry.get("image_url") if isinstance(entry, dict) else None
            if url and url not in seen:
                seen.add(url)
                collected.append(url)
                taken += 1
        if len(collected) >= max_total:
            break

    return collected


class TrefleImageProvider(IImageProvider):
    """Image lookup against the Trefle REST API.

    Every failure (missing token, HTTP error, malformed payload) is logged
    and reported as an empty list so the aggregator can fall back.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        categories: Sequence[str] = DEFAULT_CATEGORIES,
    ) -> None:
        self._token = settings.trefle_api_token
        self._base_url = settings.trefle_base_url.rstrip("/")
        self._per_category_limit = settings.trefle_per_category_limit
        self._categories = tuple(categories)
        self._client = http_client

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        query = {"token": self._token, **(params or {})}
        try:
            response = await self._client.get(f"{self._base_url}{path}", params=query)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderUnavailableError(
                message=f"HTTP {exc.response.status_code} on {path}",
                provider_name=self.get_provider_name(),
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderUnavailableError(
                message=f"Request to {path} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def _lookup_plant_id(self, species_id: str) -> Any | None:
        payload = await self._get_json("/plants/search", {"q": species_id})
        results = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(results, list) or not results:
            return None
        first = results[0] if isinstance(results[0], dict) else {}
        return first.get("id") or first.get("main_species_id")

    # ------------------------------------------------------------------
    # IImageProvider implementation
    # ------------------------------------------------------------------

    async def find_images(self, species_id: str, limit: int | None = None) -> list[str]:
        if not self.is_available():
            logger.debug("trefle_skipped_no_token", species=species_id)
            return []

        try:
            plant_id = await self._lookup_plant_id(species_id)
            if plant_id is None:
                logger.info("trefle_no_match", species=species_id)
                return []
            detail = await self._get_json(f"/plants/{plant_id}")
        except ProviderUnavailableError as exc:
            logger.warning("trefle_request_failed", species=species_id, error=str(exc))
            return []

        image_map = _find_image_map(detail.get("data") if isinstance(detail, dict) else None)
        if image_map is None:
            logger.info("trefle_no_images", species=species_id, plant_id=plant_id)
            return []

        urls = select_category_images(image_map, self._categories, self._per_category_limit)
        if limit is not None:
            urls = urls[:limit]
        logger.info("trefle_images_found", species=species_id, plant_id=plant_id, count=len(urls))
        return urls

    def get_provider_name(self) -> str:
        return "trefle"

    def is_available(self) -> bool:
        return bool(self._token)
