"""Wikipedia / Wikidata image provider.

Fallback image source, used when Trefle has nothing.  Three dependent
steps, each of which may add URLs to the same ordered set:

  1. ``prop=pageimages``  -- the article's lead thumbnail
  2. ``prop=images``      -- every file embedded in the article, filtered
                             to photographs and resolved to direct URLs
                             with ``prop=imageinfo``
  3. Wikidata ``P18``     -- the entity's canonical image, served through
                             Commons' ``Special:FilePath`` redirect

Step 3 only runs while fewer than ``limit`` URLs were found.  A failing
step is logged and the URLs collected so far are kept.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from src.config.settings import Settings
from src.interfaces.image_provider import IImageProvider

logger = structlog.get_logger(logger_name=__name__)

_PHOTO_EXTENSION_RE = re.compile(r"\.(jpg|jpeg|png)$", re.IGNORECASE)
_COMMONS_FILE_PATH_URL = "https://commons.wikimedia.org/wiki/Special:FilePath/"
_THUMBNAIL_SIZE = 500

# Transport failures plus the shapes a malformed MediaWiki payload can raise.
_STEP_ERRORS = (httpx.HTTPError, ValueError, LookupError, TypeError, AttributeError)


def _first_page(payload: Any) -> dict[str, Any]:
    """Return the single page object of a ``action=query`` response."""
    pages = (payload or {}).get("query", {}).get("pages", {})
    for page in pages.values():
        if isinstance(page, dict):
            return page
    return {}


class WikipediaImageProvider(IImageProvider):
    """Image lookup against the MediaWiki and Wikidata APIs.  Needs no credentials."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._wiki_api = settings.wikipedia_api_url
        self._wikidata_api = settings.wikidata_api_url
        self._entity_url = settings.wikidata_entity_url.rstrip("/")
        self._default_limit = settings.wikipedia_image_limit
        self._client = http_client

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    async def _query(self, **params: Any) -> dict[str, Any]:
        payload = await self._get_json(
            self._wiki_api, {"action": "query", "format": "json", **params}
        )
        return _first_page(payload)

    # -- step 1 ---------------------------------------------------------

    async def _lead_thumbnail(self, species_id: str) -> str | None:
        page = await self._query(titles=species_id, prop="pageimages", pithumbsize=_THUMBNAIL_SIZE)
        return (page.get("thumbnail") or {}).get("source")

    # -- step 2 ---------------------------------------------------------

    async def _embedded_photo_titles(self, species_id: str) -> list[str]:
        page = await self._query(titles=species_id, prop="images")
        titles = [img.get("title", "") for img in page.get("images") or []]
        return [t for t in titles if _PHOTO_EXTENSION_RE.search(t)]

    async def _resolve_file_url(self, title: str) -> str | None:
        name = title.split(":", 1)[1] if ":" in title else title
        page = await self._query(titles=f"File:{name}", prop="imageinfo", iiprop="url")
        info = page.get("imageinfo") or []
        return info[0].get("url") if info else None

    # -- step 3 ---------------------------------------------------------

    async def _wikidata_image(self, species_id: str) -> str | None:
        search = await self._get_json(
            self._wikidata_api,
            {
                "action": "wbsearchentities",
                "search": species_id,
                "language": "en",
                "format": "json",
            },
        )
        hits = search.get("search") or []
        if not hits:
            return None
        qid = hits[0].get("id")
        if not qid:
            return None

        entity_payload = await self._get_json(f"{self._entity_url}/{qid}.json")
        entity = (entity_payload.get("entities") or {}).get(qid) or {}
        claims = (entity.get("claims") or {}).get("P18") or []
        if not claims:
            return None
        file_name = claims[0].get("mainsnak", {}).get("datavalue", {}).get("value")
        if not file_name:
            return None
        return _COMMONS_FILE_PATH_URL + quote(file_name)

    # ------------------------------------------------------------------
    # IImageProvider implementation
    # ------------------------------------------------------------------

    async def find_images(self, species_id: str, limit: int | None = None) -> list[str]:
        limit = min(limit, self._default_limit) if limit is not None else self._default_limit
        if limit <= 0:
            return []
        # dict keeps insertion order and gives set semantics on URL equality
        found: dict[str, None] = {}

        try:
            thumbnail = await self._lead_thumbnail(species_id)
            if thumbnail:
                found[thumbnail] = None
        except _STEP_ERRORS as exc:
            logger.warning("wikipedia_thumbnail_failed", species=species_id, error=str(exc))

        if len(found) < limit:
            try:
                for title in await self._embedded_photo_titles(species_id):
                    url = await self._resolve_file_url(title)
                    if url:
                        found[url] = None
                        if len(found) >= limit:
                            break
            except _STEP_ERRORS as exc:
                logger.warning("wikipedia_page_images_failed", species=species_id, error=str(exc))

        if len(found) < limit:
            try:
                p18 = await self._wikidata_image(species_id)
                if p18:
                    found[p18] = None
            except _STEP_ERRORS as exc:
                logger.warning("wikidata_image_failed", species=species_id, error=str(exc))

        urls = list(found)[:limit]
        logger.info("wikipedia_images_found", species=species_id, count=len(urls))
        return urls

    def get_provider_name(self) -> str:
        return "wikipedia"

    def is_available(self) -> bool:
        return True
