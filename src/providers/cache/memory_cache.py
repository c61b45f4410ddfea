"""In-memory cache provider using cachetools.TTLCache.

Single-process only: each worker keeps its own copy, which is fine for
memoising image lookups that are cheap to redo.
"""

from __future__ import annotations

from typing import Any

import structlog
from cachetools import TTLCache

from src.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """TTL cache with LRU eviction once *max_size* entries are held.

    Parameters
    ----------
    max_size:
        Maximum number of entries kept.
    ttl:
        Seconds an entry stays valid after it was written.
    """

    def __init__(self, max_size: int = 500, ttl: float = 3600) -> None:
        self._cache: TTLCache[str, Any] = TTLCache(maxsize=max_size, ttl=ttl)

    async def get(self, key: str) -> Any | None:
        value = self._cache.get(key)
        logger.debug("cache_hit" if value is not None else "cache_miss", key=key)
        return value

    async def set(self, key: str, value: Any) -> None:
        self._cache[key] = value
        logger.debug("cache_set", key=key, entries=len(self._cache))

    def __len__(self) -> int:
        return len(self._cache)
