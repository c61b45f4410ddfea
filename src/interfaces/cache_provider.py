"""Abstract base class for short-lived key-value caches.

Used by the image aggregator to memoise provider results so repeated
misses on the plant store do not hammer Trefle and Wikipedia.  This is a
convenience layer only; the plant store stays the source of truth.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# Concrete implementation: MemoryCacheProvider (src/providers/cache/)
class ICacheProvider(ABC):
    """Contract for key-value cache services.

    Async so a network-backed store can be dropped in without blocking the
    event loop.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value stored under *key*, or ``None`` if absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""
