"""Abstract base class for best-effort event notifications.

Notifications are side effects that run after the main work is done and
persisted.  Implementations must never raise: a failed notification is
logged and forgotten.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

PLANT_DETAILS_CACHED_EVENT = "plant_details_cached"


# Concrete implementation: HttpWebhookNotifier (src/providers/notification/)
class IWebhookNotifier(ABC):
    """Contract for fire-and-forget event delivery."""

    @abstractmethod
    async def notify(self, event_type: str, payload: dict[str, Any]) -> bool:
        """Deliver *payload* tagged with *event_type*.

        Returns ``True`` if the receiver acknowledged it, ``False`` on any
        failure or when notifications are disabled.
        """

    @abstractmethod
    def is_enabled(self) -> bool:
        """Return ``True`` if a destination is configured."""
