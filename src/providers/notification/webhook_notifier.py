"""HTTP webhook notifier.

POSTs a small JSON envelope to ``WEBHOOK_URL`` (a Make / Zapier style
automation hook) after a species record was persisted:

    {"type": "plant_details_cached", "timestamp": "...", "data": {...}}

Delivery is best effort: no retries, and every failure is logged and
swallowed so a broken hook can never affect a resolution.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx
import structlog

from src.interfaces.webhook_notifier import IWebhookNotifier

logger = structlog.get_logger(logger_name=__name__)


class HttpWebhookNotifier(IWebhookNotifier):
    """Webhook delivery over the shared ``httpx.AsyncClient``.

    An empty *webhook_url* disables the notifier entirely.
    """

    def __init__(self, webhook_url: str, http_client: httpx.AsyncClient) -> None:
        self._url = webhook_url.strip()
        self._client = http_client

    async def notify(self, event_type: str, payload: dict[str, Any]) -> bool:
        if not self.is_enabled():
            return False

        body = {
            "type": event_type,
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "data": payload,
        }
        try:
            response = await self._client.post(self._url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("webhook_delivery_failed", event_type=event_type, error=str(exc))
            return False

        logger.info("webhook_delivered", event_type=event_type, status=response.status_code)
        return True

    def is_enabled(self) -> bool:
        return bool(self._url)
