"""
SOS notification backends.

The ingestion path only knows the ``SOSNotifier`` interface; delivery is
pluggable through configuration.
"""

from datetime import datetime, timezone
import logging

import httpx

from guardian.config import Settings

logger = logging.getLogger(__name__)


class SOSNotifier:
    """Outbound alert interface called for every SOS report."""

    async def notify(self, device_id: str, lat: float, lng: float) -> bool:
        raise NotImplementedError

    async def close(self):
        pass


class LogNotifier(SOSNotifier):
    """Default backend: the alert is only recorded in the logs."""

    async def notify(self, device_id: str, lat: float, lng: float) -> bool:
        logger.info(
            f"SOS notification for {device_id} at {lat:.5f}, {lng:.5f} "
            "(no delivery backend configured)"
        )
        return True


class WebhookNotifier(SOSNotifier):
    """POSTs a JSON alert to a configured URL."""

    def __init__(self, url: str, timeout: float = 10.0, client: httpx.AsyncClient = None):
        self.url = url
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def notify(self, device_id: str, lat: float, lng: float) -> bool:
        payload = {
            "event": "sos",
            "device_id": device_id,
            "lat": lat,
            "lng": lng,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "Guardian-Location-API/1.0"
        }

        try:
            response = await self.client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"SOS webhook request failed: {e}")
            return False

        if response.status_code in [200, 201, 202, 204]:
            logger.info(f"SOS webhook sent successfully to {self.url}")
            return True

        logger.warning(
            f"SOS webhook failed with status {response.status_code}: {response.text}"
        )
        return False

    async def close(self):
        await self.client.aclose()


def build_notifier(settings: Settings) -> SOSNotifier:
    if settings.sos_webhook_url:
        return WebhookNotifier(settings.sos_webhook_url, timeout=settings.sos_webhook_timeout)
    return LogNotifier()
