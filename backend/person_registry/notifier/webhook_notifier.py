"""
Webhook Notifier

Posts notifications to an HTTP endpoint.
"""

from typing import Dict, Optional

import httpx
import structlog

from .base import Notifier, NotifierUnavailable

logger = structlog.get_logger()


class WebhookNotifier(Notifier):
    """Notification channel backed by an HTTP webhook."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.headers = headers or {}
        self._transport = transport

    async def notify(self, recipient: str, message: str) -> None:
        payload = {"recipient": recipient, "message": message}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.url, json=payload, headers=self.headers
                )
                response.raise_for_status()

        except httpx.HTTPError as e:
            logger.error(
                "Failed to send webhook notification",
                webhook_url=self.url,
                recipient=recipient,
                error=str(e),
            )
            raise NotifierUnavailable(
                f"webhook {self.url} failed", original_error=e
            ) from e

        logger.info(
            "Webhook notification sent",
            webhook_url=self.url,
            recipient=recipient,
            status_code=response.status_code,
        )
