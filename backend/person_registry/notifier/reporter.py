"""
Reporter Notifier

Fans a notification out over several channels.
"""

from typing import List

import structlog

from .base import Notifier, NotifierUnavailable

logger = structlog.get_logger()


class ReporterNotifier(Notifier):
    """
    Delivers every notification to all registered channels.

    Delivery succeeds when at least one channel accepts the message;
    channel failures are logged and only raised when all channels fail.
    """

    def __init__(self, channels: List[Notifier]):
        self.channels = list(channels)

    def register(self, channel: Notifier) -> None:
        self.channels.append(channel)

    async def notify(self, recipient: str, message: str) -> None:
        if not self.channels:
            raise NotifierUnavailable("no notification channels registered")

        delivered = 0
        last_error = None
        for channel in self.channels:
            try:
                await channel.notify(recipient, message)
                delivered += 1
            except Exception as e:
                last_error = e
                logger.error(
                    "Notification channel failed",
                    channel=type(channel).__name__,
                    recipient=recipient,
                    error=str(e),
                )

        if delivered == 0:
            raise NotifierUnavailable(
                f"all {len(self.channels)} channels failed", original_error=last_error
            )

    async def close(self) -> None:
        for channel in self.channels:
            await channel.close()
