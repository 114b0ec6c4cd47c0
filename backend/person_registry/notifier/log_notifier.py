"""
Log Notifier

Writes notifications to the structured application log.
"""

import structlog

from .base import Notifier

logger = structlog.get_logger()


class LogNotifier(Notifier):
    """Notification channel backed by the application log."""

    def __init__(self, level: str = "warning"):
        self.level = level.lower()

    async def notify(self, recipient: str, message: str) -> None:
        log_method = {
            "info": logger.info,
            "warning": logger.warning,
            "error": logger.error,
            "critical": logger.critical,
        }.get(self.level, logger.warning)

        log_method("NOTIFICATION", recipient=recipient, message=message)
