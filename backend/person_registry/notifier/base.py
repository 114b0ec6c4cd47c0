"""
Notifier Interface

Best-effort out-of-band alerting. Notifications are fire-and-forget and
never persisted.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class NotifierError(Exception):
    """Base exception for notification errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class NotifierUnavailable(NotifierError):
    """Raised when a notification cannot be delivered."""

    def __init__(self, reason: str, original_error: Optional[Exception] = None):
        self.reason = reason
        details: Dict[str, Any] = {"reason": reason}
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=f"notifier unavailable: {reason}",
            error_code="NOTIFIER_UNAVAILABLE",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error


class Notifier(ABC):
    """Delivers a message to a recipient."""

    @abstractmethod
    async def notify(self, recipient: str, message: str) -> None:
        """
        Deliver ``message`` to ``recipient``.

        Raises:
            NotifierUnavailable: If the message cannot be delivered
        """

    async def close(self) -> None:
        """Release resources held by the notifier."""
