"""
Cache Exceptions

Errors raised by person cache adapters. They never escape the cached
service.
"""

from typing import Any, Dict, Optional


class CaoError(Exception):
    """Base exception for person cache errors."""

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


class CaoUnavailable(CaoError):
    """Raised when the cache cannot serve a request."""

    def __init__(
        self,
        reason: str,
        key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.reason = reason
        details: Dict[str, Any] = {"reason": reason}
        if key:
            details["key"] = key
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=f"cache unavailable: {reason}",
            error_code="CACHE_UNAVAILABLE",
            details=details,
        )
        # Preserve exception context for debugging (exception chaining)
        if original_error:
            self.__cause__ = original_error
