"""
Service Exceptions

Errors surfaced by the person service. ``TransactionFailed`` carries the
business failure; ``ServiceUnavailable`` means the transaction boundary
itself could not be driven.
"""

from enum import Enum
from typing import Any, Dict, Optional

from ..usecase import UsecaseError


class InvalidErrorKind(str, Enum):
    """Kinds of rejected requests."""

    EMPTY_ARGUMENT = "empty_argument"
    INVALID_ARGUMENT = "invalid_argument"


class ServiceError(Exception):
    """Base exception for person service errors."""

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


class TransactionFailed(ServiceError):
    """Raised when the usecase run inside a transaction fails."""

    def __init__(self, usecase_error: UsecaseError):
        self.usecase_error = usecase_error
        super().__init__(
            message=f"transaction failed: {usecase_error.message}",
            error_code="SERVICE_TRANSACTION_FAILED",
            details={"usecase_error": usecase_error.error_code, **usecase_error.details},
        )
        self.__cause__ = usecase_error


class ServiceUnavailable(ServiceError):
    """Raised when a transaction cannot be begun, committed or rolled back."""

    def __init__(self, reason: str, original_error: Optional[Exception] = None):
        self.reason = reason
        details: Dict[str, Any] = {"reason": reason}
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=f"service unavailable: {reason}",
            error_code="SERVICE_UNAVAILABLE",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error


class InvalidRequest(ServiceError):
    """Raised when a request is rejected before reaching the store."""

    def __init__(self, kind: InvalidErrorKind, reason: Optional[str] = None):
        self.kind = kind
        self.reason = reason
        details: Dict[str, Any] = {"kind": kind.value}
        message = f"invalid request: {kind.value}"
        if reason:
            details["reason"] = reason
            message = f"{message}: {reason}"

        super().__init__(
            message=message,
            error_code="SERVICE_INVALID_REQUEST",
            details=details,
        )
