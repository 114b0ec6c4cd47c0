"""
Usecase Exceptions

Business-level errors wrapping the persistence or domain error that caused
them. The wrapped error is available as ``cause`` and as ``__cause__``.
"""

from typing import Any, Dict, Optional


class UsecaseError(Exception):
    """Base exception for failed person usecases."""

    error_code_default = "USECASE_ERROR"

    def __init__(
        self,
        cause: Optional[BaseException] = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.cause = cause
        self.message = message or self._default_message()
        self.error_code = self.error_code_default
        self.details = details or {}
        if cause is not None:
            self.details.setdefault("cause_type", type(cause).__name__)
            self.__cause__ = cause
        super().__init__(self.message)

    def _default_message(self) -> str:
        if self.cause is None:
            return type(self).__name__
        return f"{type(self).__name__}: {self.cause}"


class EntryFailed(UsecaseError):
    """Raised when a person cannot be entered."""

    error_code_default = "USECASE_ENTRY_FAILED"


class FindFailed(UsecaseError):
    """Raised when a person cannot be looked up."""

    error_code_default = "USECASE_FIND_FAILED"


class VerificationFailed(UsecaseError):
    """Raised when a freshly entered person cannot be read back."""

    error_code_default = "USECASE_VERIFICATION_FAILED"


class CollectFailed(UsecaseError):
    """Raised when persons cannot be listed."""

    error_code_default = "USECASE_COLLECT_FAILED"


class SaveFailed(UsecaseError):
    """Raised when an updated person cannot be saved."""

    error_code_default = "USECASE_SAVE_FAILED"


class RemoveFailed(UsecaseError):
    """Raised when a person cannot be removed."""

    error_code_default = "USECASE_REMOVE_FAILED"


class DomainObjectChangeFailed(UsecaseError):
    """Raised when the domain rules reject a change."""

    error_code_default = "USECASE_DOMAIN_CHANGE_FAILED"
