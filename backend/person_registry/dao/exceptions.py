"""
Persistence Exceptions

Structured errors raised by person DAO implementations.
"""

from typing import Optional, Any, Dict


class DaoError(Exception):
    """Base exception for persistence errors.

    All DAO operations raise this or its subclasses; backend errors are
    chained as ``__cause__`` so no context is lost.
    """

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


class InsertFailed(DaoError):
    """Raised when a record cannot be inserted."""

    def __init__(self, message: str = "insert failed"):
        super().__init__(message=message, error_code="DAO_INSERT_FAILED")


class QueryFailed(DaoError):
    """Raised when fetch or select cannot be executed."""

    def __init__(self, message: str = "query failed"):
        super().__init__(message=message, error_code="DAO_QUERY_FAILED")


class UpdateConflict(DaoError):
    """Raised when the stored revision is not older than the expected one."""

    def __init__(self, person_id: Any, stored_revision: int, expected_revision: int):
        super().__init__(
            message=(
                f"revision conflict on {person_id}: stored {stored_revision}, "
                f"expected newer than stored but got {expected_revision}"
            ),
            error_code="DAO_UPDATE_CONFLICT",
            details={
                "person_id": str(person_id),
                "stored_revision": stored_revision,
                "expected_revision": expected_revision,
            },
        )


class UpdateNotFound(DaoError):
    """Raised when the record to update does not exist."""

    def __init__(self, person_id: Any):
        super().__init__(
            message=f"person with id {person_id} not found",
            error_code="DAO_UPDATE_NOT_FOUND",
            details={"person_id": str(person_id)},
        )


class DeleteFailed(DaoError):
    """Raised when a record cannot be deleted."""

    def __init__(self, message: str = "delete failed"):
        super().__init__(message=message, error_code="DAO_DELETE_FAILED")
