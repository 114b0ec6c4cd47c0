"""
Person Service

Transaction boundary, batch progress port and service errors.
"""

from .exceptions import (
    InvalidErrorKind,
    InvalidRequest,
    ServiceError,
    ServiceUnavailable,
    TransactionFailed,
)
from .output_boundary import (
    LoggingBatchImportPresenter,
    NullOutputBoundary,
    PersonOutputBoundary,
)
from .person_service import PersonService
from .transactions import (
    InMemoryTransactionManager,
    SqlTransactionManager,
    TransactionManager,
)

__all__ = [
    "PersonService",
    "ServiceError",
    "TransactionFailed",
    "ServiceUnavailable",
    "InvalidRequest",
    "InvalidErrorKind",
    "PersonOutputBoundary",
    "NullOutputBoundary",
    "LoggingBatchImportPresenter",
    "TransactionManager",
    "SqlTransactionManager",
    "InMemoryTransactionManager",
]
