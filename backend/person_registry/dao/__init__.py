"""
Person Persistence

DAO port and its PostgreSQL and in-memory backends.
"""

from .exceptions import (
    DaoError,
    DeleteFailed,
    InsertFailed,
    QueryFailed,
    UpdateConflict,
    UpdateNotFound,
)
from .interfaces import PersonDao
from .memory import InMemoryPersonDao, InMemoryPersonStore, MemoryTransaction
from .postgres import SqlAlchemyPersonDao

__all__ = [
    "DaoError",
    "DeleteFailed",
    "InsertFailed",
    "QueryFailed",
    "UpdateConflict",
    "UpdateNotFound",
    "PersonDao",
    "InMemoryPersonDao",
    "InMemoryPersonStore",
    "MemoryTransaction",
    "SqlAlchemyPersonDao",
]
