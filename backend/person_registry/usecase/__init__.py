"""
Person Usecases

Business operations composed from DAO units.
"""

from .exceptions import (
    CollectFailed,
    DomainObjectChangeFailed,
    EntryFailed,
    FindFailed,
    RemoveFailed,
    SaveFailed,
    UsecaseError,
    VerificationFailed,
)
from .person import PersonUsecase

__all__ = [
    "PersonUsecase",
    "UsecaseError",
    "EntryFailed",
    "FindFailed",
    "VerificationFailed",
    "CollectFailed",
    "SaveFailed",
    "RemoveFailed",
    "DomainObjectChangeFailed",
]
