"""
Person Domain

Entity, record layout and domain errors for the person registry.
"""

from .person import (
    Person,
    PersonRecord,
    PersonId,
    Revision,
    PersonDomainError,
    AlreadyDead,
    DeathBeforeBirth,
)

__all__ = [
    "Person",
    "PersonRecord",
    "PersonId",
    "Revision",
    "PersonDomainError",
    "AlreadyDead",
    "DeathBeforeBirth",
]
