"""
Person Domain Model

Domain entity, its persisted/cached record layout and the domain rules
that govern changes to a person.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Opaque identifier assigned by the persistence backend on insert.
PersonId = UUID

# Optimistic-concurrency counter of a persisted record.
Revision = int


class PersonDomainError(Exception):
    """Base exception for rejected changes to a person."""

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


class AlreadyDead(PersonDomainError):
    """Raised when a death date is applied to a person who already has one."""

    def __init__(self, death_date: date):
        super().__init__(
            message=f"person already dead at {death_date.isoformat()}",
            error_code="PERSON_ALREADY_DEAD",
            details={"death_date": death_date.isoformat()},
        )


class DeathBeforeBirth(PersonDomainError):
    """Raised when a death date precedes the birth date."""

    def __init__(self, birth_date: date, death_date: date):
        super().__init__(
            message=(
                f"death date {death_date.isoformat()} precedes "
                f"birth date {birth_date.isoformat()}"
            ),
            error_code="PERSON_DEATH_BEFORE_BIRTH",
            details={
                "birth_date": birth_date.isoformat(),
                "death_date": death_date.isoformat(),
            },
        )


class PersonRecord(BaseModel):
    """
    Person snapshot as stored by the DAO and transported through the cache.

    Serialized as ``{name, birth_date, death_date, data, revision}`` with
    ISO dates and ``null`` for absent optional fields.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Person name")
    birth_date: date = Field(..., description="Date of birth")
    death_date: Optional[date] = Field(default=None, description="Date of death")
    data: Optional[str] = Field(default=None, description="Free-form data")
    revision: Revision = Field(default=0, ge=0, description="Record revision")

    def next_revision(self, **changes: Any) -> "PersonRecord":
        """Copy of this record with ``changes`` applied and revision bumped."""
        return self.model_copy(update={**changes, "revision": self.revision + 1})


@dataclass
class Person:
    """Person entity (as domain object)."""

    name: str
    birth_date: date
    death_date: Optional[date] = None
    data: Optional[str] = None

    @classmethod
    def from_record(cls, record: PersonRecord) -> "Person":
        return cls(
            name=record.name,
            birth_date=record.birth_date,
            death_date=record.death_date,
            data=record.data,
        )

    def to_record(self, revision: Revision = 0) -> PersonRecord:
        return PersonRecord(
            name=self.name,
            birth_date=self.birth_date,
            death_date=self.death_date,
            data=self.data,
            revision=revision,
        )

    @property
    def is_dead(self) -> bool:
        return self.death_date is not None

    def dead_at(self, death_date: date) -> None:
        """
        Record the death of this person.

        Raises:
            AlreadyDead: If a death date is already recorded
            DeathBeforeBirth: If ``death_date`` precedes the birth date
        """
        if self.death_date is not None:
            raise AlreadyDead(self.death_date)
        if death_date < self.birth_date:
            raise DeathBeforeBirth(self.birth_date, death_date)
        self.death_date = death_date

    def __str__(self) -> str:
        return (
            f"Person {{ name: {self.name}, birth_date: {self.birth_date}, "
            f"death_date: {self.death_date}, data: {self.data} }}"
        )
