"""
Person Usecase

Business operations composed from DAO units. Every operation returns a
``Tx`` over the DAO's context; the service decides where it runs.
"""

from datetime import date
from typing import Generic, List, Optional, Tuple, TypeVar

import structlog

from ..core.tx import Tx
from ..dao import DaoError, PersonDao, UpdateNotFound
from ..domain import Person, PersonDomainError, PersonId, PersonRecord
from .exceptions import (
    CollectFailed,
    DomainObjectChangeFailed,
    EntryFailed,
    FindFailed,
    RemoveFailed,
    SaveFailed,
    VerificationFailed,
)

logger = structlog.get_logger()

Ctx = TypeVar("Ctx")


class PersonUsecase(Generic[Ctx]):
    """Person business operations over a ``PersonDao``."""

    def __init__(self, dao: PersonDao[Ctx]):
        self.dao = dao

    def entry(self, record: PersonRecord) -> Tx[Ctx, PersonId]:
        logger.debug("Usecase: entry", name=record.name)
        return self.dao.insert(record).map_err(EntryFailed, catch=DaoError)

    def find(self, person_id: PersonId) -> Tx[Ctx, Optional[PersonRecord]]:
        logger.debug("Usecase: find", person_id=str(person_id))
        return self.dao.fetch(person_id).map_err(FindFailed, catch=DaoError)

    def entry_and_verify(
        self, record: PersonRecord
    ) -> Tx[Ctx, Tuple[PersonId, PersonRecord]]:
        """
        Insert a record and read it back within the same transaction.

        Raises:
            EntryFailed: If the insert fails
            VerificationFailed: If the record cannot be read back
        """
        logger.debug("Usecase: entry and verify", name=record.name)

        def verify(person_id: PersonId) -> Tx[Ctx, Tuple[PersonId, PersonRecord]]:
            def not_found(_stored: Optional[PersonRecord]) -> VerificationFailed:
                return VerificationFailed(
                    message=f"person {person_id} not found after insert",
                    details={"person_id": str(person_id)},
                )

            return (
                self.dao.fetch(person_id)
                .map_err(VerificationFailed, catch=DaoError)
                .try_map(lambda stored: stored is not None, not_found)
                .map(lambda stored: (person_id, stored))
            )

        return self.entry(record).and_then(verify)

    def collect(self) -> Tx[Ctx, List[Tuple[PersonId, PersonRecord]]]:
        logger.debug("Usecase: collect")
        return self.dao.select().map_err(CollectFailed, catch=DaoError)

    def apply_death(self, person_id: PersonId, death_date: date) -> Tx[Ctx, None]:
        """
        Record the death of a stored person.

        The stored record is fetched, the domain rule applied and the
        result saved with the next revision.
        """
        logger.debug(
            "Usecase: apply death",
            person_id=str(person_id),
            death_date=death_date.isoformat(),
        )

        def change(stored: Optional[PersonRecord]) -> Tx[Ctx, None]:
            if stored is None:
                missing = UpdateNotFound(person_id)
                raise SaveFailed(missing) from missing

            person = Person.from_record(stored)
            try:
                person.dead_at(death_date)
            except PersonDomainError as e:
                raise DomainObjectChangeFailed(e) from e

            updated = stored.next_revision(death_date=person.death_date)
            return self.dao.save(person_id, updated.revision, updated).map_err(
                SaveFailed, catch=DaoError
            )

        return self.find(person_id).and_then(change)

    def remove(self, person_id: PersonId) -> Tx[Ctx, None]:
        logger.debug("Usecase: remove", person_id=str(person_id))
        return self.dao.delete(person_id).map_err(RemoveFailed, catch=DaoError)
