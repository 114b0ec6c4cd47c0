"""
Person DAO Interface

Abstract persistence port. Every operation returns a deferred ``Tx``
which the service runs against its own transaction context, so the
same usecase logic drives every backend.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Tuple, TypeVar

from ..core.tx import Tx
from ..domain import PersonId, PersonRecord, Revision

Ctx = TypeVar("Ctx")


class PersonDao(ABC, Generic[Ctx]):
    """
    Abstract repository for person records.

    Implementations raise ``DaoError`` subclasses and never retry.
    """

    @abstractmethod
    def insert(self, record: PersonRecord) -> Tx[Ctx, PersonId]:
        """Insert a record; yields the backend-assigned id."""

    @abstractmethod
    def fetch(self, person_id: PersonId) -> Tx[Ctx, Optional[PersonRecord]]:
        """Fetch a record by id; yields None if absent."""

    @abstractmethod
    def select(self) -> Tx[Ctx, List[Tuple[PersonId, PersonRecord]]]:
        """Select all records (order unspecified, stable within one call)."""

    @abstractmethod
    def save(
        self, person_id: PersonId, expected_revision: Revision, record: PersonRecord
    ) -> Tx[Ctx, None]:
        """Replace a record if the stored revision is older than expected."""

    @abstractmethod
    def delete(self, person_id: PersonId) -> Tx[Ctx, None]:
        """Delete a record; deleting an absent id is not an error."""
