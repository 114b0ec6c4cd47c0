"""
In-Memory Person Store

Single-owner map of person records for local runs and tests. One
``asyncio.Lock`` serializes transactions; each transaction works on a
private copy of the map which is swapped in on commit, so a rolled back
transaction leaves the store untouched.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from ..core.tx import Tx, with_tx
from ..domain import PersonId, PersonRecord, Revision
from .exceptions import UpdateConflict, UpdateNotFound
from .interfaces import PersonDao

logger = logging.getLogger(__name__)


@dataclass
class MemoryTransaction:
    """Working copy of the store visible to one transaction."""

    persons: Dict[PersonId, PersonRecord] = field(default_factory=dict)


class InMemoryPersonStore:
    """Owner of the backing map; only transactions may read or write it."""

    def __init__(self):
        self._persons: Dict[PersonId, PersonRecord] = {}
        self._lock = asyncio.Lock()

    async def begin(self) -> MemoryTransaction:
        await self._lock.acquire()
        return MemoryTransaction(persons=dict(self._persons))

    async def commit(self, tx: MemoryTransaction) -> None:
        try:
            self._persons = tx.persons
        finally:
            self._lock.release()

    async def rollback(self, tx: MemoryTransaction) -> None:
        self._lock.release()

    def __len__(self) -> int:
        return len(self._persons)


class InMemoryPersonDao(PersonDao[MemoryTransaction]):
    """DAO operating on a ``MemoryTransaction`` working copy."""

    def insert(self, record: PersonRecord) -> Tx[MemoryTransaction, PersonId]:
        async def _insert(ctx: MemoryTransaction) -> PersonId:
            person_id = uuid4()
            ctx.persons[person_id] = record
            logger.debug("Inserted person", extra={"person_id": str(person_id)})
            return person_id

        return with_tx(_insert)

    def fetch(self, person_id: PersonId) -> Tx[MemoryTransaction, Optional[PersonRecord]]:
        async def _fetch(ctx: MemoryTransaction) -> Optional[PersonRecord]:
            return ctx.persons.get(person_id)

        return with_tx(_fetch)

    def select(self) -> Tx[MemoryTransaction, List[Tuple[PersonId, PersonRecord]]]:
        async def _select(ctx: MemoryTransaction):
            return list(ctx.persons.items())

        return with_tx(_select)

    def save(
        self, person_id: PersonId, expected_revision: Revision, record: PersonRecord
    ) -> Tx[MemoryTransaction, None]:
        async def _save(ctx: MemoryTransaction) -> None:
            existing = ctx.persons.get(person_id)
            if existing is None:
                raise UpdateNotFound(person_id)
            if existing.revision >= expected_revision:
                raise UpdateConflict(person_id, existing.revision, expected_revision)
            ctx.persons[person_id] = record

        return with_tx(_save)

    def delete(self, person_id: PersonId) -> Tx[MemoryTransaction, None]:
        async def _delete(ctx: MemoryTransaction) -> None:
            ctx.persons.pop(person_id, None)

        return with_tx(_delete)
