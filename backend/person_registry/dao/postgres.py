"""
SQLAlchemy Person DAO

PostgreSQL-backed person persistence. The context is the ``AsyncSession``
of the surrounding service transaction; this DAO only flushes, it never
commits or rolls back.
"""

from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.tx import Tx, with_tx
from ..domain import PersonId, PersonRecord, Revision
from ..models import PersonModel
from .exceptions import (
    DeleteFailed,
    InsertFailed,
    QueryFailed,
    UpdateConflict,
    UpdateNotFound,
)
from .interfaces import PersonDao

logger = structlog.get_logger()


def _to_record(row: PersonModel) -> PersonRecord:
    return PersonRecord(
        name=row.name,
        birth_date=row.birth_date,
        death_date=row.death_date,
        data=row.data,
        revision=row.revision,
    )


class SqlAlchemyPersonDao(PersonDao[AsyncSession]):
    """Person DAO over an SQLAlchemy ``AsyncSession``."""

    def insert(self, record: PersonRecord) -> Tx[AsyncSession, PersonId]:
        async def _insert(session: AsyncSession) -> PersonId:
            row = PersonModel(
                name=record.name,
                birth_date=record.birth_date,
                death_date=record.death_date,
                data=record.data,
                revision=record.revision,
            )
            try:
                session.add(row)
                await session.flush()
            except SQLAlchemyError as e:
                logger.error("DAO: Failed to insert person", error=str(e))
                raise InsertFailed(str(e)) from e

            logger.debug("DAO: Person inserted", person_id=str(row.id))
            return row.id

        return with_tx(_insert)

    def fetch(self, person_id: PersonId) -> Tx[AsyncSession, Optional[PersonRecord]]:
        async def _fetch(session: AsyncSession) -> Optional[PersonRecord]:
            try:
                row = await session.get(PersonModel, person_id)
            except SQLAlchemyError as e:
                logger.error(
                    "DAO: Failed to fetch person", person_id=str(person_id), error=str(e)
                )
                raise QueryFailed(str(e)) from e

            return _to_record(row) if row is not None else None

        return with_tx(_fetch)

    def select(self) -> Tx[AsyncSession, List[Tuple[PersonId, PersonRecord]]]:
        async def _select(session: AsyncSession):
            try:
                result = await session.execute(select(PersonModel))
                rows = list(result.scalars().all())
            except SQLAlchemyError as e:
                logger.error("DAO: Failed to select persons", error=str(e))
                raise QueryFailed(str(e)) from e

            logger.debug("DAO: Persons selected", count=len(rows))
            return [(row.id, _to_record(row)) for row in rows]

        return with_tx(_select)

    def save(
        self, person_id: PersonId, expected_revision: Revision, record: PersonRecord
    ) -> Tx[AsyncSession, None]:
        async def _save(session: AsyncSession) -> None:
            try:
                row = await session.get(PersonModel, person_id, with_for_update=True)
            except SQLAlchemyError as e:
                raise QueryFailed(str(e)) from e

            if row is None:
                raise UpdateNotFound(person_id)
            if row.revision >= expected_revision:
                raise UpdateConflict(person_id, row.revision, expected_revision)

            row.name = record.name
            row.birth_date = record.birth_date
            row.death_date = record.death_date
            row.data = record.data
            row.revision = record.revision
            try:
                await session.flush()
            except SQLAlchemyError as e:
                logger.error(
                    "DAO: Failed to save person", person_id=str(person_id), error=str(e)
                )
                raise QueryFailed(str(e)) from e

        return with_tx(_save)

    def delete(self, person_id: PersonId) -> Tx[AsyncSession, None]:
        async def _delete(session: AsyncSession) -> None:
            try:
                await session.execute(
                    delete(PersonModel).where(PersonModel.id == person_id)
                )
            except SQLAlchemyError as e:
                logger.error(
                    "DAO: Failed to delete person", person_id=str(person_id), error=str(e)
                )
                raise DeleteFailed(str(e)) from e

        return with_tx(_delete)
