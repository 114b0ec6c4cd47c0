"""
Person Service

Owns the transaction boundary: each operation begins a context, runs one
composed usecase unit against it and commits on success or rolls back on
failure.
"""

import time
from datetime import date
from typing import Any, Generic, List, Optional, Tuple, TypeVar

import structlog
from prometheus_client import Histogram
from pydantic import ValidationError

from ..core.tx import Tx, with_tx
from ..domain import Person, PersonDomainError, PersonId, PersonRecord
from ..usecase import PersonUsecase, UsecaseError
from .exceptions import (
    InvalidErrorKind,
    InvalidRequest,
    ServiceUnavailable,
    TransactionFailed,
)
from .output_boundary import NullOutputBoundary, PersonOutputBoundary
from .transactions import TransactionManager

logger = structlog.get_logger()

Ctx = TypeVar("Ctx")
T = TypeVar("T")

TRANSACTION_DURATION = Histogram(
    "person_transaction_duration_seconds",
    "Time spent inside person service transactions",
    ["operation"],
)


class PersonService(Generic[Ctx]):
    """
    Transactional person service.

    Business failures surface as ``TransactionFailed``; failures of the
    transaction machinery itself surface as ``ServiceUnavailable``.
    """

    def __init__(
        self,
        usecase: PersonUsecase[Ctx],
        tx_manager: TransactionManager[Ctx],
        output_boundary: Optional[PersonOutputBoundary] = None,
    ):
        self.usecase = usecase
        self.tx_manager = tx_manager
        self.output_boundary = (
            output_boundary if output_boundary is not None else NullOutputBoundary()
        )

    async def run_tx(self, operation: str, unit: Tx[Ctx, T]) -> T:
        """
        Run ``unit`` inside a fresh transaction.

        Args:
            operation: Operation name used for logs and metrics
            unit: Usecase unit to run

        Returns:
            The unit's value, after a successful commit

        Raises:
            TransactionFailed: If the unit raised a ``UsecaseError``
            ServiceUnavailable: If begin, commit or rollback failed
        """
        start_time = time.time()
        try:
            try:
                ctx = await self.tx_manager.begin()
            except Exception as e:
                logger.error("Failed to begin transaction", operation=operation, error=str(e))
                raise ServiceUnavailable("cannot begin transaction", e) from e

            try:
                result = await unit.run(ctx)
            except UsecaseError as e:
                logger.warning(
                    "Transaction aborted",
                    operation=operation,
                    error=e.message,
                    error_code=e.error_code,
                )
                await self._rollback(operation, ctx)
                raise TransactionFailed(e) from e
            except BaseException:
                await self._rollback(operation, ctx)
                raise

            try:
                await self.tx_manager.commit(ctx)
            except Exception as e:
                logger.error("Failed to commit transaction", operation=operation, error=str(e))
                raise ServiceUnavailable("cannot commit transaction", e) from e

            logger.debug("Transaction committed", operation=operation)
            return result
        finally:
            TRANSACTION_DURATION.labels(operation=operation).observe(
                time.time() - start_time
            )

    async def _rollback(self, operation: str, ctx: Ctx) -> None:
        try:
            await self.tx_manager.rollback(ctx)
        except Exception as e:
            logger.error(
                "Failed to roll back transaction", operation=operation, error=str(e)
            )
            raise ServiceUnavailable("cannot roll back transaction", e) from e

    async def register(
        self,
        name: str,
        birth_date: date,
        death_date: Optional[date] = None,
        data: Optional[str] = None,
    ) -> Tuple[PersonId, PersonRecord]:
        logger.debug(
            "Service: register",
            name=name,
            birth_date=birth_date.isoformat(),
            death_date=death_date.isoformat() if death_date else None,
        )
        record = self._new_record(name, birth_date, death_date, data)
        return await self.run_tx("register", self.usecase.entry_and_verify(record))

    @staticmethod
    def _new_record(
        name: str,
        birth_date: date,
        death_date: Optional[date],
        data: Optional[str],
    ) -> PersonRecord:
        """Build the record of a new person; rejects it with ``InvalidRequest``."""
        try:
            person = Person(name, birth_date, data=data)
            if death_date is not None:
                person.dead_at(death_date)
            return person.to_record()
        except (PersonDomainError, ValidationError) as e:
            logger.warning("Rejected person registration", name=name, error=str(e))
            raise InvalidRequest(InvalidErrorKind.INVALID_ARGUMENT, str(e)) from e

    async def find(self, person_id: PersonId) -> Optional[PersonRecord]:
        logger.debug("Service: find", person_id=str(person_id))
        return await self.run_tx("find", self.usecase.find(person_id))

    async def batch_import(self, records: List[PersonRecord]) -> List[PersonId]:
        """
        Insert all ``records`` in one transaction.

        Either every record is stored or none is. Ids are returned in input
        order. Progress is reported to the output boundary.
        """
        total = len(records)
        logger.debug("Service: batch import", total=total)

        async def _import(ctx: Any) -> List[PersonId]:
            ids: List[PersonId] = []
            for record in records:
                ids.append(await self.usecase.entry(record).run(ctx))
                self.output_boundary.in_progress(len(ids), total)
            return ids

        self.output_boundary.started()
        try:
            ids = await self.run_tx("batch_import", with_tx(_import))
        except Exception as e:
            self.output_boundary.aborted_with(e)
            raise
        self.output_boundary.completed()
        return ids

    async def list_all(self) -> List[Tuple[PersonId, PersonRecord]]:
        logger.debug("Service: list all")
        return await self.run_tx("list_all", self.usecase.collect())

    async def death(self, person_id: PersonId, death_date: date) -> None:
        logger.debug(
            "Service: death", person_id=str(person_id), death_date=death_date.isoformat()
        )
        await self.run_tx("death", self.usecase.apply_death(person_id, death_date))

    async def unregister(self, person_id: PersonId) -> None:
        logger.debug("Service: unregister", person_id=str(person_id))
        await self.run_tx("unregister", self.usecase.remove(person_id))
