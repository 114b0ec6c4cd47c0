"""
Cached Person Service

Cache-aside decorator over the person service. Reads consult the cache
before the store; writes populate or invalidate the cache after the store
has committed. The cache only ever affects side effects: every value
returned and every error raised comes from the wrapped service.

Failures of cache writes and invalidations are reported to an
administrator through the notifier. Cache read failures are treated as
misses and never reported.
"""

from datetime import date
from typing import Any, List, Optional, Tuple

import structlog
from opentelemetry import trace
from prometheus_client import Counter

from .cache import PersonCao
from .core.tx import Tx
from .domain import PersonId, PersonRecord
from .notifier import Notifier
from .service import InvalidErrorKind, InvalidRequest, PersonService

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

CACHE_REQUESTS = Counter(
    "person_cache_requests_total",
    "Person cache operations by outcome",
    ["operation", "outcome"],
)
NOTIFICATIONS = Counter(
    "person_notifications_total",
    "Cache failure notifications by outcome",
    ["outcome"],
)


class PersonCachedService:
    """
    Person service with a cache in front of it.

    Args:
        service: Transactional person service (source of truth)
        cao: Cache access object
        notifier: Channel for cache failure alerts
        admin_recipient: Recipient of cache failure alerts
    """

    def __init__(
        self,
        service: PersonService,
        cao: PersonCao,
        notifier: Notifier,
        admin_recipient: str = "admin",
    ):
        self.service = service
        self.cao = cao
        self.notifier = notifier
        self.admin_recipient = admin_recipient

    async def register(
        self,
        name: str,
        birth_date: date,
        death_date: Optional[date] = None,
        data: Optional[str] = None,
    ) -> Tuple[PersonId, PersonRecord]:
        with tracer.start_as_current_span("person_cached_service.register") as span:
            try:
                person_id, record = await self.service.register(
                    name, birth_date, death_date, data
                )
            except Exception as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

            span.set_attribute("person_id", str(person_id))
            await self._cache_write(
                "register", self.cao.load(person_id, record), person_id
            )
            return person_id, record

    async def find(self, person_id: PersonId) -> Optional[PersonRecord]:
        with tracer.start_as_current_span("person_cached_service.find") as span:
            span.set_attribute("person_id", str(person_id))

            cached = await self._cache_find(person_id)
            if cached is not None:
                span.set_attribute("cache_hit", True)
                return cached
            span.set_attribute("cache_hit", False)

            try:
                record = await self.service.find(person_id)
            except Exception as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

            if record is not None:
                await self._cache_write("find", self.cao.load(person_id, record), person_id)
            return record

    async def batch_import(self, records: List[PersonRecord]) -> List[PersonId]:
        """
        Import ``records`` in one transaction and cache them.

        Raises:
            InvalidRequest: If ``records`` is empty; the store is not touched
            TransactionFailed: If any record cannot be stored
        """
        with tracer.start_as_current_span("person_cached_service.batch_import") as span:
            span.set_attribute("record_count", len(records))
            if not records:
                span.set_status(trace.Status(trace.StatusCode.ERROR, "empty batch"))
                raise InvalidRequest(InvalidErrorKind.EMPTY_ARGUMENT)

            try:
                ids = await self.service.batch_import(records)
            except Exception as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

            await self._cache_load_all("batch_import", list(zip(ids, records)))
            return ids

    async def list_all(self) -> List[Tuple[PersonId, PersonRecord]]:
        with tracer.start_as_current_span("person_cached_service.list_all") as span:
            try:
                persons = await self.service.list_all()
            except Exception as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

            span.set_attribute("record_count", len(persons))
            await self._cache_load_all("list_all", persons)
            return persons

    async def death(self, person_id: PersonId, death_date: date) -> None:
        with tracer.start_as_current_span("person_cached_service.death") as span:
            span.set_attribute("person_id", str(person_id))
            try:
                await self.service.death(person_id, death_date)
            except Exception as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

            await self._cache_write("death", self.cao.unload(person_id), person_id)

    async def unregister(self, person_id: PersonId) -> None:
        """Invalidate the cached entry, then delete the stored record."""
        with tracer.start_as_current_span("person_cached_service.unregister") as span:
            span.set_attribute("person_id", str(person_id))

            await self._cache_write("unregister", self.cao.unload(person_id), person_id)

            try:
                await self.service.unregister(person_id)
            except Exception as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

    async def _cache_find(self, person_id: PersonId) -> Optional[PersonRecord]:
        try:
            record = await self.cao.run_tx(self.cao.find(person_id))
        except Exception as e:
            CACHE_REQUESTS.labels(operation="find", outcome="error").inc()
            logger.warning(
                "Cache read failed, falling back to store",
                person_id=str(person_id),
                error=str(e),
            )
            return None

        outcome = "hit" if record is not None else "miss"
        CACHE_REQUESTS.labels(operation="find", outcome=outcome).inc()
        logger.debug("Cache lookup", person_id=str(person_id), outcome=outcome)
        return record

    async def _cache_write(
        self, operation: str, unit: Tx[Any, None], person_id: PersonId
    ) -> bool:
        try:
            await self.cao.run_tx(unit)
        except Exception as e:
            CACHE_REQUESTS.labels(operation=operation, outcome="error").inc()
            logger.warning(
                "Cache update failed",
                operation=operation,
                person_id=str(person_id),
                error=str(e),
            )
            await self._notify(
                f"cache unavailable during {operation} of person {person_id}: {e}"
            )
            return False

        CACHE_REQUESTS.labels(operation=operation, outcome="ok").inc()
        return True

    async def _cache_load_all(
        self, operation: str, persons: List[Tuple[PersonId, PersonRecord]]
    ) -> None:
        for person_id, record in persons:
            if not await self._cache_write(
                operation, self.cao.load(person_id, record), person_id
            ):
                # The cache is presumed down; the remaining entries are skipped
                break

    async def _notify(self, message: str) -> None:
        try:
            await self.notifier.notify(self.admin_recipient, message)
        except Exception as e:
            NOTIFICATIONS.labels(outcome="failed").inc()
            logger.error(
                "Failed to notify cache failure",
                recipient=self.admin_recipient,
                error=str(e),
                exc_info=True,
            )
            return

        NOTIFICATIONS.labels(outcome="sent").inc()
