"""
Application Container

Selects and wires the persistence, cache and notification backends once,
from settings, at startup.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog
from redis.asyncio import ConnectionPool

from .cache import InMemoryPersonCao, PersonCao, RedisPersonCao, create_redis_pool
from .cached_service import PersonCachedService
from .core.config import Settings, get_settings
from .core.database import DatabaseManager
from .dao import InMemoryPersonDao, InMemoryPersonStore, SqlAlchemyPersonDao
from .notifier import (
    LogNotifier,
    Notifier,
    RedisQueueNotifier,
    ReporterNotifier,
    WebhookNotifier,
)
from .service import (
    InMemoryTransactionManager,
    LoggingBatchImportPresenter,
    PersonService,
    SqlTransactionManager,
)
from .usecase import PersonUsecase

logger = structlog.get_logger()


@dataclass
class Container:
    """Wired application components and the resources they hold."""

    settings: Settings
    service: PersonService
    cao: PersonCao
    notifier: Notifier
    cached_service: PersonCachedService
    database: Optional[DatabaseManager] = None
    store: Optional[InMemoryPersonStore] = None
    redis_pool: Optional[ConnectionPool] = None
    _initialized: bool = field(default=False, repr=False)

    async def initialize(self) -> None:
        if self._initialized:
            return
        if self.database is not None:
            await self.database.initialize()
        self._initialized = True
        logger.info(
            "Container initialized",
            persistence=self.settings.PERSISTENCE_BACKEND,
            cache=self.settings.CACHE_BACKEND,
            notifier_channels=self.settings.notifier_channels_list,
        )

    async def health_check(self) -> Dict[str, Any]:
        if self.database is not None:
            store_health = await self.database.health_check()
        else:
            store_health = {"status": "healthy", "persons": len(self.store or ())}
        cache_health = await self.cao.health_check()

        healthy = store_health.get("status") == "healthy"
        return {
            "status": "healthy" if healthy else "unhealthy",
            "store": store_health,
            # A degraded cache never makes the registry unhealthy
            "cache": cache_health,
        }

    async def aclose(self) -> None:
        await self.notifier.close()
        if self.redis_pool is not None:
            await self.redis_pool.disconnect()
        if self.database is not None:
            await self.database.close()
        self._initialized = False
        logger.info("Container closed")


def _build_notifier(
    settings: Settings, redis_pool: Optional[ConnectionPool]
) -> ReporterNotifier:
    channels: List[Notifier] = []
    for name in settings.notifier_channels_list:
        if name == "log":
            channels.append(LogNotifier())
        elif name == "queue":
            channels.append(RedisQueueNotifier(redis_pool, settings.NOTIFY_QUEUE_NAME))
        elif name == "webhook":
            if not settings.NOTIFY_WEBHOOK_URL:
                raise ValueError("NOTIFY_WEBHOOK_URL is required for the webhook channel")
            channels.append(
                WebhookNotifier(
                    settings.NOTIFY_WEBHOOK_URL, timeout=settings.NOTIFY_WEBHOOK_TIMEOUT
                )
            )
    return ReporterNotifier(channels)


def build_container(settings: Optional[Settings] = None) -> Container:
    """
    Build the application container.

    Args:
        settings: Settings to build from; defaults to ``get_settings()``

    Returns:
        Container with every component wired; call ``initialize()`` before use
    """
    settings = settings or get_settings()

    database: Optional[DatabaseManager] = None
    store: Optional[InMemoryPersonStore] = None
    if settings.PERSISTENCE_BACKEND == "postgresql":
        database = DatabaseManager(settings)
        usecase = PersonUsecase(SqlAlchemyPersonDao())
        tx_manager = SqlTransactionManager(database)
    else:
        store = InMemoryPersonStore()
        usecase = PersonUsecase(InMemoryPersonDao())
        tx_manager = InMemoryTransactionManager(store)

    needs_redis = (
        settings.CACHE_BACKEND == "redis"
        or "queue" in settings.notifier_channels_list
    )
    redis_pool = create_redis_pool(settings) if needs_redis else None

    if settings.CACHE_BACKEND == "redis":
        cao: PersonCao = RedisPersonCao.from_settings(settings, pool=redis_pool)
    else:
        cao = InMemoryPersonCao(ttl_seconds=settings.CACHE_TTL_SECONDS)

    notifier = _build_notifier(settings, redis_pool)

    service = PersonService(
        usecase, tx_manager, output_boundary=LoggingBatchImportPresenter()
    )
    cached_service = PersonCachedService(
        service, cao, notifier, admin_recipient=settings.NOTIFY_RECIPIENT
    )

    logger.info(
        "Container built",
        persistence=settings.PERSISTENCE_BACKEND,
        cache=settings.CACHE_BACKEND,
    )
    return Container(
        settings=settings,
        service=service,
        cao=cao,
        notifier=notifier,
        cached_service=cached_service,
        database=database,
        store=store,
        redis_pool=redis_pool,
    )
