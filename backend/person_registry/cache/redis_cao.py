"""
Redis Person Cache

Person records cached in Redis as JSON under ``{prefix}:{id}`` with a
fixed time to live. A shared connection pool backs one client per
operation.
"""

import logging
from typing import Optional

from pydantic import ValidationError
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from ..core.config import Settings
from ..core.tx import Tx, with_tx
from ..domain import PersonId, PersonRecord
from .exceptions import CaoUnavailable
from .interfaces import PersonCao

logger = logging.getLogger(__name__)


def create_redis_pool(settings: Settings) -> ConnectionPool:
    """Connection pool configured from settings; connections open lazily."""
    pool = ConnectionPool.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=settings.REDIS_CONNECTION_TIMEOUT,
        socket_timeout=settings.REDIS_OPERATION_TIMEOUT,
        max_connections=settings.REDIS_MAX_CONNECTIONS,
    )
    logger.info(
        "Redis connection pool configured",
        extra={"max_connections": settings.REDIS_MAX_CONNECTIONS},
    )
    return pool


class RedisPersonCao(PersonCao[Redis]):
    """Person cache backed by Redis."""

    def __init__(
        self,
        pool: ConnectionPool,
        ttl_seconds: int = 2,
        key_prefix: str = "person",
    ):
        self._pool = pool
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    @classmethod
    def from_settings(
        cls, settings: Settings, pool: Optional[ConnectionPool] = None
    ) -> "RedisPersonCao":
        return cls(
            pool or create_redis_pool(settings),
            ttl_seconds=settings.CACHE_TTL_SECONDS,
            key_prefix=settings.CACHE_KEY_PREFIX,
        )

    def key_for(self, person_id: PersonId) -> str:
        return f"{self.key_prefix}:{person_id}"

    async def get_conn(self) -> Redis:
        return Redis(connection_pool=self._pool)

    async def release_conn(self, conn: Redis) -> None:
        # Returns the connection to the shared pool; the pool stays open
        await conn.aclose(close_connection_pool=False)

    def find(self, person_id: PersonId) -> Tx[Redis, Optional[PersonRecord]]:
        key = self.key_for(person_id)

        async def _find(conn: Redis) -> Optional[PersonRecord]:
            try:
                raw = await conn.get(key)
            except RedisError as e:
                logger.warning(f"Failed to read cached person {key}: {e}")
                raise CaoUnavailable("read failed", key=key, original_error=e) from e

            if raw is None:
                logger.debug("Person cache miss", extra={"key": key})
                return None

            try:
                record = PersonRecord.model_validate_json(raw)
            except ValidationError as e:
                logger.warning(f"Malformed cached person {key}: {e}")
                raise CaoUnavailable(
                    "malformed cache entry", key=key, original_error=e
                ) from e

            logger.debug("Person cache hit", extra={"key": key})
            return record

        return with_tx(_find)

    def load(self, person_id: PersonId, record: PersonRecord) -> Tx[Redis, None]:
        key = self.key_for(person_id)

        async def _load(conn: Redis) -> None:
            try:
                await conn.set(key, record.model_dump_json(), ex=self.ttl_seconds)
            except RedisError as e:
                logger.warning(f"Failed to cache person {key}: {e}")
                raise CaoUnavailable("write failed", key=key, original_error=e) from e

            logger.debug(
                "Cached person",
                extra={"key": key, "ttl_seconds": self.ttl_seconds},
            )

        return with_tx(_load)

    def unload(self, person_id: PersonId) -> Tx[Redis, None]:
        key = self.key_for(person_id)

        async def _unload(conn: Redis) -> None:
            try:
                await conn.delete(key)
            except RedisError as e:
                logger.warning(f"Failed to invalidate cached person {key}: {e}")
                raise CaoUnavailable(
                    "invalidate failed", key=key, original_error=e
                ) from e

            logger.debug("Invalidated cached person", extra={"key": key})

        return with_tx(_unload)

    async def health_check(self) -> dict:
        """Ping Redis through the shared pool."""
        conn = await self.get_conn()
        try:
            await conn.ping()
            return {"status": "healthy"}
        except RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return {"status": "unhealthy", "error": str(e)}
        finally:
            await self.release_conn(conn)
