"""
Person Registry Database Configuration

Async database connection management with:
- Connection pooling configured from settings
- Connection retry logic with exponential backoff
- Connection metrics collection
"""

import time
from typing import Any, Dict, Optional

import asyncpg
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
import structlog
from prometheus_client import Counter, Histogram

from .config import Settings, get_settings

logger = structlog.get_logger()

# Module-level so repeated managers (tests, reloads) share one registration
DB_CONNECTION_DURATION = Histogram(
    "person_registry_db_connection_duration_seconds",
    "Time spent establishing the database engine",
)
DB_FAILED_CONNECTIONS = Counter(
    "person_registry_db_failed_connections_total",
    "Total number of failed database engine initializations",
)


class DatabaseManager:
    """
    Database connection manager.

    Owns the engine and the session factory. Sessions handed out by
    ``new_session`` are not committed here; the caller that opened the
    transaction decides commit or rollback.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

        logger.info(
            "Database manager initialized",
            pool_size=self.settings.DATABASE_POOL_SIZE,
            max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(
            (asyncpg.PostgresConnectionError, ConnectionError)
        ),
        before_sleep=lambda retry_state: logger.warning(
            "Database connection retry",
            attempt=retry_state.attempt_number,
            wait_time=retry_state.next_action.sleep,
        ),
    )
    async def _create_engine_with_retry(self) -> AsyncEngine:
        """Create database engine with retry logic."""
        start_time = time.time()

        try:
            engine = create_async_engine(
                self.settings.database_url,
                pool_size=self.settings.DATABASE_POOL_SIZE,
                max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
                pool_pre_ping=True,
                pool_recycle=self.settings.DATABASE_POOL_RECYCLE,
                pool_timeout=self.settings.DATABASE_POOL_TIMEOUT,
                echo=self.settings.is_development
                and self.settings.LOG_LEVEL == "DEBUG",
                connect_args={
                    "command_timeout": 60,
                    "server_settings": {"application_name": "person_registry"},
                },
            )

            duration = time.time() - start_time
            DB_CONNECTION_DURATION.observe(duration)

            logger.info(
                "Database engine created successfully",
                duration_seconds=duration,
            )
            return engine

        except Exception as e:
            DB_FAILED_CONNECTIONS.inc()
            logger.error(
                "Failed to create database engine",
                error=str(e),
                duration_seconds=time.time() - start_time,
            )
            raise

    async def initialize(self) -> None:
        """Create the engine, the session factory and verify connectivity."""
        self.engine = await self._create_engine_with_retry()
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            if result.scalar() != 1:
                raise RuntimeError("Database connectivity check failed")

        logger.info("Database initialized successfully")

    def new_session(self) -> AsyncSession:
        """Open a fresh session bound to the engine."""
        if not self.session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self.session_factory()

    async def health_check(self) -> Dict[str, Any]:
        """Check database connectivity."""
        start_time = time.time()

        if not self.engine:
            return {"status": "not_initialized"}

        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {
                "status": "healthy",
                "response_time_ms": round((time.time() - start_time) * 1000, 2),
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database connections closed")
