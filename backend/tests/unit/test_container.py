"""
Unit tests for backend selection and wiring.
"""

import pytest

from person_registry.cache import InMemoryPersonCao, RedisPersonCao
from person_registry.container import build_container
from person_registry.core.config import Settings
from person_registry.core.database import DatabaseManager
from person_registry.notifier import LogNotifier, RedisQueueNotifier, WebhookNotifier
from person_registry.service import InMemoryTransactionManager, SqlTransactionManager


def make_settings(**overrides):
    values = {
        "ENVIRONMENT": "test",
        "PERSISTENCE_BACKEND": "memory",
        "CACHE_BACKEND": "memory",
        "NOTIFIER_CHANNELS": "log",
    }
    values.update(overrides)
    return Settings(**values)


class TestBuildContainer:
    """Test build_container backend selection."""

    @pytest.mark.asyncio
    async def test_memory_backends(self):
        container = build_container(make_settings(CACHE_TTL_SECONDS=5))

        assert isinstance(container.service.tx_manager, InMemoryTransactionManager)
        assert isinstance(container.cao, InMemoryPersonCao)
        assert container.cao.ttl_seconds == 5
        assert container.database is None
        assert container.redis_pool is None
        assert [type(c) for c in container.notifier.channels] == [LogNotifier]
        assert container.cached_service.admin_recipient == "admin"

        await container.initialize()
        health = await container.health_check()
        assert health["status"] == "healthy"
        await container.aclose()

    @pytest.mark.asyncio
    async def test_postgres_and_redis_backends(self):
        container = build_container(
            make_settings(
                PERSISTENCE_BACKEND="postgresql",
                CACHE_BACKEND="redis",
                NOTIFIER_CHANNELS="log,queue",
                NOTIFY_RECIPIENT="ops",
            )
        )

        assert isinstance(container.database, DatabaseManager)
        assert isinstance(container.service.tx_manager, SqlTransactionManager)
        assert isinstance(container.cao, RedisPersonCao)
        assert container.cao.ttl_seconds == 2
        assert container.redis_pool is not None
        assert [type(c) for c in container.notifier.channels] == [
            LogNotifier,
            RedisQueueNotifier,
        ]
        assert container.cached_service.admin_recipient == "ops"
        await container.aclose()

    def test_webhook_channel(self):
        container = build_container(
            make_settings(
                NOTIFIER_CHANNELS="webhook",
                NOTIFY_WEBHOOK_URL="http://hooks.test/alerts",
            )
        )

        (channel,) = container.notifier.channels
        assert isinstance(channel, WebhookNotifier)
        assert channel.url == "http://hooks.test/alerts"

    def test_webhook_channel_requires_url(self):
        with pytest.raises(ValueError):
            build_container(make_settings(NOTIFIER_CHANNELS="webhook"))


class TestSettings:
    """Test settings validation."""

    def test_unknown_notifier_channel(self):
        with pytest.raises(ValueError):
            make_settings(NOTIFIER_CHANNELS="log,pager")

    def test_channels_are_normalized(self):
        settings = make_settings(NOTIFIER_CHANNELS=" Log , QUEUE ")
        assert settings.notifier_channels_list == ["log", "queue"]

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            make_settings(CACHE_BACKEND="memcached")
