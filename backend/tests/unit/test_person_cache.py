"""
Unit tests for the Redis and in-memory person caches.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from person_registry.cache import CaoUnavailable, InMemoryPersonCao, RedisPersonCao


class TestRedisPersonCao:
    """Test RedisPersonCao against a mocked client."""

    @pytest.fixture
    def cao(self):
        return RedisPersonCao(MagicMock(), ttl_seconds=2, key_prefix="person")

    @pytest.fixture
    def client(self):
        return AsyncMock()

    def test_key_layout(self, cao, person_id):
        assert cao.key_for(person_id) == f"person:{person_id}"

    @pytest.mark.asyncio
    async def test_find_hit(self, cao, client, person_id, sample_record):
        client.get.return_value = sample_record.model_dump_json()

        assert await cao.find(person_id).run(client) == sample_record
        client.get.assert_awaited_once_with(f"person:{person_id}")

    @pytest.mark.asyncio
    async def test_find_miss(self, cao, client, person_id):
        client.get.return_value = None
        assert await cao.find(person_id).run(client) is None

    @pytest.mark.asyncio
    async def test_find_malformed_entry(self, cao, client, person_id):
        client.get.return_value = json.dumps({"name": "Alice"})

        with pytest.raises(CaoUnavailable) as exc_info:
            await cao.find(person_id).run(client)

        assert exc_info.value.details["key"] == f"person:{person_id}"

    @pytest.mark.asyncio
    async def test_find_connection_error(self, cao, client, person_id):
        client.get.side_effect = RedisConnectionError("refused")

        with pytest.raises(CaoUnavailable) as exc_info:
            await cao.find(person_id).run(client)

        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_load_sets_json_with_ttl(self, cao, client, person_id, sample_record):
        await cao.load(person_id, sample_record).run(client)

        key, payload = client.set.await_args[0]
        assert key == f"person:{person_id}"
        assert json.loads(payload)["birth_date"] == "2012-11-02"
        assert client.set.await_args[1] == {"ex": 2}

    @pytest.mark.asyncio
    async def test_load_error(self, cao, client, person_id, sample_record):
        client.set.side_effect = RedisConnectionError("refused")

        with pytest.raises(CaoUnavailable):
            await cao.load(person_id, sample_record).run(client)

    @pytest.mark.asyncio
    async def test_unload_deletes_key(self, cao, client, person_id):
        await cao.unload(person_id).run(client)
        client.delete.assert_awaited_once_with(f"person:{person_id}")

    @pytest.mark.asyncio
    async def test_run_tx_releases_connection(self, cao, client, person_id):
        client.get.side_effect = RedisConnectionError("refused")

        with patch("person_registry.cache.redis_cao.Redis", return_value=client):
            with pytest.raises(CaoUnavailable):
                await cao.run_tx(cao.find(person_id))

        client.aclose.assert_awaited_once_with(close_connection_pool=False)


class TestInMemoryPersonCao:
    """Test InMemoryPersonCao."""

    @pytest.mark.asyncio
    async def test_load_find_unload(self, person_id, sample_record):
        cao = InMemoryPersonCao(ttl_seconds=60)

        await cao.run_tx(cao.load(person_id, sample_record))
        assert await cao.run_tx(cao.find(person_id)) == sample_record

        await cao.run_tx(cao.unload(person_id))
        assert await cao.run_tx(cao.find(person_id)) is None

    @pytest.mark.asyncio
    async def test_entries_expire(self, person_id, sample_record):
        cao = InMemoryPersonCao(ttl_seconds=2)

        with patch("person_registry.cache.memory_cao.time.monotonic", return_value=100.0):
            await cao.run_tx(cao.load(person_id, sample_record))
        with patch("person_registry.cache.memory_cao.time.monotonic", return_value=102.5):
            assert await cao.run_tx(cao.find(person_id)) is None

    @pytest.mark.asyncio
    async def test_unload_absent_is_noop(self):
        cao = InMemoryPersonCao()
        await cao.run_tx(cao.unload(uuid4()))
