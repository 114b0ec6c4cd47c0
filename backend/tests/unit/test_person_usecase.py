"""
Unit tests for person usecases.

DAO failures are simulated with units that raise; the happy paths run
against the in-memory DAO.
"""

from datetime import date
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from person_registry.core.tx import Tx, with_tx
from person_registry.dao import (
    DeleteFailed,
    InMemoryPersonDao,
    InsertFailed,
    MemoryTransaction,
    QueryFailed,
    UpdateConflict,
    UpdateNotFound,
)
from person_registry.domain import AlreadyDead
from person_registry.usecase import (
    CollectFailed,
    DomainObjectChangeFailed,
    EntryFailed,
    FindFailed,
    PersonUsecase,
    RemoveFailed,
    SaveFailed,
    UsecaseError,
    VerificationFailed,
)


def raising(error):
    async def _raise(ctx):
        raise error

    return with_tx(_raise)


class TestPersonUsecase:
    """Test usecases against the in-memory DAO."""

    @pytest.fixture
    def usecase(self):
        return PersonUsecase(InMemoryPersonDao())

    @pytest.fixture
    def ctx(self):
        return MemoryTransaction()

    @pytest.mark.asyncio
    async def test_entry_and_verify_returns_stored(self, usecase, ctx, sample_record):
        person_id, stored = await usecase.entry_and_verify(sample_record).run(ctx)

        assert stored == sample_record
        assert ctx.persons[person_id] == sample_record

    @pytest.mark.asyncio
    async def test_collect(self, usecase, ctx, sample_records):
        for record in sample_records:
            await usecase.entry(record).run(ctx)

        collected = await usecase.collect().run(ctx)
        assert sorted(r.name for _, r in collected) == ["Alice", "Bob", "Eve"]

    @pytest.mark.asyncio
    async def test_apply_death_bumps_revision(self, usecase, ctx, sample_record):
        person_id = await usecase.entry(sample_record).run(ctx)

        await usecase.apply_death(person_id, date(2080, 1, 1)).run(ctx)

        stored = await usecase.find(person_id).run(ctx)
        assert stored.death_date == date(2080, 1, 1)
        assert stored.revision == 1

    @pytest.mark.asyncio
    async def test_apply_death_twice_is_domain_error(self, usecase, ctx, sample_record):
        person_id = await usecase.entry(sample_record).run(ctx)
        await usecase.apply_death(person_id, date(2080, 1, 1)).run(ctx)

        with pytest.raises(DomainObjectChangeFailed) as exc_info:
            await usecase.apply_death(person_id, date(2081, 1, 1)).run(ctx)

        assert isinstance(exc_info.value.cause, AlreadyDead)
        assert (await usecase.find(person_id).run(ctx)).revision == 1

    @pytest.mark.asyncio
    async def test_apply_death_absent_is_save_failure(self, usecase, ctx):
        with pytest.raises(SaveFailed) as exc_info:
            await usecase.apply_death(uuid4(), date(2080, 1, 1)).run(ctx)

        assert isinstance(exc_info.value.cause, UpdateNotFound)

    @pytest.mark.asyncio
    async def test_remove_absent_succeeds(self, usecase, ctx):
        await usecase.remove(uuid4()).run(ctx)


class TestPersonUsecaseErrors:
    """Test DAO errors are wrapped into usecase errors."""

    @pytest.fixture
    def dao(self):
        return MagicMock()

    @pytest.fixture
    def usecase(self, dao):
        return PersonUsecase(dao)

    @pytest.mark.asyncio
    async def test_entry_failure(self, dao, usecase, sample_record):
        cause = InsertFailed("disk full")
        dao.insert.return_value = raising(cause)

        with pytest.raises(EntryFailed) as exc_info:
            await usecase.entry(sample_record).run(None)

        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert isinstance(exc_info.value, UsecaseError)

    @pytest.mark.asyncio
    async def test_entry_and_verify_insert_failure(self, dao, usecase, sample_record):
        dao.insert.return_value = raising(InsertFailed())

        with pytest.raises(EntryFailed):
            await usecase.entry_and_verify(sample_record).run(None)

        dao.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_entry_and_verify_fetch_failure(self, dao, usecase, sample_record):
        dao.insert.return_value = Tx.pure(uuid4())
        dao.fetch.return_value = raising(QueryFailed())

        with pytest.raises(VerificationFailed) as exc_info:
            await usecase.entry_and_verify(sample_record).run(None)

        assert isinstance(exc_info.value.cause, QueryFailed)

    @pytest.mark.asyncio
    async def test_entry_and_verify_absent_after_insert(
        self, dao, usecase, sample_record
    ):
        dao.insert.return_value = Tx.pure(uuid4())
        dao.fetch.return_value = Tx.pure(None)

        with pytest.raises(VerificationFailed):
            await usecase.entry_and_verify(sample_record).run(None)

    @pytest.mark.asyncio
    async def test_find_failure(self, dao, usecase):
        dao.fetch.return_value = raising(QueryFailed())

        with pytest.raises(FindFailed):
            await usecase.find(uuid4()).run(None)

    @pytest.mark.asyncio
    async def test_collect_failure(self, dao, usecase):
        dao.select.return_value = raising(QueryFailed())

        with pytest.raises(CollectFailed):
            await usecase.collect().run(None)

    @pytest.mark.asyncio
    async def test_apply_death_fetch_failure(self, dao, usecase):
        dao.fetch.return_value = raising(QueryFailed())

        with pytest.raises(FindFailed):
            await usecase.apply_death(uuid4(), date(2080, 1, 1)).run(None)

        dao.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_apply_death_saves_next_revision(self, dao, usecase, sample_record):
        person_id = uuid4()
        dao.fetch.return_value = Tx.pure(sample_record.model_copy(update={"revision": 4}))
        dao.save.return_value = Tx.pure(None)

        await usecase.apply_death(person_id, date(2080, 1, 1)).run(None)

        saved_id, expected_revision, saved = dao.save.call_args[0]
        assert saved_id == person_id
        assert expected_revision == 5
        assert saved.revision == 5
        assert saved.death_date == date(2080, 1, 1)

    @pytest.mark.asyncio
    async def test_apply_death_conflict(self, dao, usecase, sample_record):
        dao.fetch.return_value = Tx.pure(sample_record)
        dao.save.return_value = raising(UpdateConflict(uuid4(), 1, 1))

        with pytest.raises(SaveFailed) as exc_info:
            await usecase.apply_death(uuid4(), date(2080, 1, 1)).run(None)

        assert isinstance(exc_info.value.cause, UpdateConflict)

    @pytest.mark.asyncio
    async def test_remove_failure(self, dao, usecase):
        dao.delete.return_value = raising(DeleteFailed())

        with pytest.raises(RemoveFailed):
            await usecase.remove(uuid4()).run(None)
