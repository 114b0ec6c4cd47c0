"""
Transaction Managers

Begin, commit and roll back the context a usecase runs against.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import DatabaseManager
from ..dao.memory import InMemoryPersonStore, MemoryTransaction

Ctx = TypeVar("Ctx")


class TransactionManager(ABC, Generic[Ctx]):
    """Opens and closes transaction contexts for the service."""

    @abstractmethod
    async def begin(self) -> Ctx:
        """Begin a transaction and return its context."""

    @abstractmethod
    async def commit(self, ctx: Ctx) -> None:
        """Commit and release the context."""

    @abstractmethod
    async def rollback(self, ctx: Ctx) -> None:
        """Roll back and release the context."""


class SqlTransactionManager(TransactionManager[AsyncSession]):
    """One ``AsyncSession`` per transaction, taken from the database manager."""

    def __init__(self, database: DatabaseManager):
        self.database = database

    async def begin(self) -> AsyncSession:
        session = self.database.new_session()
        try:
            await session.begin()
        except Exception:
            await session.close()
            raise
        return session

    async def commit(self, ctx: AsyncSession) -> None:
        try:
            await ctx.commit()
        finally:
            await ctx.close()

    async def rollback(self, ctx: AsyncSession) -> None:
        try:
            await ctx.rollback()
        finally:
            await ctx.close()


class InMemoryTransactionManager(TransactionManager[MemoryTransaction]):
    """Transactions over the single in-memory person store."""

    def __init__(self, store: InMemoryPersonStore):
        self.store = store

    async def begin(self) -> MemoryTransaction:
        return await self.store.begin()

    async def commit(self, ctx: MemoryTransaction) -> None:
        await self.store.commit(ctx)

    async def rollback(self, ctx: MemoryTransaction) -> None:
        await self.store.rollback(ctx)
