"""
Person Cache Interface

Cache port used by the cached service. Operations are ``Tx`` units over
a cache connection; ``run_tx`` acquires a connection, runs one unit and
releases the connection again.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from ..core.tx import Tx
from ..domain import PersonId, PersonRecord

Conn = TypeVar("Conn")
T = TypeVar("T")


class PersonCao(ABC, Generic[Conn]):
    """Abstract person cache access object."""

    @abstractmethod
    async def get_conn(self) -> Conn:
        """Acquire a cache connection."""

    async def release_conn(self, conn: Conn) -> None:
        """Release a connection obtained from ``get_conn``."""

    async def run_tx(self, tx: Tx[Conn, T]) -> T:
        conn = await self.get_conn()
        try:
            return await tx.run(conn)
        finally:
            await self.release_conn(conn)

    @abstractmethod
    def find(self, person_id: PersonId) -> Tx[Conn, Optional[PersonRecord]]:
        """Look up a cached record; yields None on a miss."""

    @abstractmethod
    def load(self, person_id: PersonId, record: PersonRecord) -> Tx[Conn, None]:
        """Store or replace the cached record."""

    @abstractmethod
    def unload(self, person_id: PersonId) -> Tx[Conn, None]:
        """Remove the cached record if present."""

    async def health_check(self) -> dict:
        return {"status": "healthy"}
