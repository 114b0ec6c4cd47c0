"""
In-Memory Person Cache

Process-local cache for single-process deployments and local runs.
Entries expire after the configured time to live.
"""

import logging
import time
from typing import Dict, Optional, Tuple

from ..core.tx import Tx, with_tx
from ..domain import PersonId, PersonRecord
from .interfaces import PersonCao

logger = logging.getLogger(__name__)

# (record, expires_at monotonic seconds)
Entry = Tuple[PersonRecord, float]


class InMemoryPersonCao(PersonCao[Dict[PersonId, Entry]]):
    """Person cache held in a dict; the connection is the dict itself."""

    def __init__(self, ttl_seconds: int = 2):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[PersonId, Entry] = {}

    async def get_conn(self) -> Dict[PersonId, Entry]:
        return self._entries

    def find(self, person_id: PersonId) -> Tx[Dict[PersonId, Entry], Optional[PersonRecord]]:
        async def _find(entries: Dict[PersonId, Entry]) -> Optional[PersonRecord]:
            entry = entries.get(person_id)
            if entry is None:
                return None
            record, expires_at = entry
            if expires_at <= time.monotonic():
                entries.pop(person_id, None)
                return None
            return record

        return with_tx(_find)

    def load(self, person_id: PersonId, record: PersonRecord) -> Tx[Dict[PersonId, Entry], None]:
        async def _load(entries: Dict[PersonId, Entry]) -> None:
            entries[person_id] = (record, time.monotonic() + self.ttl_seconds)
            logger.debug("Cached person", extra={"person_id": str(person_id)})

        return with_tx(_load)

    def unload(self, person_id: PersonId) -> Tx[Dict[PersonId, Entry], None]:
        async def _unload(entries: Dict[PersonId, Entry]) -> None:
            entries.pop(person_id, None)

        return with_tx(_unload)

    async def health_check(self) -> dict:
        return {"status": "healthy", "entries": len(self._entries)}
