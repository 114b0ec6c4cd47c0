"""
Redis Queue Notifier

Publishes notifications as JSON documents pushed onto a Redis list, for
consumption by an out-of-band worker.
"""

import json
import logging
from datetime import datetime, timezone

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from .base import Notifier, NotifierUnavailable

logger = logging.getLogger(__name__)


class RedisQueueNotifier(Notifier):
    """Notification channel backed by a Redis list (``RPUSH``)."""

    def __init__(self, pool: ConnectionPool, queue_name: str):
        self._pool = pool
        self.queue_name = queue_name

    async def notify(self, recipient: str, message: str) -> None:
        payload = json.dumps(
            {
                "recipient": recipient,
                "message": message,
                "sent_at": datetime.now(timezone.utc).isoformat(),
            }
        )

        client = Redis(connection_pool=self._pool)
        try:
            await client.rpush(self.queue_name, payload)
        except RedisError as e:
            logger.error(
                f"Failed to queue notification: {e}",
                extra={"queue": self.queue_name, "recipient": recipient},
            )
            raise NotifierUnavailable(
                f"queue {self.queue_name} unreachable", original_error=e
            ) from e
        finally:
            await client.aclose(close_connection_pool=False)

        logger.debug(
            "Notification queued",
            extra={"queue": self.queue_name, "recipient": recipient},
        )
