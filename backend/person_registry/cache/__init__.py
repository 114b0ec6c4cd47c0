"""
Person Cache

Cache port and its Redis and in-memory adapters.
"""

from .exceptions import CaoError, CaoUnavailable
from .interfaces import PersonCao
from .memory_cao import InMemoryPersonCao
from .redis_cao import RedisPersonCao, create_redis_pool

__all__ = [
    "CaoError",
    "CaoUnavailable",
    "PersonCao",
    "InMemoryPersonCao",
    "RedisPersonCao",
    "create_redis_pool",
]
