"""Counter store adapters for the daily reaction quota.

Production uses Redis (atomic ``INCR`` shared by all workers); the in-memory
store serves single-process development and tests.
"""

from app.adapters.rate_limit.base import AbstractCounterStore, RateLimitStatus
from app.adapters.rate_limit.in_memory import InMemoryCounterStore
from app.adapters.rate_limit.redis_counter import RedisCounterStore

__all__ = [
    "AbstractCounterStore",
    "InMemoryCounterStore",
    "RateLimitStatus",
    "RedisCounterStore",
]
