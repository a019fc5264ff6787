"""Entitlement cache adapters (Redis and in-memory)."""

from app.adapters.cache.base import AbstractCacheStore
from app.adapters.cache.in_memory import InMemoryCacheStore
from app.adapters.cache.redis_store import RedisCacheStore

__all__ = [
    "AbstractCacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
]
