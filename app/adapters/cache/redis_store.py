"""Redis-backed cache store."""

from __future__ import annotations

import logging

import redis

from app.adapters.cache.base import AbstractCacheStore
from app.core.errors import StoreAppError

logger = logging.getLogger(__name__)


class RedisCacheStore(AbstractCacheStore):
    """Cache store on a dedicated Redis logical database.

    The client must be created with ``decode_responses=False`` so values come
    back as bytes.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def get(self, key: str) -> bytes | None:
        try:
            value = self._client.get(key)
        except redis.RedisError as exc:
            raise StoreAppError(
                code="cache_unavailable",
                message="cache client error when get",
                details={"operation": "cache.get"},
            ) from exc

        if value is None:
            return None
        if isinstance(value, str):
            return value.encode()
        return value

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as exc:
            raise StoreAppError(
                code="cache_unavailable",
                message="cache client error when set",
                details={"operation": "cache.set"},
            ) from exc
