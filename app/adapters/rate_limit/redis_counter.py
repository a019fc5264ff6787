"""Redis-backed counter store.

``INCR`` is atomic on the server, so concurrent increments from several API
workers never lose updates.
"""

from __future__ import annotations

import redis

from app.adapters.rate_limit.base import AbstractCounterStore
from app.core.errors import StoreAppError


def _store_error(operation: str) -> StoreAppError:
    return StoreAppError(
        code="counter_store_unavailable",
        message=f"redis client error when {operation}",
        details={"operation": f"counter.{operation}"},
    )


class RedisCounterStore(AbstractCounterStore):
    """Counter store on a dedicated Redis logical database."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def increment(self, key: str) -> int:
        try:
            return int(self._client.incr(key))
        except redis.RedisError as exc:
            raise _store_error("incr") from exc

    def expire(self, key: str, ttl_seconds: int) -> None:
        try:
            self._client.expire(key, ttl_seconds)
        except redis.RedisError as exc:
            raise _store_error("expire") from exc

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(key)
        except redis.RedisError as exc:
            raise _store_error("get") from exc

        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as exc:
            raise _store_error("set") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as exc:
            raise _store_error("del") from exc
