"""In-memory TTL cache store.

Per-process only: each worker holds its own copy, so entries written by one
worker are invisible to the others. Use the Redis store when running more
than one process.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from app.adapters.cache.base import AbstractCacheStore

logger = logging.getLogger(__name__)


@dataclass
class CacheItem:
    """Container for cached values with expiration metadata."""

    value: bytes
    expires_at: float


class InMemoryCacheStore(AbstractCacheStore):
    """Thread-safe TTL cache with LRU eviction.

    Attributes:
        max_entries: Maximum number of cached items (None for unlimited).
    """

    def __init__(
        self,
        *,
        max_entries: int | None = 10_000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheItem] = OrderedDict()
        self._lock = threading.RLock()

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryCacheStore(max_entries={self._max_entries}, size={len(self._store)})"

    def get(self, key: str) -> bytes | None:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "not_found"})
                return None

            if item.expires_at <= self._clock():
                del self._store[key]
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "expired"})
                return None

            self._store.move_to_end(key)
            return item.value

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        if ttl_seconds < 1:
            raise ValueError("ttl_seconds must be >= 1")

        with self._lock:
            self._evict_expired_locked()
            self._store[key] = CacheItem(value=value, expires_at=self._clock() + ttl_seconds)
            self._store.move_to_end(key)
            self._evict_if_over_capacity_locked()

        logger.debug("cache.set", extra={"cache_key": key, "ttl_s": ttl_seconds})

    def _evict_expired_locked(self) -> None:
        now = self._clock()
        for key in [k for k, item in self._store.items() if item.expires_at <= now]:
            del self._store[key]

    def _evict_if_over_capacity_locked(self) -> None:
        if self._max_entries is None:
            return

        while len(self._store) > self._max_entries:
            # least recently used first
            self._store.popitem(last=False)
