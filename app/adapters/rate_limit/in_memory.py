"""In-memory counter store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state, so ``increment`` is atomic
  within the process.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractCounterStore


@dataclass
class _Entry:
    value: str
    expires_at: float | None


class InMemoryCounterStore(AbstractCounterStore):
    """Dictionary-backed counter store with lazy expiry.

    Expired keys are dropped on access, mirroring how Redis hides a key once
    its TTL has passed.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the store.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, _Entry] = {}

    def _live_entry_locked(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry

    def increment(self, key: str) -> int:
        if not key:
            raise ValueError("key must be a non-empty string")

        with self._lock:
            entry = self._live_entry_locked(key)
            if entry is None:
                entry = _Entry(value="0", expires_at=None)
                self._entries[key] = entry
            try:
                count = int(entry.value) + 1
            except ValueError as exc:
                raise ValueError(f"value at {key!r} is not an integer") from exc
            entry.value = str(count)
            return count

    def expire(self, key: str, ttl_seconds: int) -> None:
        if ttl_seconds < 1:
            raise ValueError("ttl_seconds must be >= 1")

        with self._lock:
            entry = self._live_entry_locked(key)
            if entry is not None:
                entry.expires_at = self._clock() + ttl_seconds

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._live_entry_locked(key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        with self._lock:
            expires_at = self._clock() + ttl_seconds if ttl_seconds else None
            self._entries[key] = _Entry(value=value, expires_at=expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def ttl(self, key: str) -> float | None:
        """Seconds until ``key`` expires, or None if it has no expiry or is absent."""
        with self._lock:
            entry = self._live_entry_locked(key)
            if entry is None or entry.expires_at is None:
                return None
            return entry.expires_at - self._clock()
