"""Cache store interface.

Services depend on this abstraction, so the entitlement cache can live in
Redis in production and in process memory during local runs and tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractCacheStore(ABC):
    """Byte-valued cache with per-entry TTL.

    A miss is reported as ``None`` and is not an error. Backend failures are
    raised as ``StoreAppError``.
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the cached bytes for ``key`` or None on a miss."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""
        raise NotImplementedError
