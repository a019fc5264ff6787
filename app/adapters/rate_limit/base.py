"""Counter store interface backing the daily reaction quota.

The limiter depends on this abstraction (not the concrete implementation) so
the counters can live in Redis in production and in memory in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitStatus:
    """Snapshot of a user's daily quota.

    Attributes:
        allowed: Whether another consequential reaction is allowed today.
        limit: Max consequential reactions per day.
        used: Reactions already counted today.
        remaining: Reactions left today (0 when blocked).
    """

    allowed: bool
    limit: int
    used: int
    remaining: int


class AbstractCounterStore(ABC):
    """Key-value store with an atomic integer increment.

    Missing keys are reported as ``None``. Backend failures are raised as
    ``StoreAppError``.
    """

    @abstractmethod
    def increment(self, key: str) -> int:
        """Atomically add one to ``key`` (creating it at 0) and return the new value."""
        raise NotImplementedError

    @abstractmethod
    def expire(self, key: str, ttl_seconds: int) -> None:
        """Set an expiry of ``ttl_seconds`` on an existing key."""
        raise NotImplementedError

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the raw value stored under ``key`` or None."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store ``value`` under ``key``, optionally expiring after ``ttl_seconds``."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        raise NotImplementedError
