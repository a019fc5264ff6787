"""Daily reaction quota over an atomic counter store.

Only non-premium users are checked. The counter for a day is created by the
first counted reaction; the expiry is attached by that same call (the one
whose increment returned 1), so there is no reset job and no separate
existence check. The counter is never read-modify-written.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from app.adapters.rate_limit.base import AbstractCounterStore, RateLimitStatus
from app.core.errors import QuotaExceededAppError
from app.services.keys import reaction_limit_key
from app.services.policy import ReactionPolicy

logger = logging.getLogger(__name__)


class DailyReactionLimiter:
    """Fixed daily quota keyed by user and calendar day."""

    def __init__(
        self,
        *,
        counters: AbstractCounterStore,
        policy: ReactionPolicy,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._counters = counters
        self._policy = policy
        self._now = now

    @property
    def limit(self) -> int:
        return self._policy.daily_limit

    def key_for(self, user_id: int) -> str:
        return reaction_limit_key(
            user_id,
            self._policy.tz,
            now=self._now() if self._now else None,
        )

    def status(self, user_id: int) -> RateLimitStatus:
        """Read today's usage without changing it.

        A missing or non-integer counter value counts as zero.
        """
        raw = self._counters.get(self.key_for(user_id))
        try:
            used = int(raw) if raw else 0
        except ValueError:
            logger.warning("rate_limit.unparseable_counter", extra={"user_id": user_id})
            used = 0

        limit = self._policy.daily_limit
        return RateLimitStatus(
            allowed=used < limit,
            limit=limit,
            used=used,
            remaining=max(0, limit - used),
        )

    def check(self, user_id: int) -> RateLimitStatus:
        """Reject the user if today's quota is already used up.

        Raises:
            QuotaExceededAppError: If the count has reached the daily limit.
            StoreAppError: If the counter store cannot be read.
        """
        current = self.status(user_id)
        if current.allowed:
            return current

        logger.info(
            "rate_limit.exceeded",
            extra={"user_id": user_id, "limit": current.limit, "used": current.used},
        )
        raise QuotaExceededAppError(
            code="reaction_limit_exceeded",
            message="Reaction limit exceeded",
            details={"limit": current.limit, "remaining": 0, "user_id": user_id},
        )

    def consume(self, user_id: int) -> int:
        """Count one reaction and return the new daily total.

        Raises:
            StoreAppError: If the increment (or the first-use expiry) fails.
        """
        key = self.key_for(user_id)
        count = self._counters.increment(key)
        if count == 1:
            self._counters.expire(key, self._policy.limit_ttl_seconds)
        return count
