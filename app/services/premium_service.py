"""Premium grant/revoke with write-through to the entitlement cache."""

from __future__ import annotations

import logging

from app.adapters.cache.base import AbstractCacheStore
from app.adapters.db.base import AbstractUserRepository
from app.adapters.rate_limit.base import AbstractCounterStore
from app.core.errors import PolicyAppError, StoreAppError
from app.services.keys import (
    PREMIUM_TRUE,
    premium_cache_key,
    premium_cache_value,
    premium_eligibility_key,
)
from app.services.policy import ReactionPolicy

logger = logging.getLogger(__name__)


class PremiumStateManager:
    """Changes a user's premium flag.

    The database is written first and is authoritative. The cache is then
    overwritten with the new value; a failed cache write is logged and
    ignored, since the next cache miss reads the database anyway.
    """

    def __init__(
        self,
        *,
        users: AbstractUserRepository,
        cache: AbstractCacheStore,
        counters: AbstractCounterStore,
        policy: ReactionPolicy,
    ) -> None:
        self._users = users
        self._cache = cache
        self._counters = counters
        self._policy = policy

    def grant(self, user_id: int) -> None:
        """Make ``user_id`` premium.

        Raises:
            PolicyAppError: If eligibility is required and the flag is not set.
            NotFoundAppError: If the user does not exist.
            StoreAppError: If the database write (or eligibility read) fails.
        """
        if self._policy.premium_requires_eligibility:
            self._require_eligibility(user_id)

        self._set_premium(user_id, True)

        if self._policy.premium_requires_eligibility:
            try:
                self._counters.delete(premium_eligibility_key(user_id))
            except StoreAppError as exc:
                logger.warning(
                    "premium.eligibility_clear_failed",
                    extra={"user_id": user_id, "error_code": exc.code},
                )

    def revoke(self, user_id: int) -> None:
        """Remove premium from ``user_id``.

        Raises:
            NotFoundAppError: If the user does not exist.
            StoreAppError: If the database write fails.
        """
        self._set_premium(user_id, False)

    def _require_eligibility(self, user_id: int) -> None:
        flag = self._counters.get(premium_eligibility_key(user_id))
        if flag != PREMIUM_TRUE:
            raise PolicyAppError(
                code="not_eligible_for_premium",
                message="You are not eligible for premium for now",
                details={"user_id": user_id},
            )

    def _set_premium(self, user_id: int, premium: bool) -> None:
        self._users.update_user_premium(user_id, premium)

        try:
            self._cache.set(
                premium_cache_key(user_id),
                premium_cache_value(premium),
                self._policy.premium_cache_ttl_seconds,
            )
        except StoreAppError as exc:
            logger.warning(
                "premium.cache_write_failed",
                extra={"user_id": user_id, "premium": premium, "error_code": exc.code},
            )

        logger.info("premium.updated", extra={"user_id": user_id, "premium": premium})
