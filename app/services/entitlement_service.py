"""Cache-aside premium lookup.

The cache is only a fast path: a cached value wins even if the database has
since changed (bounded by the cache TTL), and a miss or cache failure falls
back to the database. Reads never populate the cache; only explicit premium
changes write it (see ``PremiumStateManager``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from app.adapters.cache.base import AbstractCacheStore
from app.adapters.db.base import AbstractUserRepository
from app.core.errors import StoreAppError, user_not_found
from app.services.keys import PREMIUM_TRUE, premium_cache_key

logger = logging.getLogger(__name__)

EntitlementSource = Literal["cache", "store"]


@dataclass(frozen=True)
class EntitlementDecision:
    premium: bool
    source: EntitlementSource


class EntitlementResolver:
    """Decides whether a user is premium."""

    def __init__(self, *, cache: AbstractCacheStore, users: AbstractUserRepository) -> None:
        self._cache = cache
        self._users = users

    def is_premium(self, user_id: int) -> EntitlementDecision:
        """Resolve the premium flag for ``user_id``.

        Args:
            user_id: Acting user.

        Returns:
            EntitlementDecision with the flag and where it came from.

        Raises:
            StoreAppError: If the cache misses and the database read fails.
                Callers must reject the request rather than assume non-premium.
            NotFoundAppError: If the user does not exist.
        """
        cached = self._read_cache(user_id)
        if cached:
            return EntitlementDecision(premium=cached == PREMIUM_TRUE, source="cache")

        user = self._users.get_user_by_id(user_id)
        if user is None:
            raise user_not_found(user_id)

        logger.debug(
            "entitlement.resolved_from_store",
            extra={"user_id": user_id, "premium": user.premium},
        )
        return EntitlementDecision(premium=user.premium, source="store")

    def _read_cache(self, user_id: int) -> str:
        try:
            raw = self._cache.get(premium_cache_key(user_id))
        except StoreAppError as exc:
            logger.warning(
                "entitlement.cache_read_failed",
                extra={"user_id": user_id, "error_code": exc.code},
            )
            return ""
        return raw.decode("utf-8", errors="replace") if raw else ""
