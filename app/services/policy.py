"""Static reaction/entitlement policy passed to services at construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import ReactionSettings, settings

logger = logging.getLogger(__name__)

# Used when the configured zone database entry is missing on the host
DEFAULT_UTC_OFFSET = timezone(timedelta(hours=7), name="UTC+07:00")


def resolve_timezone(name: str) -> tzinfo:
    """Load an IANA zone, falling back to a fixed UTC+7 offset."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("policy.timezone_unavailable", extra={"timezone": name})
        return DEFAULT_UTC_OFFSET


@dataclass(frozen=True)
class ReactionPolicy:
    """Limits and TTLs governing entitlement caching and the daily quota.

    Attributes:
        daily_limit: Consequential reactions allowed per day for non-premium users.
        limit_ttl_seconds: Expiry set on a daily counter when it is created.
        premium_cache_ttl_seconds: TTL of the premium cache entry.
        tz: Zone whose calendar day names the counter key.
        premium_requires_eligibility: Whether grant needs the eligibility flag.
    """

    daily_limit: int = 10
    limit_ttl_seconds: int = 86400
    premium_cache_ttl_seconds: int = 86400
    tz: tzinfo = field(default=DEFAULT_UTC_OFFSET)
    premium_requires_eligibility: bool = False

    def __post_init__(self) -> None:
        if self.daily_limit < 1:
            raise ValueError("daily_limit must be >= 1")
        if self.limit_ttl_seconds < 1 or self.premium_cache_ttl_seconds < 1:
            raise ValueError("TTLs must be >= 1 second")

    @classmethod
    def from_settings(cls, reaction_settings: ReactionSettings | None = None) -> "ReactionPolicy":
        cfg = reaction_settings or settings.reaction
        return cls(
            daily_limit=cfg.daily_limit,
            limit_ttl_seconds=cfg.limit_ttl_seconds,
            premium_cache_ttl_seconds=cfg.premium_cache_ttl_seconds,
            tz=resolve_timezone(cfg.timezone),
            premium_requires_eligibility=cfg.premium_requires_eligibility,
        )
