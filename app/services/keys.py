"""Cache and counter key builders."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

PREMIUM_TRUE = "true"
PREMIUM_FALSE = "false"


def premium_cache_key(user_id: int) -> str:
    return f"premium:{user_id}"


def premium_eligibility_key(user_id: int) -> str:
    return f"premium_eligible:{user_id}"


def reaction_limit_key(user_id: int, tz: tzinfo, *, now: datetime | None = None) -> str:
    """Daily counter key, e.g. ``reaction:2024-05-01:42``.

    The date is the calendar day in ``tz`` so every user's counter rolls
    over at the same local midnight.
    """
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return f"reaction:{moment.astimezone(tz):%Y-%m-%d}:{user_id}"


def premium_cache_value(premium: bool) -> bytes:
    return (PREMIUM_TRUE if premium else PREMIUM_FALSE).encode()
