"""Tests for cache/counter key builders and the reaction policy."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from app.services.keys import (
    premium_cache_key,
    premium_cache_value,
    premium_eligibility_key,
    reaction_limit_key,
)
from app.services.policy import DEFAULT_UTC_OFFSET, ReactionPolicy, resolve_timezone


class TestKeys:
    def test_premium_keys(self) -> None:
        assert premium_cache_key(42) == "premium:42"
        assert premium_eligibility_key(42) == "premium_eligible:42"

    def test_premium_cache_value(self) -> None:
        assert premium_cache_value(True) == b"true"
        assert premium_cache_value(False) == b"false"

    def test_reaction_key_uses_local_calendar_day(self) -> None:
        """18:00 UTC is already the next day in UTC+7."""
        now = datetime(2024, 5, 1, 18, 0, tzinfo=timezone.utc)
        assert reaction_limit_key(7, DEFAULT_UTC_OFFSET, now=now) == "reaction:2024-05-02:7"

    def test_reaction_key_same_day_before_local_midnight(self) -> None:
        now = datetime(2024, 5, 1, 16, 59, tzinfo=timezone.utc)
        assert reaction_limit_key(7, DEFAULT_UTC_OFFSET, now=now) == "reaction:2024-05-01:7"

    def test_naive_datetime_treated_as_utc(self) -> None:
        now = datetime(2024, 5, 1, 18, 0)
        assert reaction_limit_key(7, DEFAULT_UTC_OFFSET, now=now) == "reaction:2024-05-02:7"

    def test_zoneinfo_matches_fixed_offset(self) -> None:
        now = datetime(2024, 12, 31, 17, 30, tzinfo=timezone.utc)
        assert reaction_limit_key(1, ZoneInfo("Asia/Jakarta"), now=now) == "reaction:2025-01-01:1"


class TestPolicy:
    def test_resolve_known_zone(self) -> None:
        tz = resolve_timezone("Asia/Jakarta")
        assert datetime(2024, 1, 1, tzinfo=tz).utcoffset() == timedelta(hours=7)

    def test_resolve_unknown_zone_falls_back(self) -> None:
        assert resolve_timezone("Not/AZone") is DEFAULT_UTC_OFFSET

    def test_defaults(self) -> None:
        policy = ReactionPolicy()
        assert policy.daily_limit == 10
        assert policy.limit_ttl_seconds == 86400
        assert policy.premium_cache_ttl_seconds == 86400
        assert policy.premium_requires_eligibility is False

    def test_rejects_non_positive_limit(self) -> None:
        with pytest.raises(ValueError):
            ReactionPolicy(daily_limit=0)

    def test_rejects_non_positive_ttl(self) -> None:
        with pytest.raises(ValueError):
            ReactionPolicy(limit_ttl_seconds=0)
