"""Unit tests for the daily reaction limiter."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from app.adapters.rate_limit.in_memory import InMemoryCounterStore
from app.core.errors import ErrorKind, QuotaExceededAppError, StoreAppError
from app.services.policy import ReactionPolicy
from app.services.rate_limiter import DailyReactionLimiter

# 2024-05-01 10:00 in UTC+7
FIXED_NOW = datetime(2024, 5, 1, 3, 0, tzinfo=timezone.utc)
TODAY_KEY_DATE = "2024-05-01"


@pytest.fixture
def limiter(counters: InMemoryCounterStore, policy: ReactionPolicy) -> DailyReactionLimiter:
    return DailyReactionLimiter(counters=counters, policy=policy, now=lambda: FIXED_NOW)


def test_key_for_uses_policy_timezone(limiter: DailyReactionLimiter) -> None:
    assert limiter.key_for(5) == f"reaction:{TODAY_KEY_DATE}:5"


def test_status_missing_counter_is_zero(limiter: DailyReactionLimiter) -> None:
    status = limiter.status(5)
    assert status.allowed is True
    assert status.used == 0
    assert status.remaining == 10
    assert status.limit == 10


def test_status_unparseable_counter_is_zero(
    limiter: DailyReactionLimiter, counters: InMemoryCounterStore
) -> None:
    counters.set(limiter.key_for(5), "garbage")
    assert limiter.status(5).used == 0


def test_first_consume_sets_expiry(
    limiter: DailyReactionLimiter, counters: InMemoryCounterStore
) -> None:
    assert limiter.consume(5) == 1
    ttl = counters.ttl(limiter.key_for(5))
    assert ttl is not None
    assert 86399 <= ttl <= 86400


def test_later_consumes_do_not_refresh_expiry() -> None:
    counters = MagicMock()
    counters.increment.return_value = 2
    limiter = DailyReactionLimiter(
        counters=counters, policy=ReactionPolicy(), now=lambda: FIXED_NOW
    )

    assert limiter.consume(5) == 2
    counters.expire.assert_not_called()


def test_check_allows_below_limit(
    limiter: DailyReactionLimiter, counters: InMemoryCounterStore
) -> None:
    counters.set(limiter.key_for(5), "9")
    status = limiter.check(5)
    assert status.remaining == 1


def test_check_rejects_at_limit(
    limiter: DailyReactionLimiter, counters: InMemoryCounterStore
) -> None:
    counters.set(limiter.key_for(5), "10")

    with pytest.raises(QuotaExceededAppError) as exc_info:
        limiter.check(5)

    assert exc_info.value.code == "reaction_limit_exceeded"
    assert exc_info.value.kind is ErrorKind.POLICY
    assert exc_info.value.http_status == 429
    assert exc_info.value.details["remaining"] == 0


def test_ten_consumes_then_blocked(limiter: DailyReactionLimiter) -> None:
    for _ in range(10):
        limiter.check(5)
        limiter.consume(5)

    with pytest.raises(QuotaExceededAppError):
        limiter.check(5)


def test_counters_are_per_user(limiter: DailyReactionLimiter) -> None:
    for _ in range(10):
        limiter.consume(5)

    assert limiter.status(6).allowed is True


def test_check_propagates_store_failure() -> None:
    counters = MagicMock()
    counters.get.side_effect = StoreAppError(code="counter_store_unavailable", message="down")
    limiter = DailyReactionLimiter(counters=counters, policy=ReactionPolicy())

    with pytest.raises(StoreAppError):
        limiter.check(5)
