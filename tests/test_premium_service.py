"""Unit tests for premium grant/revoke and the eligibility flag."""

from unittest.mock import MagicMock

import pytest

from app.adapters.cache.in_memory import InMemoryCacheStore
from app.adapters.rate_limit.in_memory import InMemoryCounterStore
from app.core.errors import NotFoundAppError, PolicyAppError, StoreAppError, user_not_found
from app.services.policy import ReactionPolicy
from app.services.premium_service import PremiumStateManager


@pytest.fixture
def users() -> MagicMock:
    return MagicMock()


def _manager(users, cache, counters, **policy_kwargs) -> PremiumStateManager:
    return PremiumStateManager(
        users=users, cache=cache, counters=counters, policy=ReactionPolicy(**policy_kwargs)
    )


def test_grant_writes_database_then_cache(
    users: MagicMock, cache: InMemoryCacheStore, counters: InMemoryCounterStore
) -> None:
    _manager(users, cache, counters).grant(3)

    users.update_user_premium.assert_called_once_with(3, True)
    assert cache.get("premium:3") == b"true"


def test_revoke_writes_false(
    users: MagicMock, cache: InMemoryCacheStore, counters: InMemoryCounterStore
) -> None:
    cache.set("premium:3", b"true", 60)
    _manager(users, cache, counters).revoke(3)

    users.update_user_premium.assert_called_once_with(3, False)
    assert cache.get("premium:3") == b"false"


def test_cache_entry_uses_policy_ttl(users: MagicMock, counters: InMemoryCounterStore) -> None:
    cache = MagicMock()
    _manager(users, cache, counters, premium_cache_ttl_seconds=120).grant(3)
    cache.set.assert_called_once_with("premium:3", b"true", 120)


def test_database_failure_leaves_cache_untouched(
    users: MagicMock, cache: InMemoryCacheStore, counters: InMemoryCounterStore
) -> None:
    users.update_user_premium.side_effect = StoreAppError(code="database_error", message="down")

    with pytest.raises(StoreAppError):
        _manager(users, cache, counters).grant(3)

    assert cache.get("premium:3") is None


def test_missing_user_propagates(
    users: MagicMock, cache: InMemoryCacheStore, counters: InMemoryCounterStore
) -> None:
    users.update_user_premium.side_effect = user_not_found(3)

    with pytest.raises(NotFoundAppError):
        _manager(users, cache, counters).revoke(3)


def test_cache_failure_is_not_fatal(users: MagicMock, counters: InMemoryCounterStore) -> None:
    cache = MagicMock()
    cache.set.side_effect = StoreAppError(code="cache_unavailable", message="down")

    _manager(users, cache, counters).grant(3)

    users.update_user_premium.assert_called_once_with(3, True)


class TestEligibility:
    def test_grant_without_flag_rejected(
        self, users: MagicMock, cache: InMemoryCacheStore, counters: InMemoryCounterStore
    ) -> None:
        manager = _manager(users, cache, counters, premium_requires_eligibility=True)

        with pytest.raises(PolicyAppError) as exc_info:
            manager.grant(3)

        assert exc_info.value.code == "not_eligible_for_premium"
        assert exc_info.value.http_status == 403
        users.update_user_premium.assert_not_called()

    def test_grant_with_flag_consumes_it(
        self, users: MagicMock, cache: InMemoryCacheStore, counters: InMemoryCounterStore
    ) -> None:
        manager = _manager(users, cache, counters, premium_requires_eligibility=True)
        counters.set("premium_eligible:3", "true")

        manager.grant(3)

        users.update_user_premium.assert_called_once_with(3, True)
        assert counters.get("premium_eligible:3") is None
        with pytest.raises(PolicyAppError):
            manager.grant(3)

    def test_flag_ignored_when_not_enforced(
        self, users: MagicMock, cache: InMemoryCacheStore, counters: InMemoryCounterStore
    ) -> None:
        manager = _manager(users, cache, counters)
        counters.set("premium_eligible:3", "true")

        manager.grant(3)

        assert counters.get("premium_eligible:3") == "true"

    def test_revoke_never_needs_flag(
        self, users: MagicMock, cache: InMemoryCacheStore, counters: InMemoryCounterStore
    ) -> None:
        _manager(users, cache, counters, premium_requires_eligibility=True).revoke(3)
        users.update_user_premium.assert_called_once_with(3, False)
