"""Service wiring for the HTTP layer.

Stores and services are built once per process from settings. Tests replace
the whole graph with ``app.dependency_overrides[get_container]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header

from app.adapters.cache.base import AbstractCacheStore
from app.adapters.db.base import AbstractUserRepository
from app.adapters.factory import create_cache_store, create_counter_store, create_user_repository
from app.adapters.rate_limit.base import AbstractCounterStore
from app.core.auth import TokenIssuer, authenticate
from app.core.config import settings
from app.services.auth_service import AuthService
from app.services.entitlement_service import EntitlementResolver
from app.services.policy import ReactionPolicy
from app.services.premium_service import PremiumStateManager
from app.services.rate_limiter import DailyReactionLimiter
from app.services.reaction_service import ReactionEngine
from app.services.user_service import UserService


@dataclass
class ServiceContainer:
    tokens: TokenIssuer
    auth: AuthService
    users: UserService
    premium: PremiumStateManager
    reactions: ReactionEngine


def build_container(
    *,
    users_repo: AbstractUserRepository,
    cache: AbstractCacheStore,
    counters: AbstractCounterStore,
    tokens: TokenIssuer,
    policy: ReactionPolicy,
    bcrypt_rounds: int | None = None,
) -> ServiceContainer:
    """Assemble services around the given stores."""
    limiter = DailyReactionLimiter(counters=counters, policy=policy)
    entitlements = EntitlementResolver(cache=cache, users=users_repo)
    return ServiceContainer(
        tokens=tokens,
        auth=AuthService(users=users_repo, tokens=tokens),
        users=UserService(users=users_repo, tokens=tokens, bcrypt_rounds=bcrypt_rounds),
        premium=PremiumStateManager(
            users=users_repo, cache=cache, counters=counters, policy=policy
        ),
        reactions=ReactionEngine(users=users_repo, entitlements=entitlements, limiter=limiter),
    )


@lru_cache(maxsize=1)
def get_container() -> ServiceContainer:
    """Process-wide container built from the global settings."""
    return build_container(
        users_repo=create_user_repository(),
        cache=create_cache_store(),
        counters=create_counter_store(),
        tokens=TokenIssuer.from_settings(),
        policy=ReactionPolicy.from_settings(),
        bcrypt_rounds=settings.auth.bcrypt_rounds,
    )


Container = Annotated[ServiceContainer, Depends(get_container)]


async def get_current_user_id(
    container: Container,
    authorization: Annotated[str | None, Header()] = None,
) -> int:
    """Resolve the acting user with the same issuer that signs login tokens.

    Usage:
        @router.get("/me")
        def show(user_id: Annotated[int, Depends(get_current_user_id)]): ...

    Raises:
        AuthenticationAppError: Rendered as 401 by the global handlers.
    """
    return authenticate(authorization, container.tokens)
