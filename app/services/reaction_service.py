"""Reaction orchestration: entitlement, quota, persistence, counting.

Order of a request:

1. validate ids and type (no store access)
2. resolve entitlement; a failure rejects the request
3. non-premium only: reject if today's quota is used up
4. the target user must exist
5. upsert the (user, target) reaction
6. non-premium and consequential type only: count it

Counting happens after the write so a failed write never costs quota. A
failed count is logged and the already saved reaction stands.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.adapters.db.base import AbstractUserRepository
from app.core.errors import StoreAppError, ValidationAppError, user_not_found
from app.schemas.users import ReactionRequest, ReactionType
from app.services.entitlement_service import EntitlementResolver
from app.services.rate_limiter import DailyReactionLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReactionOutcome:
    """What happened to a saved reaction.

    Attributes:
        premium: Whether the acting user was treated as premium.
        counted: Whether the reaction was added to today's quota.
        remaining: Reactions left today, or None for premium users.
    """

    premium: bool
    counted: bool
    remaining: int | None


def validate_reaction(request: ReactionRequest) -> ReactionType:
    """Check ids and type before touching any store.

    Raises:
        ValidationAppError: Attributed to ``target_id`` or ``type``.
    """
    if request.target_id <= 0 or request.target_id == request.user_id:
        raise ValidationAppError(
            code="invalid_target_user",
            message="Invalid target user",
            field="target_id",
        )
    if not ReactionType.is_valid(request.type):
        raise ValidationAppError(
            code="invalid_reaction_type",
            message="Invalid reaction type",
            field="type",
        )
    return ReactionType(request.type)


class ReactionEngine:
    """Records reactions between users under the daily quota."""

    def __init__(
        self,
        *,
        users: AbstractUserRepository,
        entitlements: EntitlementResolver,
        limiter: DailyReactionLimiter,
    ) -> None:
        self._users = users
        self._entitlements = entitlements
        self._limiter = limiter

    def react(self, request: ReactionRequest) -> ReactionOutcome:
        """Save a reaction from ``request.user_id`` about ``request.target_id``.

        Raises:
            ValidationAppError: Bad target id or reaction type.
            QuotaExceededAppError: Non-premium user already at the daily limit.
            NotFoundAppError: Acting or target user does not exist.
            StoreAppError: Entitlement, quota read, target lookup or write failed.
        """
        reaction_type = validate_reaction(request)

        premium = self._entitlements.is_premium(request.user_id).premium

        remaining: int | None = None
        if not premium:
            remaining = self._limiter.check(request.user_id).remaining

        if self._users.get_user_by_id(request.target_id) is None:
            raise user_not_found(request.target_id)

        self._users.upsert_reaction(request)

        counted = False
        if not premium and reaction_type.consequential:
            counted, remaining = self._count(request.user_id, remaining)

        logger.info(
            "reaction.saved",
            extra={
                "user_id": request.user_id,
                "target_id": request.target_id,
                "reaction_type": reaction_type.name.lower(),
                "premium": premium,
                "counted": counted,
            },
        )
        return ReactionOutcome(premium=premium, counted=counted, remaining=remaining)

    def _count(self, user_id: int, remaining: int | None) -> tuple[bool, int | None]:
        try:
            used = self._limiter.consume(user_id)
        except StoreAppError as exc:
            logger.error(
                "reaction.count_failed",
                extra={"user_id": user_id, "error_code": exc.code},
            )
            return False, remaining
        return True, max(0, self._limiter.limit - used)
