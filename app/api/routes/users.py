from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.dependencies import Container, get_current_user_id
from app.schemas.users import (
    MessageResponse,
    ReactionPayload,
    ReactionRequest,
    ReactionResponse,
    RegisterRequest,
    UserPublic,
    UserToken,
)

router = APIRouter(prefix="/users", tags=["Users"])

CurrentUserId = Annotated[int, Depends(get_current_user_id)]


@router.post(
    "/register",
    response_model=UserToken,
    status_code=status.HTTP_201_CREATED,
)
def register(payload: RegisterRequest, container: Container) -> UserToken:
    """Create an account and return an access token for it.

    Raises:
        ConflictAppError: 409 when the username or email is taken.
    """
    return container.users.register(payload)


@router.get("/me", response_model=UserPublic)
def show(user_id: CurrentUserId, container: Container) -> UserPublic:
    """Return the authenticated user's profile."""
    return container.users.show(user_id)


@router.patch("/me/react", response_model=ReactionResponse)
def react(payload: ReactionPayload, user_id: CurrentUserId, container: Container) -> ReactionResponse:
    """Like, pass or mark another user as undecided.

    Non-premium users may send a limited number of likes/passes per day;
    undecided reactions are free.

    Raises:
        ValidationAppError: 400 for a bad target or reaction type.
        NotFoundAppError: 404 when the target user does not exist.
        QuotaExceededAppError: 429 once the daily limit is reached.
    """
    outcome = container.reactions.react(
        ReactionRequest(user_id=user_id, target_id=payload.target_id, type=payload.type)
    )
    return ReactionResponse(premium=outcome.premium, remaining=outcome.remaining)


@router.patch("/me/premium/grant", response_model=MessageResponse)
def grant_premium(user_id: CurrentUserId, container: Container) -> MessageResponse:
    container.premium.grant(user_id)
    return MessageResponse(message="Premium granted")


@router.patch("/me/premium/unsubscribe", response_model=MessageResponse)
def unsubscribe_premium(user_id: CurrentUserId, container: Container) -> MessageResponse:
    container.premium.revoke(user_id)
    return MessageResponse(message="Unsubscribed from premium")
