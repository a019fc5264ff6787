"""Registration and profile lookup."""

from __future__ import annotations

import logging

from app.adapters.db.base import AbstractUserRepository
from app.core.auth import TokenIssuer, hash_password
from app.core.errors import user_not_found
from app.schemas.users import NewUser, RegisterRequest, UserPublic, UserToken

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        *,
        users: AbstractUserRepository,
        tokens: TokenIssuer,
        bcrypt_rounds: int | None = None,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._bcrypt_rounds = bcrypt_rounds

    def register(self, params: RegisterRequest) -> UserToken:
        """Create a non-premium account and log it in.

        Raises:
            ConflictAppError: Username or email already taken.
            StoreAppError: If the insert fails.
        """
        created = self._users.insert_user(
            NewUser(
                username=params.username,
                email=str(params.email) if params.email else None,
                hashed_password=hash_password(params.password, rounds=self._bcrypt_rounds),
            )
        )
        logger.info("user.registered", extra={"user_id": created.id})
        return UserToken(token=self._tokens.issue(created.id))

    def show(self, user_id: int) -> UserPublic:
        """Return the public profile of ``user_id``.

        Raises:
            NotFoundAppError: If the user does not exist.
        """
        user = self._users.get_user_by_id(user_id)
        if user is None:
            raise user_not_found(user_id)
        return UserPublic.model_validate(user.model_dump())
