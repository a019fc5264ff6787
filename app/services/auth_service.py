"""Username/password login."""

from __future__ import annotations

import logging

from app.adapters.db.base import AbstractUserRepository
from app.core.auth import TokenIssuer, verify_password
from app.core.errors import AuthenticationAppError
from app.schemas.users import UserToken

logger = logging.getLogger(__name__)


def invalid_credentials() -> AuthenticationAppError:
    # same error for unknown user and wrong password
    return AuthenticationAppError(
        code="invalid_credentials",
        message="Invalid username or password",
    )


class AuthService:
    def __init__(self, *, users: AbstractUserRepository, tokens: TokenIssuer) -> None:
        self._users = users
        self._tokens = tokens

    def login(self, username: str, password: str) -> UserToken:
        """Verify credentials and issue an access token.

        Raises:
            AuthenticationAppError: Unknown username or wrong password.
            StoreAppError: If the user lookup fails.
        """
        user = self._users.get_user_by_username(username)
        if user is None:
            logger.info("auth.login_failed", extra={"reason": "unknown_user"})
            raise invalid_credentials()

        if not verify_password(password, user.hashed_password):
            logger.info("auth.login_failed", extra={"reason": "wrong_password", "user_id": user.id})
            raise invalid_credentials()

        logger.info("auth.login_succeeded", extra={"user_id": user.id})
        return UserToken(token=self._tokens.issue(user.id))
