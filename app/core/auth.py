"""Access tokens, password hashing and the bearer-token dependency.

- Tokens are HS256 JWTs (PyJWT) whose ``sub`` claim is the user id.
- Passwords are hashed with bcrypt; verification uses ``bcrypt.checkpw``,
  which compares in constant time.
- ``authenticate`` backs the bearer dependency protecting ``/v1/users/me*``.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
import bcrypt
import jwt
from app.core.config import AuthSettings, settings
from app.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer"
BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(password: str, *, rounds: int | None = None) -> str:
    """Hash a plaintext password with a fresh bcrypt salt.

    Args:
        password: Plaintext password.
        rounds: bcrypt cost factor; defaults to ``AUTH_BCRYPT_ROUNDS``.

    Returns:
        The bcrypt hash as text (``$2b$...``).
    """
    cost = rounds if rounds is not None else settings.auth.bcrypt_rounds
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Return True when ``password`` matches the stored bcrypt hash.

    A malformed stored hash counts as a mismatch, and so does a password
    longer than bcrypt accepts, since no stored hash can have come from it.
    """
    encoded = password.encode()
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed_password.encode())
    except ValueError:
        logger.warning("auth.malformed_password_hash")
        return False


class TokenIssuer:
    """Signs and verifies access tokens scoped to a single user id."""

    def __init__(
        self,
        *,
        secret_key: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=1),
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must be a non-empty string")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_in = expires_in

    @classmethod
    def from_settings(cls, auth_settings: AuthSettings | None = None) -> "TokenIssuer":
        cfg = auth_settings or settings.auth
        return cls(
            secret_key=cfg.secret_key,
            algorithm=cfg.algorithm,
            expires_in=timedelta(seconds=cfg.token_expiration_seconds),
        )

    def issue(self, user_id: int, *, now: datetime | None = None) -> str:
        """Create a signed token for ``user_id`` expiring after the configured window."""
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._expires_in,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> int:
        """Validate signature and expiry and return the user id.

        Raises:
            AuthenticationAppError: If the token is expired, forged or malformed.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
            return int(claims["sub"])
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationAppError(
                code="token_expired",
                message="Access token has expired",
            ) from exc
        except (jwt.InvalidTokenError, ValueError) as exc:
            raise AuthenticationAppError(
                code="invalid_token",
                message="Invalid or missing required authentication",
            ) from exc


def parse_bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header value.

    Examples:
        >>> parse_bearer_token("Bearer abc.def.ghi")
        'abc.def.ghi'

    Raises:
        AuthenticationAppError: If the header is missing or not a bearer token.
    """
    if not authorization:
        raise AuthenticationAppError(
            code="missing_token",
            message="Missing token. Provide an Authorization: Bearer header.",
        )

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_PREFIX or not parts[1]:
        raise AuthenticationAppError(
            code="invalid_token",
            message="Invalid or missing required authentication",
        )
    return parts[1]


def authenticate(authorization: str | None, tokens: TokenIssuer) -> int:
    """Resolve the acting user from an ``Authorization`` header value.

    Args:
        authorization: Raw header value, or None when absent.
        tokens: Issuer whose key signed the tokens handed out at login.

    Raises:
        AuthenticationAppError: Rendered as 401 by the global handlers.
    """
    token = parse_bearer_token(authorization)
    try:
        user_id = tokens.verify(token)
    except AuthenticationAppError as exc:
        logger.warning(
            "auth.token_rejected",
            extra={
                "reason": exc.code,
                "token_hash": hashlib.sha256(token.encode()).hexdigest()[:16],
            },
        )
        raise

    logger.debug("auth.success", extra={"user_id": user_id})
    return user_id
