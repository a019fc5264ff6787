"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.

Every error carries an ``ErrorKind`` tag. Handlers and callers branch on the
kind (or the class), never on the message text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, NotRequired, TypedDict


class ErrorKind(str, Enum):
    """Coarse error taxonomy used to pick HTTP status and log level."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    POLICY = "policy"
    INFRASTRUCTURE = "infrastructure"


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep backward compatibility while encouraging
    consistent shapes across the codebase.
    """

    code: str
    message: str
    hint: str
    field: str
    user_id: int
    target_id: int
    limit: int
    remaining: int
    operation: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    kind: ClassVar[ErrorKind] = ErrorKind.VALIDATION
    http_status: ClassVar[int] = 400

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""

    def __init__(
        self,
        code: str,
        message: str,
        details: ErrorDetails | None = None,
        *,
        field: str | None = None,
    ) -> None:
        if field is not None:
            details = {**(details or {}), "field": field}
        super().__init__(code=code, message=message, details=details)

    @property
    def field(self) -> str | None:
        return (self.details or {}).get("field")


class AuthenticationAppError(AppError):
    """Raised when authentication fails (bad credentials, bad token)."""

    kind = ErrorKind.AUTHENTICATION
    http_status = 401


class NotFoundAppError(AppError):
    """Raised when a referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND
    http_status = 404


class ConflictAppError(AppError):
    """Raised when a write collides with a uniqueness constraint."""

    kind = ErrorKind.CONFLICT
    http_status = 409


class PolicyAppError(AppError):
    """Raised when a business rule rejects an otherwise valid request."""

    kind = ErrorKind.POLICY
    http_status = 403


class QuotaExceededAppError(PolicyAppError):
    """Raised when a user has used up their daily reaction allowance."""

    http_status = 429


class StoreAppError(AppError):
    """Raised when a backing store (database, cache, counter) fails."""

    kind = ErrorKind.INFRASTRUCTURE
    http_status = 500


def user_not_found(user_id: int) -> NotFoundAppError:
    """Build the not-found error used for any missing user reference."""
    return NotFoundAppError(
        code="user_not_found",
        message=f"User not found: {user_id}",
        details={"user_id": user_id},
    )
