"""Pydantic models for users, reactions and the user/auth endpoints."""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.auth import BCRYPT_MAX_PASSWORD_BYTES


class ReactionType(IntEnum):
    """Reaction a user can record about another user."""

    UNDECIDED = 0
    PASS = 1
    LIKE = 2

    @property
    def consequential(self) -> bool:
        """Whether this reaction consumes daily quota."""
        return self is not ReactionType.UNDECIDED

    @classmethod
    def is_valid(cls, value: int) -> bool:
        try:
            cls(value)
        except ValueError:
            return False
        return True


class User(BaseModel):
    """User row as read from the relational store."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    username: str
    email: str | None = None
    hashed_password: str
    premium: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NewUser(BaseModel):
    """Values needed to insert a user."""

    username: str
    email: str | None = None
    hashed_password: str
    premium: bool = False


class UserPublic(BaseModel):
    """User profile safe to return to clients (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    premium: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReactionRequest(BaseModel):
    """A reaction from ``user_id`` about ``target_id``.

    ``type`` is kept as a plain int so out-of-range values reach the service
    and are rejected there with a field-attributed validation error.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    target_id: int
    type: int


class Reaction(BaseModel):
    """Persisted reaction record, unique per (user_id, target_id)."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    user_id: int
    target_id: int
    type: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RegisterRequest(BaseModel):
    """Registration payload."""

    username: str = Field(..., max_length=255, description="Unique login name.")
    email: EmailStr | None = Field(default=None, description="Optional unique email address.")
    password: str = Field(
        ..., description="Plaintext password, more than 10 characters and at most 72 bytes."
    )

    @field_validator("username")
    @classmethod
    def _username_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username can not be blank")
        return value

    @field_validator("password")
    @classmethod
    def _password_long_enough(cls, value: str) -> str:
        if len(value) <= 10:
            raise ValueError("Password must be more than 10 characters")
        # bcrypt only accepts up to 72 bytes of input
        if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(
                f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes when UTF-8 encoded"
            )
        return value


class LoginRequest(BaseModel):
    """Login payload."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserToken(BaseModel):
    """Signed access token returned by register and login."""

    token: str


class ReactionPayload(BaseModel):
    """Body of ``PATCH /v1/users/me/react``; the acting user comes from the token."""

    target_id: int = Field(..., description="User being reacted to.")
    type: int = Field(..., description="0 = undecided, 1 = pass, 2 = like.")


class ReactionResponse(BaseModel):
    """Result of a saved reaction."""

    message: str = "Reaction saved"
    premium: bool
    remaining: int | None = Field(
        default=None,
        description="Consequential reactions left today; null for premium users.",
    )


class MessageResponse(BaseModel):
    message: str
