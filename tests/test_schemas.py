"""Tests for request schema validation."""

import pytest
from pydantic import ValidationError

from app.schemas.users import ReactionType, RegisterRequest


class TestRegisterRequest:
    def test_username_is_stripped(self) -> None:
        assert RegisterRequest(username="  alice ", password="long-password").username == "alice"

    def test_blank_username(self) -> None:
        with pytest.raises(ValidationError, match="Username can not be blank"):
            RegisterRequest(username="   ", password="long-password")

    def test_short_password(self) -> None:
        with pytest.raises(ValidationError, match="more than 10 characters"):
            RegisterRequest(username="alice", password="0123456789")

    def test_eleven_character_password_accepted(self) -> None:
        assert RegisterRequest(username="alice", password="01234567890").password == "01234567890"

    def test_password_at_byte_limit_accepted(self) -> None:
        assert len(RegisterRequest(username="alice", password="x" * 72).password) == 72

    @pytest.mark.parametrize("password", ["x" * 80, "\u00e9" * 40])
    def test_password_over_bcrypt_limit(self, password: str) -> None:
        with pytest.raises(ValidationError, match="at most 72 bytes"):
            RegisterRequest(username="alice", password=password)

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(username="alice", email="not-an-email", password="long-password")

    def test_email_optional(self) -> None:
        assert RegisterRequest(username="alice", password="long-password").email is None


class TestReactionType:
    def test_consequential(self) -> None:
        assert ReactionType.LIKE.consequential is True
        assert ReactionType.PASS.consequential is True
        assert ReactionType.UNDECIDED.consequential is False

    @pytest.mark.parametrize("value, expected", [(0, True), (1, True), (2, True), (3, False), (-1, False)])
    def test_is_valid(self, value: int, expected: bool) -> None:
        assert ReactionType.is_valid(value) is expected
