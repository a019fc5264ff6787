"""Integration tests for the SQLAlchemy user repository on in-memory SQLite."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.adapters.db.sqlalchemy_repository import SqlAlchemyUserRepository
from app.core.errors import ConflictAppError, ErrorKind, NotFoundAppError, StoreAppError
from app.schemas.users import NewUser, ReactionRequest


class TestUsers:
    def test_insert_assigns_id_and_defaults(self, repo: SqlAlchemyUserRepository) -> None:
        user = repo.insert_user(NewUser(username="alice", hashed_password="h"))

        assert user.id > 0
        assert user.premium is False
        assert user.email is None

    def test_lookup_by_id_and_username(self, repo: SqlAlchemyUserRepository, make_user) -> None:
        created = make_user("alice", email="alice@example.com")

        assert repo.get_user_by_id(created.id).username == "alice"
        assert repo.get_user_by_username("alice").email == "alice@example.com"

    def test_missing_user_returns_none(self, repo: SqlAlchemyUserRepository) -> None:
        assert repo.get_user_by_id(42) is None
        assert repo.get_user_by_username("nobody") is None

    def test_duplicate_username_conflict(self, repo: SqlAlchemyUserRepository, make_user) -> None:
        make_user("alice")

        with pytest.raises(ConflictAppError) as exc_info:
            make_user("alice")

        assert exc_info.value.kind is ErrorKind.CONFLICT
        assert exc_info.value.details["field"] == "username"

    def test_duplicate_email_conflict(self, repo: SqlAlchemyUserRepository, make_user) -> None:
        make_user("alice", email="same@example.com")

        with pytest.raises(ConflictAppError) as exc_info:
            make_user("bob", email="same@example.com")

        assert exc_info.value.details["field"] == "email"

    def test_multiple_users_without_email(self, repo: SqlAlchemyUserRepository, make_user) -> None:
        make_user("alice")
        make_user("bob")

        assert repo.get_user_by_username("bob") is not None

    def test_update_premium(self, repo: SqlAlchemyUserRepository, make_user) -> None:
        user = make_user("alice")

        repo.update_user_premium(user.id, True)
        assert repo.get_user_by_id(user.id).premium is True

        repo.update_user_premium(user.id, False)
        assert repo.get_user_by_id(user.id).premium is False

    def test_update_premium_missing_user(self, repo: SqlAlchemyUserRepository) -> None:
        with pytest.raises(NotFoundAppError):
            repo.update_user_premium(404, True)


class TestReactions:
    def test_upsert_inserts(self, repo: SqlAlchemyUserRepository, make_user) -> None:
        alice, bob = make_user("alice"), make_user("bob")

        repo.upsert_reaction(ReactionRequest(user_id=alice.id, target_id=bob.id, type=2))

        saved = repo.get_reaction(alice.id, bob.id)
        assert saved.type == 2

    def test_upsert_overwrites_type(self, repo: SqlAlchemyUserRepository, make_user) -> None:
        alice, bob = make_user("alice"), make_user("bob")

        repo.upsert_reaction(ReactionRequest(user_id=alice.id, target_id=bob.id, type=2))
        repo.upsert_reaction(ReactionRequest(user_id=alice.id, target_id=bob.id, type=1))
        repo.upsert_reaction(ReactionRequest(user_id=alice.id, target_id=bob.id, type=1))

        assert repo.get_reaction(alice.id, bob.id).type == 1

    def test_reactions_are_directional(self, repo: SqlAlchemyUserRepository, make_user) -> None:
        alice, bob = make_user("alice"), make_user("bob")

        repo.upsert_reaction(ReactionRequest(user_id=alice.id, target_id=bob.id, type=2))

        assert repo.get_reaction(bob.id, alice.id) is None


def test_driver_errors_become_store_errors() -> None:
    session = MagicMock()
    session.get.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    repo = SqlAlchemyUserRepository(MagicMock(return_value=session))

    with pytest.raises(StoreAppError) as exc_info:
        repo.get_user_by_id(1)

    assert exc_info.value.code == "database_error"
    assert exc_info.value.kind is ErrorKind.INFRASTRUCTURE
    session.rollback.assert_called_once()
    session.close.assert_called_once()
