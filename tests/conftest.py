"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment variables are set before any app import so the global settings
point at in-memory stores and a throwaway SQLite database.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key-123")
os.environ.setdefault("AUTH_BCRYPT_ROUNDS", "4")
os.environ.setdefault("REDIS_BACKEND", "memory")
os.environ.setdefault("DB_URL", "sqlite:///:memory:")
os.environ.setdefault("DB_AUTO_CREATE", "true")

import pytest

from app.adapters.cache.in_memory import InMemoryCacheStore
from app.adapters.db.session import build_session_factory, create_db_engine, create_tables
from app.adapters.db.sqlalchemy_repository import SqlAlchemyUserRepository
from app.adapters.rate_limit.in_memory import InMemoryCounterStore
from app.core.auth import TokenIssuer, hash_password
from app.core.config import DatabaseSettings
from app.schemas.users import NewUser
from app.services.policy import DEFAULT_UTC_OFFSET, ReactionPolicy


@pytest.fixture
def cache() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def counters() -> InMemoryCounterStore:
    return InMemoryCounterStore()


@pytest.fixture
def policy() -> ReactionPolicy:
    return ReactionPolicy(daily_limit=10, tz=DEFAULT_UTC_OFFSET)


@pytest.fixture
def tokens() -> TokenIssuer:
    return TokenIssuer(secret_key="unit-test-secret")


@pytest.fixture
def repo() -> SqlAlchemyUserRepository:
    """Repository over a fresh in-memory SQLite database."""
    engine = create_db_engine(DatabaseSettings(url="sqlite:///:memory:"))
    create_tables(engine)
    yield SqlAlchemyUserRepository(build_session_factory(engine))
    engine.dispose()


@pytest.fixture
def make_user(repo: SqlAlchemyUserRepository):
    """Insert a user and return it; password is always 'password-123'."""

    hashed = hash_password("password-123", rounds=4)

    def _make(username: str, *, premium: bool = False, email: str | None = None):
        return repo.insert_user(
            NewUser(username=username, email=email, hashed_password=hashed, premium=premium)
        )

    return _make
