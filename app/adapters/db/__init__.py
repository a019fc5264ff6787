"""Relational store adapters (SQLAlchemy)."""

from app.adapters.db.base import AbstractUserRepository
from app.adapters.db.session import build_session_factory, create_db_engine, create_tables
from app.adapters.db.sqlalchemy_repository import SqlAlchemyUserRepository

__all__ = [
    "AbstractUserRepository",
    "SqlAlchemyUserRepository",
    "build_session_factory",
    "create_db_engine",
    "create_tables",
]
