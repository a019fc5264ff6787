"""SQLAlchemy implementation of the user repository.

Each call runs in its own short session/transaction; there is no
request-level transaction spanning several repository calls.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.adapters.db.base import AbstractUserRepository
from app.adapters.db.models import ReactionModel, UserModel
from app.core.errors import ConflictAppError, StoreAppError, user_not_found
from app.schemas.users import NewUser, Reaction, ReactionRequest, User

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlAlchemyUserRepository(AbstractUserRepository):
    """User repository over a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Session]:
        """Yield a session, commit on success and wrap driver errors.

        Args:
            operation: Short description used in the wrapped error message.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreAppError(
                code="database_error",
                message=f"database error when {operation}",
                details={"operation": operation},
            ) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_user_by_id(self, user_id: int) -> User | None:
        with self._transaction("get user by ID") as session:
            row = session.get(UserModel, user_id)
            return User.model_validate(row) if row is not None else None

    def get_user_by_username(self, username: str) -> User | None:
        with self._transaction("get user by username") as session:
            row = session.scalars(
                select(UserModel).where(UserModel.username == username)
            ).one_or_none()
            return User.model_validate(row) if row is not None else None

    def insert_user(self, user: NewUser) -> User:
        with self._transaction("insert to users") as session:
            row = UserModel(
                username=user.username,
                email=user.email,
                hashed_password=user.hashed_password,
                premium=user.premium,
            )
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                session.rollback()
                field = self._duplicate_field(session, user)
                logger.info("db.duplicate_user", extra={"field": field})
                raise ConflictAppError(
                    code="duplicate_user",
                    message="Username or email already exists",
                    details={"field": field},
                ) from exc
            session.refresh(row)
            return User.model_validate(row)

    def update_user_premium(self, user_id: int, premium: bool) -> None:
        with self._transaction("update premium to users") as session:
            result = session.execute(
                update(UserModel).where(UserModel.id == user_id).values(premium=premium)
            )
            if result.rowcount == 0:
                raise user_not_found(user_id)

    def upsert_reaction(self, reaction: ReactionRequest) -> None:
        with self._transaction("upsert to user_reactions") as session:
            dialect = session.get_bind().dialect.name
            insert = _UPSERT_DIALECTS.get(dialect)
            if insert is None:
                raise StoreAppError(
                    code="unsupported_dialect",
                    message=f"upsert is not supported on {dialect}",
                    details={"operation": "upsert to user_reactions"},
                )

            stmt = insert(ReactionModel).values(
                user_id=reaction.user_id,
                target_id=reaction.target_id,
                type=reaction.type,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[ReactionModel.user_id, ReactionModel.target_id],
                set_={"type": stmt.excluded["type"], "updated_at": func.now()},
            )
            session.execute(stmt)

    def get_reaction(self, user_id: int, target_id: int) -> Reaction | None:
        with self._transaction("get user reaction") as session:
            row = session.scalars(
                select(ReactionModel).where(
                    ReactionModel.user_id == user_id,
                    ReactionModel.target_id == target_id,
                )
            ).one_or_none()
            return Reaction.model_validate(row) if row is not None else None

    @staticmethod
    def _duplicate_field(session: Session, user: NewUser) -> str:
        """Work out which unique column a failed insert collided with."""
        taken = session.scalar(
            select(UserModel.id).where(UserModel.username == user.username)
        )
        return "username" if taken is not None else "email"
