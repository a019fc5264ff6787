"""Relational store interface for users and reactions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.schemas.users import NewUser, Reaction, ReactionRequest, User


class AbstractUserRepository(ABC):
    """Source of truth for users, their premium flag and their reactions.

    Lookups return ``None`` when the row does not exist. Backend failures are
    raised as ``StoreAppError``.
    """

    @abstractmethod
    def get_user_by_id(self, user_id: int) -> User | None:
        raise NotImplementedError

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None:
        raise NotImplementedError

    @abstractmethod
    def insert_user(self, user: NewUser) -> User:
        """Insert a user and return it with its generated id.

        Raises:
            ConflictAppError: If the username or email is already taken.
        """
        raise NotImplementedError

    @abstractmethod
    def update_user_premium(self, user_id: int, premium: bool) -> None:
        """Set the premium flag.

        Raises:
            NotFoundAppError: If no user has ``user_id``.
        """
        raise NotImplementedError

    @abstractmethod
    def upsert_reaction(self, reaction: ReactionRequest) -> None:
        """Insert the reaction or overwrite the type of the existing (user, target) row."""
        raise NotImplementedError

    @abstractmethod
    def get_reaction(self, user_id: int, target_id: int) -> Reaction | None:
        raise NotImplementedError
