"""User store abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod

from models.user import User


class DuplicateUserError(Exception):
    """A unique user attribute (email or token) is already taken."""


class AbstractUserStore(ABC):
    """Interface for user persistence backends."""

    @abstractmethod
    def find_by_id(self, user_id: int) -> User | None:
        """Return the user with the given primary key, if any."""

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        """Return the user registered with ``email`` (case-insensitive)."""

    @abstractmethod
    def find_by_verification_token(self, token: str) -> User | None:
        """Return the user holding the outstanding verification token."""

    @abstractmethod
    def find_by_reset_token(self, token: str) -> User | None:
        """Return the user holding the password reset token."""

    @abstractmethod
    def save(self, user: User) -> None:
        """Persist a new or modified user.

        Raises DuplicateUserError when a unique attribute is already taken.
        """
