"""SQLAlchemy-backed user store."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from models import db
from models.user import User

from .abstract_user_store import AbstractUserStore, DuplicateUserError


class SQLAlchemyUserStore(AbstractUserStore):
    """Persist users through the application's SQLAlchemy session."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        normalized = (email or "").strip().lower()
        if not normalized:
            return None
        return (
            self.session.query(User)
            .filter(func.lower(User.email) == normalized)
            .first()
        )

    def find_by_verification_token(self, token: str) -> User | None:
        if not token:
            return None
        return self.session.query(User).filter_by(verification_token=token).first()

    def find_by_reset_token(self, token: str) -> User | None:
        if not token:
            return None
        return self.session.query(User).filter_by(reset_password_token=token).first()

    def save(self, user: User) -> None:
        """Add the user to the session and commit, rolling back on failure."""

        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateUserError("User conflicts with an existing account") from exc
        except Exception:
            self.session.rollback()
            raise
