"""User model definition."""

import secrets
from datetime import datetime, timedelta
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from . import db


def generate_token() -> str:
    """Return a new opaque, URL-safe token."""

    return secrets.token_urlsafe(32)


class User(db.Model):
    """Represents an account holder."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    country = db.Column(db.String(120), nullable=False)
    city = db.Column(db.String(120), nullable=False)
    is_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.text("false"),
    )
    verification_token = db.Column(db.String(128), unique=True, nullable=True)
    reset_password_token = db.Column(db.String(128), unique=True, nullable=True)
    reset_password_expires = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def issue_verification_token(self) -> str:
        """Attach a fresh email verification token and return it."""

        self.verification_token = generate_token()
        return self.verification_token

    def mark_verified(self) -> None:
        """Mark the email as verified and consume the verification token."""

        self.is_verified = True
        self.verification_token = None

    def issue_reset_token(self, ttl_seconds: int, now: Optional[datetime] = None) -> str:
        """Attach a password reset token valid for ``ttl_seconds``."""

        now = now or datetime.utcnow()
        self.reset_password_token = generate_token()
        self.reset_password_expires = now + timedelta(seconds=ttl_seconds)
        return self.reset_password_token

    def reset_token_is_valid(self, now: Optional[datetime] = None) -> bool:
        if not self.reset_password_token or self.reset_password_expires is None:
            return False
        return (now or datetime.utcnow()) < self.reset_password_expires

    def clear_reset_token(self) -> None:
        self.reset_password_token = None
        self.reset_password_expires = None

    def to_dict(self) -> dict:
        """Serialize the user without credentials or tokens."""

        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "country": self.country,
            "city": self.city,
            "isVerified": bool(self.is_verified),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
