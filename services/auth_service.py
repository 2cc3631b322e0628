"""Account lifecycle: signup, login, password reset and email verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Mapping

from flask_jwt_extended import create_access_token

from models.user import User
from storage import AbstractUserStore, DuplicateUserError

from .exceptions import (
    AccountNotVerifiedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotificationError,
    PasswordMismatchError,
    UnknownEmailError,
    WeakPasswordError,
)
from .notifier import AbstractNotifier

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    """Outcome of a successful login."""

    user: User
    token: str
    expires_in: int


def _normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


class AuthService:
    """Business rules for accounts, independent of HTTP."""

    def __init__(
        self,
        store: AbstractUserStore,
        notifier: AbstractNotifier,
        *,
        token_expires: timedelta = timedelta(hours=1),
        reset_token_ttl: int = 3600,
        password_min_length: int = 8,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.notifier = notifier
        self.token_expires = token_expires
        self.reset_token_ttl = reset_token_ttl
        self.password_min_length = password_min_length
        self.clock = clock

    def _check_new_password(self, password: str, confirm_password: str) -> None:
        if password != confirm_password:
            raise PasswordMismatchError()
        if len(password) < self.password_min_length:
            raise WeakPasswordError(
                f"Password must be at least {self.password_min_length} characters long"
            )

    def create_user(self, fields: Mapping[str, str]) -> User:
        """Register an unverified account and send its verification email."""

        email = _normalize_email(fields.get("email"))
        if self.store.find_by_email(email) is not None:
            raise DuplicateEmailError()

        self._check_new_password(fields["password"], fields["confirm_password"])

        user = User(
            first_name=fields["firstName"].strip(),
            last_name=fields["lastName"].strip(),
            email=email,
            country=fields["country"].strip(),
            city=fields["city"].strip(),
            is_verified=False,
        )
        user.set_password(fields["password"])
        user.issue_verification_token()
        try:
            self.store.save(user)
        except DuplicateUserError as exc:
            raise DuplicateEmailError() from exc
        logger.info("Registered user %s", user.id)

        if not self.notifier.send_verification_email(user):
            logger.warning("Verification email for user %s was not delivered", user.id)
        return user

    def login_user(self, email: str, password: str) -> LoginResult:
        """Check credentials and issue a bearer token for a verified account."""

        user = self.store.find_by_email(_normalize_email(email))
        if user is None or not user.check_password(password):
            raise InvalidCredentialsError()
        if not user.is_verified:
            raise AccountNotVerifiedError()

        token = create_access_token(
            identity=str(user.id), expires_delta=self.token_expires
        )
        logger.info("User %s logged in", user.id)
        return LoginResult(
            user=user,
            token=token,
            expires_in=int(self.token_expires.total_seconds()),
        )

    def initiate_password_reset(self, email: str) -> None:
        """Issue a time-limited reset token and email the reset link."""

        user = self.store.find_by_email(_normalize_email(email))
        if user is None:
            raise UnknownEmailError()

        user.issue_reset_token(self.reset_token_ttl, now=self.clock())
        self.store.save(user)

        if not self.notifier.send_password_reset_email(user):
            logger.warning("Password reset email for user %s was not delivered", user.id)

    def reset_password(self, token: str, new_password: str, confirm_password: str) -> None:
        """Replace the password of the account holding a valid reset token."""

        self._check_new_password(new_password, confirm_password)

        user = self.store.find_by_reset_token(token)
        if user is None or not user.reset_token_is_valid(now=self.clock()):
            raise InvalidTokenError("Invalid or expired reset token")

        user.set_password(new_password)
        user.clear_reset_token()
        self.store.save(user)
        logger.info("Password reset for user %s", user.id)

    def verify_email(self, token: str) -> None:
        """Consume a verification token and mark its account verified."""

        user = self.store.find_by_verification_token(token)
        if user is None:
            raise InvalidTokenError("Invalid or expired verification token")

        user.mark_verified()
        self.store.save(user)
        logger.info("Verified email for user %s", user.id)

    def resend_verification(self, user: User) -> None:
        """Send the verification email again, issuing a token if none is pending."""

        if not user.verification_token:
            user.issue_verification_token()
            self.store.save(user)

        if not self.notifier.send_verification_email(user):
            raise NotificationError()
