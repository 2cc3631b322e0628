"""Failures raised by the account services.

Each error kind names the HTTP error it is reported as; the application's
error handler performs the conversion.
"""

from __future__ import annotations

from werkzeug.exceptions import HTTPException

from utils.errors import AuthenticationError, ServerError, ValidationError


class AuthServiceError(Exception):
    """Base class for client-facing account failures."""

    http_error: type[HTTPException] = ValidationError
    default_message = "Request could not be completed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_http(self) -> HTTPException:
        return self.http_error(self.message)


class DuplicateEmailError(AuthServiceError):
    default_message = "An account with this email already exists"


class PasswordMismatchError(AuthServiceError):
    default_message = "Passwords do not match"


class WeakPasswordError(AuthServiceError):
    default_message = "Password is too short"


class UnknownEmailError(AuthServiceError):
    default_message = "No account found with this email"


class InvalidTokenError(AuthServiceError):
    default_message = "Invalid or expired token"


class InvalidCredentialsError(AuthServiceError):
    http_error = AuthenticationError
    default_message = "Invalid email or password"


class AccountNotVerifiedError(AuthServiceError):
    http_error = AuthenticationError
    default_message = "Please verify your email before logging in"


class NotificationError(AuthServiceError):
    """The mail transport refused or failed to deliver a message."""

    http_error = ServerError
    default_message = "Could not send verification email"
