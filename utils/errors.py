"""HTTP error taxonomy rendered as response envelopes."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import (
    BadRequest,
    Forbidden,
    InternalServerError,
    NotFound,
    Unauthorized,
)


class ValidationError(BadRequest):
    """Missing or malformed request input (400)."""

    def __init__(self, description: str | None = None, errors: dict | None = None):
        super().__init__(description)
        self.errors = errors


class AuthenticationError(Unauthorized):
    """Bad or missing credentials (401)."""


class AuthorizationError(Forbidden):
    """Authenticated, but not allowed to access the resource (403)."""


class NotFoundError(NotFound):
    """The requested record does not exist (404)."""


class ServerError(InternalServerError):
    """Unexpected failure of a collaborator (500)."""


GENERIC_ERROR_MESSAGE = "An unexpected error occurred."


def public_message(error: Exception, expose: bool, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """Return the text of an unexpected error that may be shown to clients.

    Database errors are never echoed: their text carries SQL parameters such
    as password hashes and tokens.
    """

    if not expose or isinstance(error, SQLAlchemyError) or not str(error):
        return fallback
    return str(error)
