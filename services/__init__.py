"""Account services and their wiring into the Flask application."""

from __future__ import annotations

from flask import Flask, current_app

from storage import SQLAlchemyUserStore

from .auth_service import AuthService, LoginResult
from .exceptions import AuthServiceError
from .notifier import AbstractNotifier, build_notifier

EXTENSION_KEY = "auth_service"


def init_services(app: Flask, notifier: AbstractNotifier | None = None) -> AuthService:
    """Build the AuthService for ``app`` and register it as an extension."""

    service = AuthService(
        SQLAlchemyUserStore(),
        notifier or build_notifier(app),
        token_expires=app.config["JWT_ACCESS_TOKEN_EXPIRES"],
        reset_token_ttl=int(app.config["PASSWORD_RESET_TOKEN_TTL"]),
        password_min_length=int(app.config["PASSWORD_MIN_LENGTH"]),
    )
    app.extensions[EXTENSION_KEY] = service
    return service


def get_auth_service() -> AuthService:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "AbstractNotifier",
    "AuthService",
    "AuthServiceError",
    "LoginResult",
    "get_auth_service",
    "init_services",
]
