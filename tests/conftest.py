"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from services.notifier import AbstractNotifier  # noqa: E402

FRONTEND_URL = "https://frontend.example"
API_BASE_URL = "https://api.example"


class RecordingNotifier(AbstractNotifier):
    """Notifier that keeps sent messages in memory."""

    def __init__(self):
        super().__init__(API_BASE_URL, FRONTEND_URL)
        self.deliveries: list[dict[str, str]] = []
        self.fail = False

    def deliver(
        self, recipient: str, subject: str, body: str, html_body: str | None = None
    ) -> bool:
        if self.fail:
            return False
        self.deliveries.append(
            {"to": recipient, "subject": subject, "body": body, "html": html_body}
        )
        return True


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length-for-hs256"
    FRONTEND_URL = FRONTEND_URL
    API_BASE_URL = API_BASE_URL
    CORS_ORIGINS = "*"
    EXPOSE_ERROR_DETAILS = True


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def app(notifier: RecordingNotifier) -> Flask:
    """Create a Flask application instance for tests."""

    application = create_app(_BaseTestConfig, notifier=notifier)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


def create_user(
    app: Flask,
    email: str = "ada@example.com",
    password: str = "Sup3rSecret",
    *,
    verified: bool = True,
    **fields,
) -> int:
    """Persist a user directly and return its id."""

    with app.app_context():
        user = User(
            first_name=fields.get("first_name", "Ada"),
            last_name=fields.get("last_name", "Lovelace"),
            email=email,
            country=fields.get("country", "United Kingdom"),
            city=fields.get("city", "London"),
            is_verified=verified,
        )
        user.set_password(password)
        if not verified:
            user.issue_verification_token()
        db.session.add(user)
        db.session.commit()
        return user.id


def auth_headers(app: Flask, user_id: int) -> dict[str, str]:
    with app.app_context():
        token = create_access_token(identity=str(user_id))
    return {"Authorization": f"Bearer {token}"}
