"""Tests for the email notifiers."""

from __future__ import annotations

import smtplib

import pytest
from flask import Flask

from models.user import User
from services.notifier import ConsoleNotifier, SMTPNotifier, build_notifier


class _FakeSMTP:
    instances: list["_FakeSMTP"] = []

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.calls: list[str] = []
        self.messages = []
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        self.calls.append(f"login:{username}")

    def send_message(self, message):
        self.messages.append(message)


class _BrokenSMTP(_FakeSMTP):
    def send_message(self, message):
        raise smtplib.SMTPRecipientsRefused({})


def _user() -> User:
    return User(
        first_name="Ada",
        email="ada@example.com",
        verification_token="verify-123",
        reset_password_token="reset-456",
    )


def _smtp_notifier(**kwargs) -> SMTPNotifier:
    return SMTPNotifier(
        "https://api.example/",
        "https://front.example",
        server="smtp.example",
        port=2525,
        sender="accounts@example.com",
        **kwargs,
    )


def test_links_point_at_api_and_frontend():
    notifier = ConsoleNotifier("https://api.example/", "https://front.example/")

    assert notifier.verification_link(_user()) == "https://api.example/auth/verify-email/verify-123"
    assert notifier.reset_link(_user()) == "https://front.example/auth/reset-password?token=reset-456"


def test_smtp_notifier_sends_verification_email(monkeypatch):
    _FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", _FakeSMTP)
    notifier = _smtp_notifier(username="mailer", password="secret")

    assert notifier.send_verification_email(_user()) is True

    smtp = _FakeSMTP.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.example", 2525)
    assert smtp.calls == ["starttls", "login:mailer"]
    message = smtp.messages[0]
    assert message["To"] == "ada@example.com"
    assert message["From"] == "accounts@example.com"
    assert message["Subject"] == "Verify your email address"
    assert "https://api.example/auth/verify-email/verify-123" in message.as_string()


def test_smtp_notifier_reports_failure(monkeypatch):
    _FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", _BrokenSMTP)

    assert _smtp_notifier(use_tls=False).send_password_reset_email(_user()) is False
    assert _FakeSMTP.instances[0].calls == []


@pytest.mark.parametrize(
    "backend, expected",
    [("console", ConsoleNotifier), ("SMTP", SMTPNotifier)],
)
def test_build_notifier_selects_backend(backend, expected):
    app = Flask(__name__)
    app.config.update(
        MAIL_BACKEND=backend,
        API_BASE_URL="https://api.example",
        FRONTEND_URL="https://front.example",
        MAIL_SERVER="smtp.example",
        MAIL_PORT=25,
        MAIL_DEFAULT_SENDER="accounts@example.com",
    )

    assert isinstance(build_notifier(app), expected)


def test_build_notifier_rejects_unknown_backend():
    app = Flask(__name__)
    app.config.update(
        MAIL_BACKEND="carrier-pigeon",
        API_BASE_URL="https://api.example",
        FRONTEND_URL="https://front.example",
    )

    with pytest.raises(ValueError):
        build_notifier(app)


def test_smtp_notifier_sends_html_alternative(monkeypatch):
    _FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", _FakeSMTP)

    assert _smtp_notifier().send_password_reset_email(_user()) is True

    message = _FakeSMTP.instances[0].messages[0]
    assert message.get_content_type() == "multipart/alternative"
    parts = message.get_payload()
    assert [part.get_content_type() for part in parts] == ["text/plain", "text/html"]
    link = "https://front.example/auth/reset-password?token=reset-456"
    assert link in parts[0].get_payload(decode=True).decode()
    assert 'href="' in parts[1].get_payload(decode=True).decode()


def test_templates_greet_user_and_escape_html():
    notifier = ConsoleNotifier("https://api.example", "https://front.example")

    text, html = notifier.render(
        "verification_email", first_name="<Ada>", link="https://api.example/x"
    )

    assert "<Ada>" in text
    assert "&lt;Ada&gt;" in html
    assert "https://api.example/x" in html
