"""Outgoing account emails."""

from __future__ import annotations

import logging
import smtplib
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path

from flask import Flask
from jinja2 import Environment, FileSystemLoader, select_autoescape

from models.user import User

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates" / "emails"


class AbstractNotifier(ABC):
    """Interface for sending verification and password reset emails.

    Implementations return ``True`` when the message was handed to the
    transport and ``False`` when delivery failed.
    """

    def __init__(self, api_base_url: str, frontend_url: str):
        self.api_base_url = api_base_url.rstrip("/")
        self.frontend_url = frontend_url.rstrip("/")
        self.jinja_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def verification_link(self, user: User) -> str:
        return f"{self.api_base_url}/auth/verify-email/{user.verification_token}"

    def reset_link(self, user: User) -> str:
        return f"{self.frontend_url}/auth/reset-password?token={user.reset_password_token}"

    def render(self, template: str, **context) -> tuple[str, str]:
        """Render the text and HTML variants of an email template."""

        text = self.jinja_env.get_template(f"{template}.txt").render(**context)
        html = self.jinja_env.get_template(f"{template}.html").render(**context)
        return text, html

    def send_verification_email(self, user: User) -> bool:
        body, html_body = self.render(
            "verification_email",
            first_name=user.first_name,
            link=self.verification_link(user),
        )
        return self.deliver(user.email, "Verify your email address", body, html_body)

    def send_password_reset_email(self, user: User) -> bool:
        body, html_body = self.render(
            "reset_password_email",
            first_name=user.first_name,
            link=self.reset_link(user),
        )
        return self.deliver(user.email, "Reset your password", body, html_body)

    @abstractmethod
    def deliver(
        self, recipient: str, subject: str, body: str, html_body: str | None = None
    ) -> bool:
        """Send a message with a plain-text body and optional HTML alternative."""


class ConsoleNotifier(AbstractNotifier):
    """Write emails to the log instead of sending them."""

    def deliver(
        self, recipient: str, subject: str, body: str, html_body: str | None = None
    ) -> bool:
        logger.info("Email to %s: %s\n%s", recipient, subject, body)
        return True


class SMTPNotifier(AbstractNotifier):
    """Send emails through an SMTP relay."""

    def __init__(
        self,
        api_base_url: str,
        frontend_url: str,
        *,
        server: str,
        port: int,
        sender: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
    ):
        super().__init__(api_base_url, frontend_url)
        self.server = server
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls

    def deliver(
        self, recipient: str, subject: str, body: str, html_body: str | None = None
    ) -> bool:
        message = MIMEMultipart("alternative")
        message["From"] = self.sender
        message["To"] = recipient
        message["Subject"] = subject
        message.attach(MIMEText(body, "plain"))
        if html_body:
            message.attach(MIMEText(html_body, "html"))

        try:
            with smtplib.SMTP(self.server, self.port) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("SMTP error sending '%s' to %s: %s", subject, recipient, exc)
            return False

        logger.info("Sent '%s' to %s", subject, recipient)
        return True


def build_notifier(app: Flask) -> AbstractNotifier:
    """Create the notifier selected by ``MAIL_BACKEND``."""

    backend = (app.config.get("MAIL_BACKEND") or "console").lower()
    api_base_url = app.config["API_BASE_URL"]
    frontend_url = app.config["FRONTEND_URL"]

    if backend == "console":
        return ConsoleNotifier(api_base_url, frontend_url)
    if backend == "smtp":
        return SMTPNotifier(
            api_base_url,
            frontend_url,
            server=app.config["MAIL_SERVER"],
            port=int(app.config["MAIL_PORT"]),
            sender=app.config["MAIL_DEFAULT_SENDER"],
            username=app.config.get("MAIL_USERNAME"),
            password=app.config.get("MAIL_PASSWORD"),
            use_tls=bool(app.config.get("MAIL_USE_TLS", True)),
        )
    raise ValueError(f"Unknown MAIL_BACKEND: {backend!r}")
