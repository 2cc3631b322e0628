"""Uniform response envelope and redirect outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any
from urllib.parse import quote

from flask import Response, jsonify, redirect

# Characters left unescaped by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass
class Envelope:
    """The ``{success, message, data?, errors?}`` body of every JSON reply."""

    success: bool
    message: str
    data: Any = None
    errors: dict | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        if self.errors is not None:
            payload["errors"] = self.errors
        return payload


def success_response(
    message: str,
    data: Any = None,
    status: HTTPStatus = HTTPStatus.OK,
) -> tuple[Response, HTTPStatus]:
    """Return a successful envelope paired with its status."""

    return jsonify(Envelope(True, message, data=data).to_dict()), status


def error_response(
    message: str,
    status: int,
    errors: dict | None = None,
    request_id: str | None = None,
) -> Response:
    """Return a failure envelope as a response with ``status`` applied."""

    payload = Envelope(False, message, errors=errors).to_dict()
    if request_id:
        payload["request_id"] = request_id
    response = jsonify(payload)
    response.status_code = int(status)
    return response


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def login_redirect(frontend_url: str, *, verified: bool = False, error: str | None = None) -> Response:
    """Redirect the browser to the frontend login page.

    Exactly one of ``verified=True`` or ``error`` is expected; the query string
    becomes ``verified=true`` or ``error=<encoded message>``.
    """

    base = f"{frontend_url.rstrip('/')}/auth/login"
    if error is not None:
        return redirect(f"{base}?error={encode_uri_component(error)}")
    if verified:
        return redirect(f"{base}?verified=true")
    return redirect(base)
