"""Authenticated identity handed to protected handlers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from utils.errors import AuthenticationError


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, established from a verified bearer token."""

    user_id: int


def current_auth_context() -> AuthContext:
    """Verify the request's JWT and return the caller's identity."""

    verify_jwt_in_request()
    identity = get_jwt_identity()
    try:
        return AuthContext(user_id=int(identity))
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token identity.") from exc


def auth_required(view):
    """Require a valid bearer token and pass its AuthContext to ``view``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        return view(current_auth_context(), *args, **kwargs)

    return wrapper
