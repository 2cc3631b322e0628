"""Authentication blueprint: signup, login, password reset, verification and profile."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, request
from flask_jwt_extended import set_access_cookies, unset_jwt_cookies

from services import get_auth_service
from services.exceptions import AuthServiceError
from storage import AbstractUserStore
from utils.auth_context import AuthContext, auth_required
from utils.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
    public_message,
)
from utils.request_validation import (
    optional_text_fields,
    parse_json_request,
    require_fields,
)
from utils.responses import login_redirect, success_response


auth_bp = Blueprint("auth", __name__)

SIGNUP_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "password",
    "confirm_password",
    "country",
    "city",
)
PROFILE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "country": "country",
    "city": "city",
}


def _user_store() -> AbstractUserStore:
    return get_auth_service().store


def _frontend_url() -> str:
    return current_app.config.get("FRONTEND_URL") or "http://localhost:3000"


@auth_bp.route("/signup", methods=["POST"])
def signup():
    """Register a new, unverified account."""

    payload = parse_json_request(request, allow_empty=True)
    fields = require_fields(
        payload,
        SIGNUP_FIELDS,
        "All fields are required",
        {"general": "Please fill in all required fields"},
    )

    user = get_auth_service().create_user(fields)

    return success_response(
        "User registered successfully. Please verify your email.",
        {"userId": user.id},
        HTTPStatus.CREATED,
    )


@auth_bp.route("/login", methods=["POST"])
def login():
    """Authenticate a verified user and return a bearer token."""

    payload = parse_json_request(request, allow_empty=True)
    fields = require_fields(
        payload,
        ("email", "password"),
        "Email and password are required",
        {"general": "Please provide both email and password"},
    )

    result = get_auth_service().login_user(fields["email"], fields["password"])

    response, status = success_response(
        "Login successful",
        {
            "user": result.user.to_dict(),
            "token": result.token,
            "expiresIn": result.expires_in,
            "tokenType": "Bearer",
        },
    )
    set_access_cookies(response, result.token, max_age=result.expires_in)
    return response, status


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """Clear the session cookie."""

    response, status = success_response("Logout successful")
    unset_jwt_cookies(response)
    return response, status


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    """Email a password reset link."""

    payload = parse_json_request(request, allow_empty=True)
    fields = require_fields(
        payload,
        ("email",),
        "Email is required",
        {"email": "Please provide an email address"},
    )

    get_auth_service().initiate_password_reset(fields["email"])

    return success_response("Password reset email sent successfully")


@auth_bp.route("/reset-password", methods=["POST"])
def reset_password():
    """Set a new password using a reset token."""

    payload = parse_json_request(request, allow_empty=True)
    fields = require_fields(
        payload,
        ("token", "newPassword", "confirm_password"),
        "All fields are required",
        {"general": "Please provide token, new password and confirmation"},
    )

    get_auth_service().reset_password(
        fields["token"], fields["newPassword"], fields["confirm_password"]
    )

    return success_response("Password reset successful")


@auth_bp.route("/verify-email", methods=["GET"])
@auth_bp.route("/verify-email/<token>", methods=["GET"])
def verify_email(token: str | None = None):
    """Consume an emailed verification link and redirect to the frontend.

    This handler never answers with JSON: success and every failure are
    reported through the login page's query string.
    """

    token = token or request.args.get("token")
    if not token:
        return login_redirect(_frontend_url(), error="Verification token is required")

    try:
        get_auth_service().verify_email(token)
    except AuthServiceError as error:
        return login_redirect(_frontend_url(), error=error.message)
    except Exception as error:
        current_app.logger.exception("Email verification failed", exc_info=error)
        message = public_message(
            error,
            bool(current_app.config.get("EXPOSE_ERROR_DETAILS")),
            fallback="Verification failed",
        )
        return login_redirect(_frontend_url(), error=message)

    return login_redirect(_frontend_url(), verified=True)


@auth_bp.route("/profile", methods=["GET"])
@auth_required
def get_profile(context: AuthContext):
    """Return the caller's profile."""

    user = _user_store().find_by_id(context.user_id)
    if user is None:
        raise NotFoundError("User not found")

    if not user.is_verified:
        raise AuthorizationError("Email not verified. Please verify your email.")

    return success_response("Profile fetched successfully", {"user": user.to_dict()})


@auth_bp.route("/profile", methods=["PUT"])
@auth_required
def update_profile(context: AuthContext):
    """Overwrite the provided profile fields and leave the rest unchanged."""

    payload = parse_json_request(request, allow_empty=True)
    updates = optional_text_fields(payload, PROFILE_FIELDS)

    store = _user_store()
    user = store.find_by_id(context.user_id)
    if user is None:
        raise NotFoundError("User not found")

    if updates:
        for key, value in updates.items():
            setattr(user, PROFILE_FIELDS[key], value)
        store.save(user)

    return success_response("Profile updated successfully", {"user": user.to_dict()})


@auth_bp.route("/resend-verification", methods=["POST"])
def resend_verification():
    """Send the verification email again to an unverified account."""

    payload = parse_json_request(request, allow_empty=True)
    fields = require_fields(payload, ("email",), "Email is required")

    service = get_auth_service()
    user = service.store.find_by_email(fields["email"])
    if user is None:
        raise NotFoundError("User not found")
    if user.is_verified:
        raise ValidationError("Email already verified")

    service.resend_verification(user)

    return success_response("Verification email resent")
