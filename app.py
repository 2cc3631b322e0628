"""Application factory."""

from __future__ import annotations

import logging
import os
import uuid

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from routes.auth import auth_bp
from services import AbstractNotifier, init_services
from services.exceptions import AuthServiceError
from utils.errors import public_message
from utils.responses import error_response

migrate = Migrate()
jwt = JWTManager()


def create_app(
    config_class: type[Config] = Config,
    notifier: AbstractNotifier | None = None,
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    init_services(app, notifier)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/auth")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)

    return app


def _request_id() -> str:
    return g.get("request_id") or str(uuid.uuid4())


# Token failures are reported through the same envelope as other errors.
@jwt.unauthorized_loader
def _missing_token(reason: str):
    return error_response(reason, 401, request_id=_request_id())


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return error_response(reason, 401, request_id=_request_id())


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return error_response("Token has expired", 401, request_id=_request_id())


def _register_error_handlers(app: Flask) -> None:
    """Register envelope-shaped error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        response = error_response(
            error.description or getattr(error, "name", "Error"),
            error.code or 500,
            errors=getattr(error, "errors", None),
            request_id=_request_id(),
        )
        for header, value in error.get_headers():
            if header.lower() != "content-type":
                response.headers.setdefault(header, value)
        return response

    @app.errorhandler(AuthServiceError)
    def _handle_service_error(error: AuthServiceError):
        return _handle_http_exception(error.to_http())

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        app.logger.exception("Unhandled application error", exc_info=error)
        message = public_message(error, bool(app.config.get("EXPOSE_ERROR_DETAILS")))
        return error_response(message, 500, request_id=_request_id())


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
