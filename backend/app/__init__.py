"""
app/__init__.py — Flask application factory.

Pattern: create_app(config_name) creates and returns a configured Flask app.
         Nothing is initialised at import time, which enables:
           - Multiple isolated test app instances
           - Clean separation between app creation and app startup
           - Alembic to import the models without starting the server

Responsibilities:
  1. Load configuration from config_by_name[config_name] and validate it
  2. Initialise extensions (SQLAlchemy) via init_app()
  3. Register all route blueprints
  4. Register global error handlers (AppError → JSON, Exception → 500)
  5. Add CORS headers for the configured frontend origins
"""

from __future__ import annotations

import logging
import traceback

from flask import Flask, jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from backend.config import config_by_name, validate_config


# ── Application factory ────────────────────────────────────────────────────

def create_app(config_name: str = "development", overrides: dict | None = None) -> Flask:
    """
    Creates and returns a configured Flask application instance.

    Args:
        config_name: One of "development", "testing", "production".
                     Resolved via config_by_name in config.py.
                     Defaults to "development".
        overrides:   Optional config values applied after the config class
                     (tests use this to shorten TTLs or swap secrets).

    Returns:
        A fully configured Flask app ready to serve requests.

    Raises:
        ValueError: required configuration is missing or invalid.
    """
    app = Flask(__name__)

    # ── Configuration ──────────────────────────────────────────────────────
    config_class = config_by_name.get(config_name, config_by_name["development"])
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    validate_config(app)  # raises ValueError if misconfigured

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger("backend").setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # ── Extensions ─────────────────────────────────────────────────────────
    # Import here (not at module top) to avoid circular imports.
    from backend.app.extensions import db
    db.init_app(app)

    # ── Model registration ─────────────────────────────────────────────────
    # Import all models so that SQLAlchemy's MetaData is populated.
    with app.app_context():
        from backend.app.models import todo, user  # noqa: F401

    _register_blueprints(app)
    _register_error_handlers(app)
    _register_cors(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """
    Registers all route blueprints at the root of the URL space, matching
    the paths the frontend client calls (/register, /todos, /users, ...).
    """
    from backend.app.routes.auth import auth_bp
    from backend.app.routes.health import health_bp
    from backend.app.routes.todos import todos_bp
    from backend.app.routes.users import users_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(todos_bp, url_prefix="/todos")
    app.register_blueprint(users_bp, url_prefix="/users")


def _register_error_handlers(app: Flask) -> None:
    """
    Registers global error handlers.

    Handlers:
      AppError        → {"error", "code"} with the error's HTTP status
      ValidationError → 400 VALIDATION_FAILED with marshmallow's per-field
                        messages under "details"
      HTTPException   → werkzeug's status (404 unknown route, 405, malformed
                        JSON body ...) in the same body shape
      Exception       → generic INTERNAL_ERROR (500); traceback logged

    Stack traces never leave the server.
    """
    from backend.app.errors import AppError, ErrorCode, ValidationFailed
    from backend.app.extensions import db

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        """
        Converts an AppError raised anywhere in the request lifecycle
        (middleware, service, route) into the standard error body.
        """
        db.session.rollback()
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        messages = error.messages
        details = messages if isinstance(messages, dict) else {"_schema": messages}
        failure = ValidationFailed("Validation failed.", details=details)
        return jsonify(failure.to_dict()), failure.http_status

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        if error.code == 404:
            code, message = ErrorCode.ROUTE_NOT_FOUND, "Route not found."
        elif error.code == 405:
            code, message = ErrorCode.METHOD_NOT_ALLOWED, "Method not allowed."
        elif error.code == 400:
            code, message = ErrorCode.BAD_REQUEST, "Malformed request body."
        else:
            code, message = ErrorCode.HTTP_ERROR, error.description or error.name
        return jsonify({"error": message, "code": code}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        """
        Catches all unhandled exceptions (including store failures) and
        returns a generic 500 response. The full traceback is logged.
        """
        db.session.rollback()
        app.logger.error(
            "Unhandled exception: %s\n%s",
            str(error),
            traceback.format_exc(),
        )
        return jsonify({
            "error": "Internal server error.",
            "code": ErrorCode.INTERNAL_ERROR,
        }), 500


def _register_cors(app: Flask) -> None:
    """
    Adds CORS headers for the browser frontend.

    The request origin is reflected only when it is listed in CORS_ORIGINS.
    Credentials are allowed since the session lives in cookies, so a "*"
    origin is never sent.
    """

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if not origin:
            return response

        if origin in app.config.get("CORS_ORIGINS", []):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = (
                f"Content-Type, Authorization, {app.config['CSRF_HEADER_NAME']}"
            )

        return response
