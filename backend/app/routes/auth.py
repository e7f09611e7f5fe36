"""
routes/auth.py — Registration, login and logout.

Layer rules:
  - Parse request body
  - Validate with the appropriate schema (raises ValidationError on bad input)
  - Call the service, commit the DB session
  - Mint the session + CSRF pair and write both cookies
  - Return the public user (never password_hash / salt)

AppError propagates to the global error handler in app/__init__.py; routes
never catch it. On any failure no cookie is written.

Endpoints:
  POST   /register  → 200  public user, sets session + CSRF cookies
  POST   /login     → 200  public user, sets session + CSRF cookies
  POST   /logout    → 200  clears both cookies (idempotent, no auth)
"""

from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify, request

from backend.app.extensions import db
from backend.app.schemas.auth_schema import LoginSchema, RegisterSchema
from backend.app.services import auth_service, session_service, user_service

auth_bp = Blueprint("auth", __name__)


def _cookie_options(http_only: bool) -> dict:
    cfg = current_app.config
    return {
        "path": "/",
        "samesite": "Lax",
        "secure": bool(cfg.get("COOKIE_SECURE", True)),
        "httponly": http_only,
    }


def _set_session_cookies(response: Response, user_id: str) -> None:
    """Mints a fresh session token and CSRF token and writes both cookies."""
    cfg = current_app.config
    ttl = cfg["SESSION_TTL_SECONDS"]
    issued = session_service.issue_session(
        user_id,
        secret=cfg["JWT_SECRET_KEY"],
        ttl_seconds=ttl,
        algorithm=cfg.get("JWT_ALGORITHM", "HS256"),
    )
    response.set_cookie(
        cfg["AUTH_COOKIE_NAME"],
        issued.session_token,
        max_age=ttl,
        **_cookie_options(http_only=True),
    )
    # Readable by client script: the frontend echoes it in the CSRF header.
    response.set_cookie(
        cfg["CSRF_COOKIE_NAME"],
        issued.csrf_token,
        max_age=ttl,
        **_cookie_options(http_only=False),
    )


def _clear_session_cookies(response: Response) -> None:
    cfg = current_app.config
    response.delete_cookie(cfg["AUTH_COOKIE_NAME"], **_cookie_options(http_only=True))
    response.delete_cookie(cfg["CSRF_COOKIE_NAME"], **_cookie_options(http_only=False))


@auth_bp.route("/register", methods=["POST"])
def register():
    """POST /register — Create account and start a session."""
    data = RegisterSchema().load(request.get_json(force=True) or {})
    user = auth_service.register_user(
        username=data["username"],
        email=data["email"],
        password=data["password"],
        session=db.session,
        bcrypt_rounds=current_app.config.get("BCRYPT_LOG_ROUNDS", 10),
    )
    db.session.commit()

    response = jsonify(user_service.public_user(user))
    _set_session_cookies(response, user.id)
    return response, 200


@auth_bp.route("/login", methods=["POST"])
def login():
    """POST /login — Verify credentials and start a session."""
    data = LoginSchema().load(request.get_json(force=True) or {})
    user = auth_service.authenticate(
        email=data["email"],
        password=data["password"],
        session=db.session,
    )

    response = jsonify(user_service.public_user(user))
    _set_session_cookies(response, user.id)
    return response, 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """POST /logout — Clear both cookies. Safe to call without a session."""
    response = jsonify({"message": "Logged out successfully."})
    _clear_session_cookies(response)
    return response, 200
