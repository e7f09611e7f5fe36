"""
middleware/auth_middleware.py — Session cookie authentication and CSRF guard.

The @require_auth decorator:
  1. Reads the session cookie (AUTH_COOKIE_NAME, "jwt")
  2. Verifies signature and expiry via session_service.resolve_user_id()
  3. Builds a RequestContext for this request and passes it to the view as
     the `ctx` keyword argument
  4. Raises Unauthenticated (401) if any step fails

The @require_csrf decorator:
  1. Reads the CSRF cookie (CSRF_COOKIE_NAME) and header (CSRF_HEADER_NAME)
  2. Raises Forbidden(CSRF_FAILED, 403) if either is missing or they differ
  It does not look at the session at all.

Stacking order on mutating routes:

    @todos_bp.route("/", methods=["POST"])
    @require_auth        # runs first  → 401 without a session
    @require_csrf        # runs second → 403 without a matching CSRF pair
    def create_todo(ctx: RequestContext): ...

Strict responsibility boundary:
  - This module authenticates (401) and checks CSRF (403) ONLY.
  - Ownership ("is this your todo / your account") belongs to the services.
  - Services receive the user id as a plain str, with no knowledge of
    cookies or JWT.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Callable

from flask import current_app, request

from backend.app.errors import ErrorCode, Forbidden
from backend.app.services import session_service


@dataclass(frozen=True)
class RequestContext:
    """Per-request authentication result handed to view functions."""
    user_id: str


def require_auth(f: Callable) -> Callable:
    """
    Route decorator that enforces session-cookie authentication.

    Usage:
        @users_bp.route("/<string:user_id>", methods=["PUT"])
        @require_auth
        def update_user(user_id: str, ctx: RequestContext):
            ctx.user_id  # always the verified id from the token
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        kwargs["ctx"] = authenticate_request()
        return f(*args, **kwargs)

    return decorated


def require_csrf(f: Callable) -> Callable:
    """Route decorator that enforces the double-submit CSRF check."""
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        check_csrf()
        return f(*args, **kwargs)

    return decorated


def authenticate_request() -> RequestContext:
    """
    Resolves the caller from the session cookie.

    Separated from the decorator wrapper for testability; it can be called
    directly inside a test request context.
    """
    token = request.cookies.get(current_app.config["AUTH_COOKIE_NAME"])
    user_id = session_service.resolve_user_id(
        token,
        secret=current_app.config["JWT_SECRET_KEY"],
        algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"),
    )
    return RequestContext(user_id=user_id)


def check_csrf() -> None:
    cookie_value = request.cookies.get(current_app.config["CSRF_COOKIE_NAME"])
    header_value = request.headers.get(current_app.config["CSRF_HEADER_NAME"])
    if header_value is not None:
        header_value = header_value.strip()

    if not session_service.csrf_tokens_match(cookie_value, header_value):
        raise Forbidden(
            ErrorCode.CSRF_FAILED,
            "Missing or invalid CSRF token.",
        )
