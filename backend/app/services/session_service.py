"""
services/session_service.py — Stateless session tokens and CSRF tokens.

Responsibilities:
  - Minting the signed, time-limited session token (JWT, HS256)
  - Resolving the caller's user id from a session token
  - Minting and comparing CSRF double-submit tokens

Layer rules:
  - No Flask imports. Secrets, TTL and clock are passed in as arguments so
    every branch (including expiry) is unit-testable without an app.
  - Raises Unauthenticated (401) for every token failure. Callers never see
    a PyJWT exception.

Token design:
  - Claims: sub (user id, str), iat, exp. exp = iat + SESSION_TTL_SECONDS.
  - There is no server-side session table. A token stays valid until exp;
    logout only clears the cookies.
"""

from __future__ import annotations

import hmac
import secrets
import time
from dataclasses import dataclass

import jwt

from backend.app.errors import ErrorCode, Unauthenticated

CSRF_TOKEN_BYTES = 32  # 256 bits of entropy


@dataclass(frozen=True)
class IssuedSession:
    """Values the auth routes write into the session and CSRF cookies."""
    session_token: str
    csrf_token: str
    expires_at: int  # unix seconds, equal to the token's exp claim


def create_csrf_token() -> str:
    return secrets.token_hex(CSRF_TOKEN_BYTES)


def create_session_token(
        user_id: str,
        *,
        secret: str,
        ttl_seconds: int,
        algorithm: str = "HS256",
        now: int | None = None,
) -> tuple[str, int]:
    """Returns (token, exp) for user_id."""
    issued_at = int(time.time()) if now is None else now
    exp = issued_at + ttl_seconds
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": exp,
    }
    return jwt.encode(payload, secret, algorithm=algorithm), exp


def issue_session(
        user_id: str,
        *,
        secret: str,
        ttl_seconds: int,
        algorithm: str = "HS256",
        now: int | None = None,
) -> IssuedSession:
    """
    Mints a session token and a fresh CSRF token for user_id.

    A new CSRF token is generated on every call: login and register always
    rotate it.
    """
    token, exp = create_session_token(
        user_id,
        secret=secret,
        ttl_seconds=ttl_seconds,
        algorithm=algorithm,
        now=now,
    )
    return IssuedSession(
        session_token=token,
        csrf_token=create_csrf_token(),
        expires_at=exp,
    )


def resolve_user_id(
        token: str | None,
        *,
        secret: str,
        algorithm: str = "HS256",
        now: int | None = None,
) -> str:
    """
    Verifies a session token and returns the embedded user id.

    Raises:
      Unauthenticated(TOKEN_MISSING) — no token
      Unauthenticated(TOKEN_INVALID) — bad signature, malformed, no sub claim
      Unauthenticated(TOKEN_EXPIRED) — signature valid but exp is in the past
    """
    if not token:
        raise Unauthenticated(ErrorCode.TOKEN_MISSING)

    try:
        # Expiry is checked below against our own clock so `now` can be injected.
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"verify_exp": False},
        )
    except jwt.InvalidTokenError:
        raise Unauthenticated(ErrorCode.TOKEN_INVALID)

    current = int(time.time()) if now is None else now
    exp = payload.get("exp")
    if exp is not None:
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise Unauthenticated(ErrorCode.TOKEN_INVALID)
        if exp < current:
            raise Unauthenticated(ErrorCode.TOKEN_EXPIRED)

    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub:
        raise Unauthenticated(ErrorCode.TOKEN_INVALID)

    return sub


def csrf_tokens_match(cookie_value: str | None, header_value: str | None) -> bool:
    """
    Double-submit check: both values present and equal.

    Compared as UTF-8 bytes with hmac.compare_digest, which is constant-time
    for equal lengths and accepts non-ASCII input.
    """
    if not cookie_value or not header_value:
        return False
    return hmac.compare_digest(
        cookie_value.encode("utf-8"),
        header_value.encode("utf-8"),
    )
