"""
Unit tests for session_service: token minting, verification and CSRF compare.

No Flask app and no database. The clock is injected through `now`.
"""

from __future__ import annotations

import jwt
import pytest

from backend.app.errors import AppError, ErrorCode
from backend.app.services import session_service

SECRET = "unit-test-secret"
NOW = 1_800_000_000


def _resolve(token, now=NOW):
    return session_service.resolve_user_id(token, secret=SECRET, now=now)


def test_create_session_token_sets_sub_iat_exp():
    token, exp = session_service.create_session_token(
        "user-1", secret=SECRET, ttl_seconds=3600, now=NOW,
    )

    payload = jwt.decode(token, SECRET, algorithms=["HS256"], options={"verify_exp": False})
    assert payload == {"sub": "user-1", "iat": NOW, "exp": NOW + 3600}
    assert exp == NOW + 3600


def test_issue_session_returns_token_and_fresh_csrf():
    first = session_service.issue_session("user-1", secret=SECRET, ttl_seconds=60, now=NOW)
    second = session_service.issue_session("user-1", secret=SECRET, ttl_seconds=60, now=NOW)

    assert first.expires_at == NOW + 60
    assert _resolve(first.session_token) == "user-1"
    assert first.csrf_token != second.csrf_token


def test_csrf_token_is_64_hex_chars():
    token = session_service.create_csrf_token()
    assert len(token) == 64
    assert set(token) <= set("0123456789abcdef")


def test_resolve_round_trips_user_id():
    token, _ = session_service.create_session_token(
        "abc", secret=SECRET, ttl_seconds=10, now=NOW,
    )
    assert _resolve(token, now=NOW + 5) == "abc"


def test_token_is_still_valid_at_exact_expiry_second():
    token, exp = session_service.create_session_token(
        "abc", secret=SECRET, ttl_seconds=10, now=NOW,
    )
    assert _resolve(token, now=exp) == "abc"


def test_expired_token_raises_token_expired():
    token, exp = session_service.create_session_token(
        "abc", secret=SECRET, ttl_seconds=10, now=NOW,
    )

    with pytest.raises(AppError) as exc_info:
        _resolve(token, now=exp + 1)

    assert exc_info.value.code == ErrorCode.TOKEN_EXPIRED
    assert exc_info.value.http_status == 401


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token_raises_token_missing(token):
    with pytest.raises(AppError) as exc_info:
        _resolve(token)
    assert exc_info.value.code == ErrorCode.TOKEN_MISSING
    assert exc_info.value.http_status == 401


def test_wrong_secret_raises_token_invalid():
    token, _ = session_service.create_session_token(
        "abc", secret="other-secret", ttl_seconds=10, now=NOW,
    )
    with pytest.raises(AppError) as exc_info:
        _resolve(token)
    assert exc_info.value.code == ErrorCode.TOKEN_INVALID


def test_malformed_token_raises_token_invalid():
    with pytest.raises(AppError) as exc_info:
        _resolve("not-a-jwt")
    assert exc_info.value.code == ErrorCode.TOKEN_INVALID


def test_token_without_sub_raises_token_invalid():
    token = jwt.encode({"iat": NOW, "exp": NOW + 60}, SECRET, algorithm="HS256")
    with pytest.raises(AppError) as exc_info:
        _resolve(token)
    assert exc_info.value.code == ErrorCode.TOKEN_INVALID


def test_tampered_payload_raises_token_invalid():
    token, _ = session_service.create_session_token(
        "abc", secret=SECRET, ttl_seconds=10, now=NOW,
    )
    header, payload, signature = token.split(".")
    forged = jwt.encode(
        {"sub": "someone-else", "iat": NOW, "exp": NOW + 10}, "another-secret", algorithm="HS256",
    )
    tampered = ".".join([header, forged.split(".")[1], signature])

    with pytest.raises(AppError) as exc_info:
        _resolve(tampered)
    assert exc_info.value.code == ErrorCode.TOKEN_INVALID


@pytest.mark.parametrize("cookie, header, expected", [
    ("abc", "abc", True),
    ("abc", "abd", False),
    ("abc", "abcd", False),
    (None, "abc", False),
    ("abc", None, False),
    ("", "", False),
    ("été", "été", True),
])
def test_csrf_tokens_match(cookie, header, expected):
    assert session_service.csrf_tokens_match(cookie, header) is expected
