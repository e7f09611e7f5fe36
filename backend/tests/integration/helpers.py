"""
tests/integration/helpers.py — Request helpers shared by integration tests.

The Flask test client keeps a cookie jar, so after register()/login() the
session cookie ("jwt") and CSRF cookie ("csrfToken") ride along on every
later request made with the same client. Mutating routes additionally need
the CSRF header, built by csrf_headers(client).
"""

from __future__ import annotations

AUTH_COOKIE = "jwt"
CSRF_COOKIE = "csrfToken"
CSRF_HEADER = "X-CSRF-Token"

TEST_JWT_SECRET = "test-jwt-secret"
DEFAULT_PASSWORD = "Secret1!"


def register(
    client,
    username: str = "alice",
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
) -> dict:
    """Registers a user and returns the public user dict."""
    if email is None:
        email = f"{username}@example.com"
    resp = client.post(
        "/register",
        json={"username": username, "email": email, "password": password},
    )
    assert resp.status_code == 200, f"register failed: {resp.get_json()}"
    return resp.get_json()


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    resp = client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200, f"login failed: {resp.get_json()}"
    return resp.get_json()


def cookie_value(client, name: str) -> str | None:
    cookie = client.get_cookie(name)
    return cookie.value if cookie is not None else None


def csrf_headers(client) -> dict:
    """Echoes the client's CSRF cookie in the CSRF header (what the SPA does)."""
    return {CSRF_HEADER: cookie_value(client, CSRF_COOKIE)}


def set_cookie_headers(resp, name: str) -> list[str]:
    """Raw Set-Cookie header lines for cookie `name`."""
    return [h for h in resp.headers.getlist("Set-Cookie") if h.startswith(f"{name}=")]


def make_todo(client, description: str = "Buy milk", **fields) -> dict:
    resp = client.post(
        "/todos",
        json={"description": description, **fields},
        headers=csrf_headers(client),
    )
    assert resp.status_code == 200, f"make_todo failed: {resp.get_json()}"
    return resp.get_json()
