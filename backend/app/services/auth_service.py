"""
services/auth_service.py — Registration, login and password hashing.

Responsibilities:
  - User registration (email uniqueness, password hashing)
  - Credential verification on login
  - Password hashing (bcrypt) and verification

Layer rules:
  - No imports from routes or schemas
  - No use of flask.request, flask.g, cookies or HTTP status codes
  - Session/CSRF token minting is NOT done here; the route calls
    session_service.issue_session() with the returned user id.

Password storage:
  - A bcrypt salt is generated per user (cost factor passed in by the route
    from config BCRYPT_LOG_ROUNDS) and stored next to the hash.
  - Raw password is never stored, never logged.

Registration race:
  - The email lookup below is a fast path only. Two concurrent registrations
    with the same email can both pass it; the UNIQUE constraint on
    users.email rejects the second insert and that IntegrityError is mapped
    to the same 409 DUPLICATE_EMAIL.
"""

from __future__ import annotations

import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.errors import AppError, Conflict, ErrorCode
from backend.app.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 10


# ── Password hashing ───────────────────────────────────────────────────────

def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> tuple[str, str]:
    """Returns (password_hash, salt), both as str."""
    salt = bcrypt.gensalt(rounds=rounds)
    password_hash = bcrypt.hashpw(password.encode("utf-8"), salt)
    return password_hash.decode("utf-8"), salt.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """bcrypt.checkpw; a malformed stored hash counts as a mismatch."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


# ── Lookups ────────────────────────────────────────────────────────────────

def find_user_by_email(email: str, session: Session) -> User | None:
    return session.execute(
        select(User).where(User.email == email)
    ).scalar_one_or_none()


def _duplicate_email(email: str) -> Conflict:
    return Conflict(
        ErrorCode.DUPLICATE_EMAIL,
        f"The email address '{email}' is already registered.",
    )


# ── Public service functions ───────────────────────────────────────────────

def register_user(
        username: str,
        email: str,
        password: str,
        session: Session,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> User:
    """
    Creates a new user account.

    Raises:
      Conflict(DUPLICATE_EMAIL, 409) — email already registered, either
      caught by the lookup or by the unique constraint on insert.

    Returns: the flushed User (id populated). Commit is the route's job.
    """
    if find_user_by_email(email, session) is not None:
        raise _duplicate_email(email)

    password_hash, salt = hash_password(password, rounds=bcrypt_rounds)
    user = User(
        username=username,
        email=email,
        password_hash=password_hash,
        salt=salt,
    )
    session.add(user)
    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        logger.info("Concurrent registration for an existing email rejected")
        raise _duplicate_email(email)

    logger.info("Registered user %s", user.id)
    return user


def authenticate(email: str, password: str, session: Session) -> User:
    """
    Validates credentials.

    Raises:
      AppError(INVALID_CREDENTIALS, 400) — email not found or password wrong.
      Uses the same error for both to avoid account enumeration.
    """
    user = find_user_by_email(email, session)

    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        raise AppError(
            ErrorCode.INVALID_CREDENTIALS,
            "Invalid credentials.",
            400,
        )

    return user
