"""
services/user_service.py — User profile reads, updates and deletion.

Authorization rules:
  - Reads are public (sensitive fields are never serialised).
  - Update/delete: the authenticated caller must BE the target user.
    A mismatch is FORBIDDEN (403), distinct from the middleware's 401.

Serialisation:
  public_user() is the only function that turns a User into a dict. It reads
  an explicit allow-list of columns, so password_hash and salt cannot leak
  through any code path that returns a user.

Layer rules:
  - No Flask imports. Pure Python with a SQLAlchemy session parameter.
  - Commits are the route's responsibility. Only flush here.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.errors import Conflict, ErrorCode, Forbidden, NotFound
from backend.app.models.user import User, isoformat_utc, utcnow

logger = logging.getLogger(__name__)


def public_user(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "createdAt": isoformat_utc(user.created_at),
        "updatedAt": isoformat_utc(user.updated_at),
    }


def _get_user_or_404(user_id: str, session: Session) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound(ErrorCode.USER_NOT_FOUND, "User not found.")
    return user


def _require_self(caller_id: str, target_id: str) -> None:
    if caller_id != target_id:
        raise Forbidden(ErrorCode.FORBIDDEN, "Permission denied.")


def list_users(session: Session) -> list[dict]:
    users = session.execute(
        select(User).order_by(User.created_at.asc())
    ).scalars().all()
    return [public_user(u) for u in users]


def get_user(user_id: str, session: Session) -> dict:
    return public_user(_get_user_or_404(user_id, session))


def update_user(
        user_id: str,
        caller_id: str,
        session: Session,
        username: str | None = None,
        email: str | None = None,
) -> dict:
    """
    Updates username and/or email. Omitted fields are left unchanged.

    Raises:
      Forbidden(FORBIDDEN, 403)      — caller is not the target user
      NotFound(USER_NOT_FOUND, 404)  — token names a user that no longer exists
      Conflict(DUPLICATE_EMAIL, 409) — email belongs to another account
    """
    _require_self(caller_id, user_id)
    user = _get_user_or_404(user_id, session)

    if username:
        user.username = username
    if email and email != user.email:
        user.email = email
    user.updated_at = utcnow()

    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        raise Conflict(
            ErrorCode.DUPLICATE_EMAIL,
            f"The email address '{email}' is already registered.",
        )

    return public_user(user)


def delete_user(user_id: str, caller_id: str, session: Session) -> None:
    """
    Deletes the caller's own account. Their todos are deleted with it.

    Raises:
      Forbidden(FORBIDDEN, 403)     — caller is not the target user
      NotFound(USER_NOT_FOUND, 404) — already deleted
    """
    _require_self(caller_id, user_id)
    user = _get_user_or_404(user_id, session)
    session.delete(user)
    session.flush()
    logger.info("Deleted user %s and their todos", user_id)
