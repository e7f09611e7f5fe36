"""
models/user.py — User table definition.

No business logic. No imports from services or routes.

Identity:
  - `id` is an opaque string generated server-side (UUID4), never sequential.
  - `email` is UNIQUE at the DB level. The unique constraint is the
    authoritative guard against duplicate registrations; the service-level
    lookup is only a fast path.
  - `password_hash` and `salt` never leave the server. Serialisation lives in
    services/user_service.public_user(), which does not read them.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(value: datetime | None) -> str | None:
    """ISO 8601 with an explicit UTC offset; SQLite hands back naive datetimes."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class User(db.Model):
    __tablename__ = "users"

    __table_args__ = (
        Index("users_email_idx", "email"),
        Index("users_username_idx", "username"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    # Not unique: display name only.
    username: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    # bcrypt salt used to derive password_hash (also embedded in the hash).
    salt: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    # ── Relationships ──────────────────────────────────────────────────────
    # Deleting a user deletes their todos. The FK also cascades at the DB level.

    todos: Mapped[list["Todo"]] = relationship(  # noqa: F821
        "Todo",
        back_populates="owner",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} email={self.email!r}>"
