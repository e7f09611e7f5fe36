"""
models/todo.py — Todo table definition.

No business logic. No imports from services or routes.

Key design points:
  - Every todo has exactly one owner (user_id NOT NULL, ON DELETE CASCADE).
  - Priority is a Python enum so schemas and services share one definition.
  - Index set matches the query patterns: list by owner, filter by done /
    priority within an owner.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db
from backend.app.models.user import new_id, utcnow


class Priority(str, enum.Enum):
    LOW    = "low"
    MEDIUM = "medium"
    HIGH   = "high"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Ensure SQLAlchemy stores enum values (e.g., 'low'), not names ('LOW')."""
    return [member.value for member in enum_cls]


class Todo(db.Model):
    __tablename__ = "todos"

    __table_args__ = (
        CheckConstraint(
            "LENGTH(description) BETWEEN 1 AND 255",
            name="ck_todos_description_length",
        ),
        Index("todos_priority_idx", "priority"),
        Index("todos_done_idx", "done"),
        Index("todos_user_done_idx", "user_id", "done"),
        Index("todos_user_priority_idx", "user_id", "priority"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    # ON DELETE CASCADE: todos are destroyed with their owner.
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    description: Mapped[str] = mapped_column(String(255), nullable=False)

    priority: Mapped[Priority] = mapped_column(
        Enum(
            Priority,
            name="priority",
            values_callable=_enum_values,
        ),
        nullable=False,
        default=Priority.LOW,
    )

    done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

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

    owner: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="todos",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Todo id={self.id} user_id={self.user_id} done={self.done}>"
