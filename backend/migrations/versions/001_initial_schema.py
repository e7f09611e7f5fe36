"""Initial schema — users, todos, priority enum, constraints and indexes.

Revision: 001_initial_schema
Created:  2026-10-18

Append-only:
  This file must NEVER be edited after it has been applied to any database.
  If a schema change is required, create a NEW migration file.

Creation order:
  1. PostgreSQL enum type `priority`
  2. users, then todos (FK dependency order)
  3. Indexes

ON DELETE policy:
  todos.user_id → CASCADE (todos are owned by their user)
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# ── Alembic revision identifiers ──────────────────────────────────────────
revision: str = "001_initial_schema"
down_revision: str | None = None      # first migration, no parent
branch_labels: tuple | None = None
depends_on: tuple | None = None


def upgrade() -> None:
    """Apply the full initial schema."""

    # ── Step 1: enum type ─────────────────────────────────────────────────
    op.execute("CREATE TYPE priority AS ENUM ('low', 'medium', 'high')")

    # ── Step 2: users ──────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("salt", sa.String(64), nullable=False, server_default=""),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # ── Step 3: todos ──────────────────────────────────────────────────────
    op.create_table(
        "todos",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_todos_user"),
            nullable=False,
        ),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column(
            "priority",
            postgresql.ENUM("low", "medium", "high", name="priority", create_type=False),
            nullable=False,
            server_default="low",
        ),
        sa.Column("done", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_todos"),
        sa.CheckConstraint(
            "LENGTH(description) BETWEEN 1 AND 255",
            name="ck_todos_description_length",
        ),
    )

    # ── Step 4: indexes ────────────────────────────────────────────────────
    op.create_index("users_email_idx", "users", ["email"])
    op.create_index("users_username_idx", "users", ["username"])
    op.create_index("ix_todos_user_id", "todos", ["user_id"])
    op.create_index("todos_priority_idx", "todos", ["priority"])
    op.create_index("todos_done_idx", "todos", ["done"])
    op.create_index("todos_user_done_idx", "todos", ["user_id", "done"])
    op.create_index("todos_user_priority_idx", "todos", ["user_id", "priority"])


def downgrade() -> None:
    """Drop all objects created in upgrade(), in reverse dependency order."""

    op.drop_index("todos_user_priority_idx", table_name="todos")
    op.drop_index("todos_user_done_idx",     table_name="todos")
    op.drop_index("todos_done_idx",          table_name="todos")
    op.drop_index("todos_priority_idx",      table_name="todos")
    op.drop_index("ix_todos_user_id",        table_name="todos")
    op.drop_index("users_username_idx",      table_name="users")
    op.drop_index("users_email_idx",         table_name="users")

    op.drop_table("todos")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS priority")
