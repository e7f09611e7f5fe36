"""
backend/migrations/env.py — Alembic environment.

The database URL comes from backend.config.migration_database_url(), so
.env loading and the postgres:// rewrite live with the app config:
  - APP_ENV / FLASK_ENV picks the config (see active_config_name())
  - TEST_RUN=1 forces the testing config (TEST_DATABASE_URL)

Run from the repository root:
    alembic -c backend/alembic.ini upgrade head
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from backend.app.extensions import db
from backend.app.models import todo, user  # noqa: F401
from backend.config import migration_database_url

target_metadata = db.metadata
db_url = migration_database_url()

config = context.config
config.set_main_option("sqlalchemy.url", db_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _configure_options(dialect_name: str) -> dict:
    # SQLite cannot ALTER most constraints in place; batch mode recreates the table.
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": dialect_name == "sqlite",
    }


def run_migrations_offline() -> None:
    context.configure(
        url=db_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(db_url.split(":", 1)[0].split("+", 1)[0]),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            **_configure_options(connection.dialect.name),
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
