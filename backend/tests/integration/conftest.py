"""
tests/integration/conftest.py — Fixtures for all integration tests.

Design:
  - The app is created once per session using create_app("testing").
    TestingConfig points at in-memory SQLite unless TEST_DATABASE_URL names
    a real database (e.g. a disposable PostgreSQL).
  - All tables are created once via db.create_all() at session start.
  - Between tests, all rows are deleted in FK-safe order so tests are isolated.

Shared request helpers (register, login, csrf_headers, ...) live in
helpers.py as plain functions so they can be called with arbitrary arguments.
"""

from __future__ import annotations

import pytest
from sqlalchemy import text

from backend.app import create_app
from backend.app.extensions import db as _db


@pytest.fixture(scope="session")
def app():
    """Creates the Flask application in 'testing' mode once for the whole session."""
    flask_app = create_app("testing")

    with flask_app.app_context():
        _db.create_all()

    yield flask_app

    with flask_app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def clean_tables(app):
    """Deletes all rows after every test (todos before users)."""
    yield

    with app.app_context():
        _db.session.rollback()
        _db.session.execute(text("DELETE FROM todos"))
        _db.session.execute(text("DELETE FROM users"))
        _db.session.commit()


@pytest.fixture
def client(app):
    """Flask test client with its own cookie jar (function-scoped)."""
    return app.test_client()


@pytest.fixture
def other_client(app):
    """A second, independent browser, used for cross-user checks."""
    return app.test_client()
