"""
Unit tests for config.validate_config() and the config selector.

validate_config() only reads app.config and app.testing, so a bare
Flask app is enough. No database connection is opened.
"""

from __future__ import annotations

import pytest
from flask import Flask

from backend.config import (
    TestingConfig,
    active_config_name,
    config_by_name,
    migration_database_url,
    validate_config,
)


def _app(testing: bool = False, **overrides) -> Flask:
    app = Flask(__name__)
    app.config.from_object(TestingConfig)
    app.config.update(overrides)
    app.testing = testing
    return app


def test_testing_config_is_valid():
    validate_config(_app(testing=True))


def test_missing_database_url_raises():
    with pytest.raises(ValueError, match="DATABASE_URL"):
        validate_config(_app(SQLALCHEMY_DATABASE_URI=""))


@pytest.mark.parametrize("ttl", [0, -5, "abc", None, True])
def test_invalid_session_ttl_raises(ttl):
    with pytest.raises(ValueError, match="SESSION_TTL_SECONDS"):
        validate_config(_app(SESSION_TTL_SECONDS=ttl))


def test_missing_jwt_secret_raises():
    with pytest.raises(ValueError, match="JWT_SECRET"):
        validate_config(_app(JWT_SECRET_KEY=""))


def test_missing_cookie_secret_raises():
    with pytest.raises(ValueError, match="COOKIE_SECRET"):
        validate_config(_app(SECRET_KEY=""))


def test_placeholder_secret_rejected_outside_testing():
    with pytest.raises(ValueError, match="JWT_SECRET"):
        validate_config(_app(testing=False, JWT_SECRET_KEY="change-me-in-production"))


def test_placeholder_secret_tolerated_under_testing():
    validate_config(_app(testing=True, JWT_SECRET_KEY="change-me-in-production"))


def test_testing_config_uses_insecure_cookies_and_fast_bcrypt():
    assert TestingConfig.COOKIE_SECURE is False
    assert TestingConfig.BCRYPT_LOG_ROUNDS == 4
    assert config_by_name["production"].COOKIE_SECURE is True


def test_active_config_name_reads_app_env(monkeypatch):
    monkeypatch.delenv("FLASK_ENV", raising=False)
    monkeypatch.setenv("APP_ENV", "production")
    assert active_config_name() == "production"


def test_active_config_name_falls_back_to_development(monkeypatch):
    monkeypatch.delenv("FLASK_ENV", raising=False)
    monkeypatch.setenv("APP_ENV", "staging")
    assert active_config_name() == "development"


def test_migration_url_uses_testing_config_under_test_run(monkeypatch):
    monkeypatch.setenv("TEST_RUN", "1")
    monkeypatch.setattr(TestingConfig, "SQLALCHEMY_DATABASE_URI", "sqlite:///migrate.db")
    assert migration_database_url() == "sqlite:///migrate.db"


def test_migration_url_follows_app_env(monkeypatch):
    monkeypatch.delenv("TEST_RUN", raising=False)
    monkeypatch.delenv("FLASK_ENV", raising=False)
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setattr(
        config_by_name["production"], "SQLALCHEMY_DATABASE_URI", "postgresql://db/todo",
    )
    assert migration_database_url() == "postgresql://db/todo"


def test_migration_url_missing_raises(monkeypatch):
    monkeypatch.delenv("TEST_RUN", raising=False)
    monkeypatch.delenv("FLASK_ENV", raising=False)
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setattr(config_by_name["development"], "SQLALCHEMY_DATABASE_URI", "")
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        migration_database_url()
