import os
from pathlib import Path

from dotenv import load_dotenv


_BACKEND_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _BACKEND_DIR.parent

# Root .env is canonical; backend/.env remains a fallback.
load_dotenv(_PROJECT_ROOT / ".env")
load_dotenv(_BACKEND_DIR / ".env")

_PLACEHOLDER_SECRET = "change-me-in-production"


def _first_non_empty_env(*names: str, default: str) -> str:
    """Returns the first non-empty env var value from `names`, else `default`."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value != "":
            return value
    return default


def _parse_int_env(*names: str, default: int) -> int:
    """Parses the first non-empty env var in `names` as int, else returns `default`."""
    raw = _first_non_empty_env(*names, default=str(default))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _session_ttl_seconds() -> int | str:
    """
    Resolves the session TTL in seconds from SESSION_TTL_SECONDS.

    Unparseable values are kept as the raw string so validate_config() can
    reject them loudly instead of silently falling back to the default.
    """
    raw = _first_non_empty_env("SESSION_TTL_SECONDS", default="86400")
    try:
        return int(raw)
    except ValueError:
        return raw


def _parse_origins(raw: str) -> list[str]:
    """Splits a comma separated origin list, dropping blanks."""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class BaseConfig:

    # Cookie-signing secret. Flask uses SECRET_KEY for everything it signs.
    SECRET_KEY: str = _first_non_empty_env(
        "COOKIE_SECRET",
        "SECRET_KEY",
        default=_PLACEHOLDER_SECRET,
    )

    # Session token signing secret.
    JWT_SECRET_KEY: str = _first_non_empty_env(
        "JWT_SECRET",
        "JWT_SECRET_KEY",
        default=_PLACEHOLDER_SECRET,
    )
    JWT_ALGORITHM: str = "HS256"

    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    JSON_SORT_KEYS: bool = False

    PORT: int = _parse_int_env("PORT", default=3000)
    CORS_ORIGINS: list[str] = _parse_origins(
        _first_non_empty_env("CORS_ORIGINS", default="http://localhost:5173")
    )
    LOG_LEVEL: str = _first_non_empty_env("LOG_LEVEL", default="INFO")

    SESSION_TTL_SECONDS: int | str = _session_ttl_seconds()  # default: 24h

    # Cookie and header names shared with the frontend client.
    AUTH_COOKIE_NAME: str = "jwt"
    CSRF_COOKIE_NAME: str = "csrfToken"
    CSRF_HEADER_NAME: str = "X-CSRF-Token"

    # Secure cookies everywhere except local development/testing.
    COOKIE_SECURE: bool = True

    BCRYPT_LOG_ROUNDS: int = 10

    SQLALCHEMY_DATABASE_URI: str = os.getenv("DATABASE_URL", "")


class DevelopmentConfig(BaseConfig):
    DEBUG:   bool = True
    TESTING: bool = False

    COOKIE_SECURE: bool = False
    SQLALCHEMY_ECHO: bool = _first_non_empty_env("SQLALCHEMY_ECHO", default="0") == "1"


class TestingConfig(BaseConfig):

    DEBUG:   bool = True
    TESTING: bool = True

    SECRET_KEY: str = "test-cookie-secret"
    JWT_SECRET_KEY: str = "test-jwt-secret"
    SESSION_TTL_SECONDS: int = 86400

    # In-memory SQLite unless a real database is provided.
    SQLALCHEMY_DATABASE_URI: str = os.getenv("TEST_DATABASE_URL", "sqlite://")
    SQLALCHEMY_ECHO: bool = False

    COOKIE_SECURE: bool = False
    BCRYPT_LOG_ROUNDS: int = 4


class ProductionConfig(BaseConfig):

    DEBUG:   bool = False
    TESTING: bool = False
    SQLALCHEMY_ECHO: bool = False

    # Heroku / Render return 'postgres://' which SQLAlchemy 1.4+ rejects;
    # normalise to 'postgresql://'.
    _raw_db_url: str = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_DATABASE_URI: str = (
        _raw_db_url.replace("postgres://", "postgresql://", 1)
        if _raw_db_url.startswith("postgres://")
        else _raw_db_url
    )


def validate_config(app) -> None:
    """
    Fail-fast guard for required configuration.

    Called in the app factory right after app.config.from_object(...).
    Raises ValueError if any required value is missing or invalid:
      - DATABASE_URL must be set
      - JWT_SECRET and COOKIE_SECRET must be set (the placeholder is only
        tolerated under the testing config)
      - SESSION_TTL_SECONDS must be a positive integer
    """
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise ValueError(
            "DATABASE_URL environment variable is required. "
            "Set it to a valid database connection string."
        )

    ttl = app.config.get("SESSION_TTL_SECONDS")
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
        raise ValueError(
            f"SESSION_TTL_SECONDS must be a positive integer, got {ttl!r}."
        )

    for key, env_name in (("JWT_SECRET_KEY", "JWT_SECRET"), ("SECRET_KEY", "COOKIE_SECRET")):
        value = app.config.get(key)
        if not value or (value == _PLACEHOLDER_SECRET and not app.testing):
            raise ValueError(
                f"{env_name} environment variable is required. "
                "Set it to a strong random value, not the default placeholder."
            )


# ── Config selector ────────────────────────────────────────────────────────
#
# Used by the app factory:
#   from backend.config import config_by_name
#   app.config.from_object(config_by_name[env_name])
# ──────────────────────────────────────────────────────────────────────────

config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing":     TestingConfig,
    "production":  ProductionConfig,
}


def active_config_name() -> str:
    """Resolves the config name from APP_ENV (or FLASK_ENV), defaulting to development."""
    name = _first_non_empty_env("APP_ENV", "FLASK_ENV", default="development")
    return name if name in config_by_name else "development"


def migration_database_url() -> str:
    """
    Database URL for Alembic, taken from the same config classes as the app.

    TEST_RUN=1 selects the testing config; otherwise APP_ENV / FLASK_ENV does.
    Raises RuntimeError when the selected config has no URL.
    """
    config_name = "testing" if os.getenv("TEST_RUN") else active_config_name()
    url = config_by_name[config_name].SQLALCHEMY_DATABASE_URI
    if not url:
        raise RuntimeError(
            f"No database URL for the {config_name!r} config. "
            "Set DATABASE_URL (or TEST_DATABASE_URL with TEST_RUN=1)."
        )
    return url
