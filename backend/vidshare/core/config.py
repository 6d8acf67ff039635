"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env in development (no-op when missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_seconds(name: str, default: timedelta) -> timedelta:
    """Read a duration expressed in seconds, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return timedelta(seconds=int(val))


def engine_options(database_uri: str) -> dict[str, Any]:
    """Return pool options for pooled engines.

    SQLite engines use a static/singleton pool that rejects queue-pool
    arguments, so they get no extra options.
    """
    if database_uri.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": int(os.getenv("DB_POOL_SIZE", "10")),
        "max_overflow": int(os.getenv("DB_POOL_MAX_OVERFLOW", "5")),
        # Fail fast on exhaustion instead of queueing indefinitely
        "pool_timeout": float(os.getenv("DB_POOL_TIMEOUT", "2")),
    }


_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dev.db")


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder.
    JWT_SECRET_KEY: str
        Symmetric key used by ``flask-jwt-extended`` to sign every token.
        Read once at process start.
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Access token lifetime (one day by default).
    JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Refresh token lifetime (thirty days by default).
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method with a fixed work factor.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_ENGINE_OPTIONS: dict
        Pool settings; ``pool_timeout`` bounds how long a command waits for a
        connection before failing with ``ResourceUnavailableError``.
    VIDEO_STORAGE_DIR: str
        Directory backing the local blob store.
    VIDEO_ALLOWED_MIMETYPES: tuple[str, ...]
        Content types accepted by the upload endpoint.
    VIDEO_MAX_BYTES: int
        Upper bound for a single upload, checked before any transaction.
    EVENTS_ASYNC: bool
        Deliver post-commit events on a worker pool instead of inline.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"
    JWT_ACCESS_TOKEN_EXPIRES = env_seconds("JWT_ACCESS_TOKEN_EXPIRES", timedelta(days=1))
    JWT_REFRESH_TOKEN_EXPIRES = env_seconds("JWT_REFRESH_TOKEN_EXPIRES", timedelta(days=30))
    JWT_TOKEN_LOCATION = ["headers"]
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000")

    # DB
    SQLALCHEMY_DATABASE_URI = _DATABASE_URL
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(_DATABASE_URL)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Video storage
    VIDEO_STORAGE_DIR = os.getenv("VIDEO_STORAGE_DIR", os.path.abspath("video-storage"))
    VIDEO_ALLOWED_MIMETYPES = tuple(
        m.strip() for m in os.getenv("VIDEO_ALLOWED_MIMETYPES", "video/mp4").split(",") if m.strip()
    )
    VIDEO_MAX_BYTES = int(os.getenv("VIDEO_MAX_BYTES", str(5 * 1024 * 1024)))
    # Leave headroom for the multipart envelope around the file part
    MAX_CONTENT_LENGTH = VIDEO_MAX_BYTES + 64 * 1024

    # Post-commit events
    EVENTS_ASYNC = env_bool("EVENTS_ASYNC", True)
    EVENTS_WORKERS = int(os.getenv("EVENTS_WORKERS", "2"))

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Delivers events inline so assertions can observe them synchronously.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(SQLALCHEMY_DATABASE_URI)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    JWT_SECRET_KEY = "testing-secret-key-with-enough-length-for-hs256"
    # Cheap hashing keeps the suite fast; the work factor is still fixed
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    EVENTS_ASYNC = False
    PROPAGATE_EXCEPTIONS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
