"""
Configuration management.

The ``Settings`` dataclass holds every value the service reads from the
environment.  ``load_settings`` parses and validates the environment in
one pass and raises ``ConfigurationError`` listing every missing or
invalid variable, so a misconfigured deployment fails before it serves
a single request.  Settings are loaded when the application is built
rather than at import time, which keeps modules importable (for tests
and tooling) without a database configured.
"""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple
from urllib.parse import quote_plus

from .errors import ConfigurationError


# Accepted log level names.  The short aliases mirror the level names
# used by common JavaScript loggers so existing ``.env`` files keep
# working.
LOG_LEVEL_ALIASES = {
    "DEBUG": "DEBUG",
    "TRACE": "DEBUG",
    "INFO": "INFO",
    "WARNING": "WARNING",
    "WARN": "WARNING",
    "ERROR": "ERROR",
    "CRITICAL": "CRITICAL",
    "FATAL": "CRITICAL",
}

REQUIRED_MONGO_VARIABLES = (
    "MONGODB_HOST",
    "MONGODB_USERNAME",
    "MONGODB_PASSWORD",
    "MONGODB_DATABASE",
)


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    mongodb_host: str
    mongodb_username: str
    mongodb_password: str
    mongodb_database: str
    mongodb_port: int = 27017
    mongodb_auth_source: str = "admin"

    project_name: str = "Progress Tracking API"
    api_version: str = "1.0.0"
    port: int = 3001
    environment: str = "development"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Comma-separated list of allowed CORS origins.  ``*`` allows any
    # origin, which is convenient for local frontends.
    cors_origins: str = "*"

    # Name of the MongoDB collection holding task documents.
    tasks_collection: str = "tasks"

    @property
    def mongo_uri(self) -> str:
        """Connection string for the configured MongoDB deployment."""
        return (
            f"mongodb://{quote_plus(self.mongodb_username)}:{quote_plus(self.mongodb_password)}"
            f"@{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"
            f"?authSource={quote_plus(self.mongodb_auth_source)}"
        )

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def _parse_port(environ: Mapping[str, str], name: str, default: int) -> Tuple[int, Optional[str]]:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default, None
    try:
        value = int(raw)
    except ValueError:
        return default, f"{name}: expected an integer, got {raw!r}"
    if not 1 <= value <= 65535:
        return default, f"{name}: must be between 1 and 65535, got {value}"
    return value, None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read and validate settings from the environment.

    Parameters
    ----------
    environ : Optional[Mapping[str, str]]
        Mapping to read variables from.  Defaults to ``os.environ``.

    Returns
    -------
    Settings
        Fully validated settings.

    Raises
    ------
    ConfigurationError
        If any required variable is missing or empty, or any variable
        has an invalid value.  All problems are reported together.
    """
    env = os.environ if environ is None else environ
    errors: List[str] = []

    required = {}
    for name in REQUIRED_MONGO_VARIABLES:
        value = env.get(name, "")
        if not value.strip():
            errors.append(f"{name}: {name} is required")
        required[name] = value

    port, error = _parse_port(env, "PORT", 3001)
    if error:
        errors.append(error)
    mongodb_port, error = _parse_port(env, "MONGODB_PORT", 27017)
    if error:
        errors.append(error)

    raw_level = env.get("LOG_LEVEL", "INFO")
    log_level = LOG_LEVEL_ALIASES.get(raw_level.strip().upper())
    if log_level is None:
        errors.append(
            f"LOG_LEVEL: expected one of {', '.join(sorted(set(LOG_LEVEL_ALIASES.values())))}, got {raw_level!r}"
        )
        log_level = "INFO"

    if errors:
        raise ConfigurationError(errors)

    return Settings(
        mongodb_host=required["MONGODB_HOST"],
        mongodb_username=required["MONGODB_USERNAME"],
        mongodb_password=required["MONGODB_PASSWORD"],
        mongodb_database=required["MONGODB_DATABASE"],
        mongodb_port=mongodb_port,
        mongodb_auth_source=env.get("MONGODB_AUTH_SOURCE") or "admin",
        project_name=env.get("PROJECT_NAME") or "Progress Tracking API",
        api_version=env.get("API_VERSION") or "1.0.0",
        port=port,
        environment=env.get("ENVIRONMENT") or "development",
        log_level=log_level,
        log_file=env.get("LOG_FILE") or None,
        cors_origins=env.get("CORS_ORIGINS") or "*",
        tasks_collection=env.get("MONGODB_TASKS_COLLECTION") or "tasks",
    )
