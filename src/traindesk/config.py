"""Runtime configuration for TrainDesk, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_DATABASE_URL = "sqlite:///traindesk.db"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)
DEFAULT_STORE_RETRIES = 2
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


class ConfigError(Exception):
    """Raised when an environment value is missing or invalid."""


def _read_int(env: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def _read_origins(env: Mapping[str, str]) -> tuple[str, ...]:
    raw = env.get("TRAINDESK_CORS_ORIGINS")
    if raw is None:
        return DEFAULT_CORS_ORIGINS
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or DEFAULT_CORS_ORIGINS


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        database_url: SQLAlchemy URL of the registration store.
        cors_origins: Frontend origins allowed to call the API.
        store_retries: Extra attempts after a lost store connection.
        host: Bind address for the HTTP server.
        port: Bind port for the HTTP server.
    """

    database_url: str = DEFAULT_DATABASE_URL
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    store_retries: int = DEFAULT_STORE_RETRIES
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from TRAINDESK_* environment variables.

        Args:
            env: Mapping to read from. Defaults to os.environ.

        Returns:
            Populated Settings.

        Raises:
            ConfigError: If a numeric value cannot be parsed.
        """
        if env is None:
            env = os.environ
        return cls(
            database_url=env.get("TRAINDESK_DATABASE_URL") or DEFAULT_DATABASE_URL,
            cors_origins=_read_origins(env),
            store_retries=_read_int(env, "TRAINDESK_STORE_RETRIES", DEFAULT_STORE_RETRIES),
            host=env.get("TRAINDESK_HOST") or DEFAULT_HOST,
            port=_read_int(env, "TRAINDESK_PORT", DEFAULT_PORT, minimum=1),
        )
