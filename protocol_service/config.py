"""Process configuration.

Settings are resolved once at startup and handed explicitly to the database,
migration and HTTP layers. Nothing below the entry points reads the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


_POSTGRES_VARS = (
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_DB",
)


def _normalize_bool(value: str | None, default: bool = True) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


def _database_url(environ: Mapping[str, str]) -> str:
    # If DATABASE_URL is explicitly set, use it
    if environ.get("DATABASE_URL"):
        return environ["DATABASE_URL"]

    # Otherwise, generate from individual components (all must be set)
    missing = [name for name in _POSTGRES_VARS if not environ.get(name)]
    if missing:
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return (
        f"postgresql://{environ['POSTGRES_USER']}:{environ['POSTGRES_PASSWORD']}"
        f"@{environ['POSTGRES_HOST']}:{environ['POSTGRES_PORT']}/{environ['POSTGRES_DB']}"
    )


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    auto_migrate: bool = True
    echo_sql: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables (``os.environ`` by default)."""
        env = os.environ if environ is None else environ
        return cls(
            database_url=_database_url(env),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            auto_migrate=_normalize_bool(env.get("AUTO_MIGRATE"), default=True),
            echo_sql=_normalize_bool(env.get("SQL_ECHO"), default=False),
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
