"""Lightweight application configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass

from fieldauth.patching.authorization import DEFAULT_ADMIN_PRIVILEGE


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no"}


@dataclass(frozen=True)
class AppSettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///fieldauth.db"
    efa_enabled: bool = True
    admin_privilege: str = DEFAULT_ADMIN_PRIVILEGE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> AppSettings:
        return cls(
            environment=os.getenv("FIELDAUTH_ENV", cls.environment),
            database_url=os.getenv("FIELDAUTH_DATABASE_URL", cls.database_url),
            efa_enabled=_env_bool("FIELDAUTH_EFA_ENABLED", True),
            admin_privilege=os.getenv("FIELDAUTH_ADMIN_PRIVILEGE", cls.admin_privilege),
            log_level=os.getenv("FIELDAUTH_LOG_LEVEL", cls.log_level).upper(),
        )


__all__ = ["AppSettings"]
