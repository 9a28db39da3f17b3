"""
Configuration helpers for the trailsocial backend.

Everything the services need from the environment (database URL, listing
defaults, avatar placeholder, log level) is read here once so that
repositories/services never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_AVATAR_URL = (
    "https://www.kindpng.com/picc/m/24-248253_user-profile-default-image-png-clipart-png-download.png"
)


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    sql_echo: bool
    default_avatar_url: str
    users_page_limit: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=(os.getenv("DATABASE_URL") or "").strip(),
        sql_echo=_bool(os.getenv("SQL_ECHO"), False),
        default_avatar_url=os.getenv("DEFAULT_AVATAR_URL") or DEFAULT_AVATAR_URL,
        users_page_limit=_int(os.getenv("USERS_PAGE_LIMIT", "10"), 10),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
