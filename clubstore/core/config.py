"""
Configuration helpers for clubstore.

Settings are read once from environment variables so that repositories and
services never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    backend: str
    data_file: str
    database_url: str
    seed_on_start: bool
    optimistic_writes: bool
    admin_username: str
    admin_password: str
    admin_email: str
    max_team_size: int
    recent_announcements: int
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
        backend=(os.getenv("CLUBSTORE_BACKEND") or "json").strip().lower(),
        data_file=os.getenv("CLUBSTORE_DATA_FILE", "clubstore.json"),
        database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///clubstore.db"),
        seed_on_start=_bool(os.getenv("CLUBSTORE_SEED_ON_START"), True),
        optimistic_writes=_bool(os.getenv("CLUBSTORE_OPTIMISTIC_WRITES"), False),
        admin_username=os.getenv("CLUBSTORE_ADMIN_USERNAME", "admin"),
        admin_password=os.getenv("CLUBSTORE_ADMIN_PASSWORD", "admin123"),
        admin_email=os.getenv("CLUBSTORE_ADMIN_EMAIL", "admin@clubstore.local"),
        max_team_size=max(1, _int(os.getenv("CLUBSTORE_MAX_TEAM_SIZE", "16"), 16)),
        recent_announcements=max(0, _int(os.getenv("CLUBSTORE_RECENT_ANNOUNCEMENTS", "3"), 3)),
        log_level=(os.getenv("CLUBSTORE_LOG_LEVEL") or "INFO").upper(),
    )
