"""Application settings loaded from the environment."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

# Default data directory (repository root / data)
DATA_DIR = Path(__file__).parent.parent.parent / "data"

ENV_PREFIX = "GYMDESK_"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for gymdesk.

    Every field can be overridden with a ``GYMDESK_``-prefixed environment
    variable, e.g. ``GYMDESK_DATA_DIR=/var/lib/gymdesk``.
    """

    data_dir: Path = DATA_DIR
    db_filename: str = "gymdesk.db"
    log_level: str = "INFO"
    log_format: str = "console"  # console or json
    studio_weekly_limit: int = 250
    member_weekly_limit: int = 1
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_filename

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        data_dir = _env("DATA_DIR")
        log_format = (_env("LOG_FORMAT", "console") or "console").lower()
        if log_format not in ("console", "json"):
            raise ValueError(f"{ENV_PREFIX}LOG_FORMAT must be 'console' or 'json'")

        return cls(
            data_dir=Path(data_dir) if data_dir else DATA_DIR,
            db_filename=_env("DB_FILENAME", "gymdesk.db") or "gymdesk.db",
            log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
            log_format=log_format,
            studio_weekly_limit=_env_int("STUDIO_WEEKLY_LIMIT", 250),
            member_weekly_limit=_env_int("MEMBER_WEEKLY_LIMIT", 1),
            host=_env("HOST", "127.0.0.1") or "127.0.0.1",
            port=_env_int("PORT", 8000),
        )


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings (cached; call ``cache_clear`` to reload)."""
    return Settings.from_env()
