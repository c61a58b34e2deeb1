"""Environment helpers for runtime configuration."""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_DATA_DIR = PROJECT_ROOT / "data"


@lru_cache
def is_dev_mode() -> bool:
    """Return True when the app runs in development mode."""
    value = os.environ.get("COACHING_ENV") or os.environ.get("COACHING_DEV_MODE")
    if not value:
        return False
    normalized = value.strip().lower()
    return normalized in {"dev", "development", "1", "true", "yes"}


def get_database_path() -> Path:
    """Return the SQLite database path (``COACHING_DB_PATH`` overrides)."""
    value = os.environ.get("COACHING_DB_PATH", "").strip()
    if value:
        return Path(value).expanduser()
    return DEFAULT_DATA_DIR / "coaching.db"


def get_log_level(default: int = logging.INFO) -> int:
    """Return the configured log level, falling back to ``default``."""
    value: Optional[str] = os.environ.get("COACHING_LOG_LEVEL")
    if not value:
        return logging.DEBUG if is_dev_mode() else default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


__all__ = ["is_dev_mode", "get_database_path", "get_log_level"]
