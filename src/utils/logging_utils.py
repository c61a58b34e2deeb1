"""Structured logging setup for the coaching importer.

Records go to a JSON-lines file (one object per record, ``extra=`` fields
included) and to a plain console handler on stderr.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from utils.env import DEFAULT_DATA_DIR, get_log_level

LOG_DIR = DEFAULT_DATA_DIR / "logs"
DEFAULT_LOG_FILE = LOG_DIR / "coaching.log"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_CONFIGURED = False

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON for easier parsing."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _build_handlers(log_file: Path) -> List[logging.Handler]:
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(StructuredFormatter())

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return [file_handler, console_handler]


def setup_logging(level: Optional[int] = None, log_file: Optional[Path] = None) -> Path:
    """Replace the root handlers once and return the JSON log file path.

    ``level`` defaults to ``COACHING_LOG_LEVEL`` (DEBUG in dev mode).
    """
    global _CONFIGURED

    target = log_file or DEFAULT_LOG_FILE
    if _CONFIGURED:
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    root.setLevel(get_log_level() if level is None else level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in _build_handlers(target):
        root.addHandler(handler)

    _CONFIGURED = True
    return target


def get_log_file_path() -> Path:
    return DEFAULT_LOG_FILE
