"""Error formatting, collection and timing helpers shared by the import pipeline.

Batch loops that must keep going after a failure wrap each item in
:meth:`ErrorCollector.catch`::

    collector = ErrorCollector("workbook parse")
    for sheet in sheets:
        with collector.catch(f"Sheet {sheet.title}"):
            parse(sheet)

Set ``COACHING_PERF_DEBUG=1`` to have :func:`timed` log call durations.
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, List, Mapping, Optional, TypeVar

logger = logging.getLogger(__name__)

PERF_DEBUG = os.environ.get("COACHING_PERF_DEBUG", "0") == "1"

F = TypeVar("F", bound=Callable[..., Any])


def timed(func: F) -> F:
    """Debug-log how long ``func`` ran, only when PERF_DEBUG is on."""
    qualified = f"{func.__module__}.{func.__name__}"

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not PERF_DEBUG:
            return func(*args, **kwargs)

        started = time.perf_counter()
        outcome = "failed after"
        try:
            value = func(*args, **kwargs)
            outcome = "took"
            return value
        finally:
            logger.debug(f"PERF: {qualified} {outcome} {time.perf_counter() - started:.3f}s")

    return wrapper  # type: ignore[return-value]


def format_error_message(
    error: Exception,
    context: Optional[str] = None,
    include_type: bool = False,
) -> str:
    """Render ``error`` as ``"<context>: <message>"`` for per-item error lists.

    An exception without a usable message is reported by its type name.
    """
    text = str(error)
    type_name = type(error).__name__
    if text in ("", "None"):
        text = type_name
    elif include_type:
        text = f"{type_name}: {text}"
    return f"{context}: {text}" if context else text


def log_exception(
    error: Exception,
    context: str,
    extra: Optional[Mapping[str, Any]] = None,
    level: int = logging.ERROR,
) -> None:
    """Log ``error`` with its traceback and an ``error`` event payload."""
    payload = {"event": "error", "error_type": type(error).__name__, **(extra or {})}
    logger.log(level, f"{context}: {error}", extra=payload, exc_info=True)


class ErrorCollector:
    """Accumulates per-item failures of a batch operation as messages."""

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.errors: List[str] = []

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @contextmanager
    def catch(self, context: str) -> Iterator["ErrorCollector"]:
        """Record an ``Exception`` raised in the block under ``context`` and suppress it."""
        try:
            yield self
        except Exception as e:
            self.errors.append(format_error_message(e, context))
            log_exception(e, f"{self.operation_name}: {context}", level=logging.WARNING)

    def get_summary(self) -> str:
        if self.errors:
            return f"{self.operation_name} completed with {len(self.errors)} error(s)"
        return f"{self.operation_name} completed successfully"
