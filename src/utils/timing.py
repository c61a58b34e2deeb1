"""Phase timing for import runs, reported through structured logging."""

from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, List, Optional


class PhaseTimer:
    """Records wall time per named phase, tagged with a shared context."""

    def __init__(self, base_context: Optional[Dict[str, Any]] = None) -> None:
        self._base_context = dict(base_context or {})
        self._entries: List[Dict[str, Any]] = []

    def as_list(self) -> List[Dict[str, Any]]:
        return list(self._entries)

    @property
    def total(self) -> float:
        return sum(entry["duration"] for entry in self._entries)

    @contextmanager
    def measure(self, phase: str, extra: Optional[Dict[str, Any]] = None) -> Iterator[None]:
        """Time the enclosed block; the entry is recorded even if it raises."""
        start = perf_counter()
        try:
            yield
        finally:
            entry: Dict[str, Any] = {"phase": phase, "duration": perf_counter() - start}
            entry.update(self._base_context)
            if extra:
                entry.update(extra)
            self._entries.append(entry)
