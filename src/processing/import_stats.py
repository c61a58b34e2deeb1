"""Import totals threaded through the commit steps."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ImportTotals:
    """Immutable counters; every step returns a new value instead of mutating."""

    engineers: int = 0
    evaluations: int = 0
    cases: int = 0

    def add(self, engineers: int = 0, evaluations: int = 0, cases: int = 0) -> "ImportTotals":
        return replace(
            self,
            engineers=self.engineers + engineers,
            evaluations=self.evaluations + evaluations,
            cases=self.cases + cases,
        )

    def __add__(self, other: "ImportTotals") -> "ImportTotals":
        if not isinstance(other, ImportTotals):
            return NotImplemented
        return self.add(other.engineers, other.evaluations, other.cases)
