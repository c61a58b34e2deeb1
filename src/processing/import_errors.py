"""Exceptions raised by the evaluation import pipeline."""

from __future__ import annotations

from .import_stats import ImportTotals


class WorkbookReadError(Exception):
    """The uploaded workbook could not be opened at all (fatal for the import)."""


class SheetParseError(ValueError):
    """A single worksheet could not be parsed; other sheets continue."""


class CoachAssignmentError(ValueError):
    """A coach assignment could not be created."""


class MissingCoachAssignmentError(ValueError):
    """An evaluation was requested for an engineer without an active coach."""


class DuplicateEvaluationError(ValueError):
    """An evaluation already exists for the engineer and month."""


class DuplicateCaseError(ValueError):
    """A case id already exists within the evaluation."""


class EngineerCommitError(Exception):
    """Commit of one engineer stopped part-way.

    ``totals`` holds the counts already written for that engineer, since
    earlier point writes stay committed.
    """

    def __init__(self, message: str, totals: ImportTotals):
        super().__init__(message)
        self.totals = totals


__all__ = [
    "WorkbookReadError",
    "SheetParseError",
    "CoachAssignmentError",
    "MissingCoachAssignmentError",
    "DuplicateEvaluationError",
    "DuplicateCaseError",
    "EngineerCommitError",
]
