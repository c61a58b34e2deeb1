"""Structured logging helpers for the evaluation import pipeline."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional


def log_preview_start(*, logger: logging.Logger, file_name: str, user_name: str, import_role: str) -> None:
    logger.info(
        "Import preview started",
        extra={
            "event": "import.preview.start",
            "file": file_name,
            "user": user_name,
            "import_role": import_role,
        },
    )


def log_preview_complete(
    *,
    logger: logging.Logger,
    file_name: str,
    engineers: int,
    total_cases: int,
    conflicts: int,
    missing_coaches: int,
    errors: int,
    blocked: bool,
) -> None:
    logger.info(
        "Import preview finished",
        extra={
            "event": "import.preview.complete",
            "file": file_name,
            "engineers": engineers,
            "total_cases": total_cases,
            "conflicts": conflicts,
            "missing_coaches": missing_coaches,
            "errors": errors,
            "blocked": blocked,
        },
    )


def log_commit_start(
    *,
    logger: logging.Logger,
    file_name: str,
    user_name: str,
    import_role: str,
    year: int,
    engineers: int,
) -> None:
    logger.info(
        "Import commit started",
        extra={
            "event": "import.commit.start",
            "file": file_name,
            "user": user_name,
            "import_role": import_role,
            "year": year,
            "engineers": engineers,
        },
    )


def log_engineer_failure(
    *,
    logger: logging.Logger,
    engineer_name: str,
    error: Exception,
    file_name: Optional[str] = None,
) -> None:
    logger.exception(
        f"Import failed for engineer {engineer_name}",
        extra={
            "event": "import.engineer.failure",
            "engineer": engineer_name,
            "file": file_name,
            "error": str(error),
        },
    )


def log_commit_complete(
    *,
    logger: logging.Logger,
    file_name: str,
    stats: Mapping[str, object],
) -> None:
    errors = stats.get("errors")
    skipped = stats.get("skipped_engineers")
    logger.info(
        "Import commit finished",
        extra={
            "event": "import.commit.complete",
            "file": file_name,
            "records": {k: stats.get(k) for k in ("imported_engineers", "imported_evaluations", "imported_cases")},
            "skipped": len(skipped) if isinstance(skipped, list) else 0,
            "errors": len(errors) if isinstance(errors, list) else 0,
        },
    )


def log_phase_timings(
    *,
    logger: logging.Logger,
    file_name: str,
    phase_timings: Iterable[Mapping[str, object]],
) -> None:
    for entry in phase_timings:
        logger.debug(
            "Phase timing",
            extra={
                "event": "import.phase",
                "file": file_name,
                **entry,
            },
        )
