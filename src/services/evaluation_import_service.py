"""Two-phase import of coaching evaluation workbooks.

``preview_import`` parses a workbook and reconciles it against current coach
assignments without writing anything. The caller shows the preview, collects
coach selections, and hands both back to ``commit_import``.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

from sqlalchemy.orm import Session

from config.sheet_layout import SheetLayout
from processing.import_logging import (
    log_commit_complete,
    log_commit_start,
    log_preview_complete,
    log_phase_timings,
    log_preview_start,
)
from processing.workbook_parser import EvaluationWorkbookParser, WorkbookSource
from utils.error_handling import format_error_message, log_exception
from utils.timing import PhaseTimer

from .coach_reconciler import CoachReconciler
from .import_committer import ImportCommitter
from .import_models import (
    ImportingUser,
    ImportPreview,
    ImportResult,
    ImportRole,
    normalize_import_role,
)

logger = logging.getLogger(__name__)


class EvaluationImportService:
    """Preview and commit entry points for workbook imports."""

    def __init__(self, session: Session, layout: Optional[SheetLayout] = None):
        self.session = session
        self.parser = EvaluationWorkbookParser(layout)

    def preview_import(
        self,
        source: WorkbookSource,
        file_name: str,
        user: ImportingUser,
        role: Union[str, ImportRole, None] = ImportRole.COACH,
    ) -> ImportPreview:
        """Parse and reconcile a workbook.

        Raises:
            WorkbookReadError: the workbook itself could not be opened.
        """
        import_role = normalize_import_role(role)
        log_preview_start(logger=logger, file_name=file_name, user_name=user.name, import_role=import_role.value)

        timer = PhaseTimer({"import_role": import_role.value})
        with timer.measure("parse"):
            parsed = self.parser.parse(source, file_name)
        preview = ImportPreview(
            engineers=parsed.engineers,
            metadata=parsed.metadata,
            errors=list(parsed.errors),
        )

        with timer.measure("reconcile"):
            try:
                CoachReconciler(self.session).reconcile(preview, user, import_role)
            except Exception as e:
                self.session.rollback()
                log_exception(e, "Conflict detection failed", extra={"file": file_name})
                preview.errors.append(format_error_message(e, "Conflict detection failed"))

        log_phase_timings(logger=logger, file_name=file_name, phase_timings=timer.as_list())

        log_preview_complete(
            logger=logger,
            file_name=file_name,
            engineers=len(preview.engineers),
            total_cases=preview.metadata.total_cases,
            conflicts=len(preview.conflicts),
            missing_coaches=len(preview.missing_coaches),
            errors=len(preview.errors),
            blocked=preview.is_blocked,
        )
        return preview

    def commit_import(
        self,
        preview: ImportPreview,
        year: int,
        selections: Optional[Mapping[str, int]],
        user: ImportingUser,
        role: Union[str, ImportRole, None] = ImportRole.COACH,
    ) -> ImportResult:
        """Write a confirmed preview; failures are reported per engineer."""
        import_role = normalize_import_role(role)
        file_name = preview.metadata.file_name

        if preview.is_blocked:
            warning = preview.coach_ownership_warning
            logger.warning(f"Refusing blocked import of '{file_name}' by {user.name}")
            return ImportResult(
                success=False,
                errors=[f"Import blocked: workbook belongs to coach {warning.detected_coach}"],
            )

        log_commit_start(
            logger=logger,
            file_name=file_name,
            user_name=user.name,
            import_role=import_role.value,
            year=year,
            engineers=len(preview.engineers),
        )
        timer = PhaseTimer({"import_role": import_role.value, "year": year})
        with timer.measure("commit"):
            result = ImportCommitter(self.session).commit(preview, year, selections, user, import_role)
        log_phase_timings(logger=logger, file_name=file_name, phase_timings=timer.as_list())
        log_commit_complete(logger=logger, file_name=file_name, stats=result.to_dict())
        return result


__all__ = ["EvaluationImportService"]
