"""Read-only reconciliation of parsed engineers against coach assignments."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from database.repositories import (
    CoachAssignmentRepository,
    EngineerRepository,
    UserRepository,
)
from processing.parsed_models import ParsedEngineer
from processing.workbook_parser import summarize_engineers
from utils.names import names_match

from .import_models import (
    CoachConflict,
    CoachOwnershipWarning,
    ConflictAction,
    ImportingUser,
    ImportPreview,
    ImportRole,
    MissingCoach,
    SuggestedAction,
)

logger = logging.getLogger(__name__)


class CoachReconciler:
    """Decides which engineers can be imported as-is and which need a choice.

    Nothing here writes to the database, so running it twice on the same
    preview and data gives the same findings.
    """

    def __init__(self, session: Session):
        self.session = session
        self.engineers = EngineerRepository(session)
        self.users = UserRepository(session)
        self.assignments = CoachAssignmentRepository(session)

    def reconcile(self, preview: ImportPreview, user: ImportingUser, role: ImportRole) -> ImportPreview:
        logger.info(
            f"Import conflict detection: user {user.name} (role: {role.value}), "
            f"workbook coaches: {preview.metadata.coach_names or 'none'}"
        )

        warning = self.check_ownership(preview, user, role)
        if warning is not None:
            preview.coach_ownership_warning = warning
            logger.warning(
                f"Coach ownership conflict: {user.name} importing a workbook for {warning.detected_coach}; import blocked",
                extra={"event": "import.ownership_blocked", "user": user.name, "detected_coach": warning.detected_coach},
            )
            return preview

        if role is ImportRole.LEAD:
            self.apply_lead_scope(preview, user)

        for engineer in preview.engineers:
            self._check_engineer(preview, engineer, role)

        logger.info(
            f"Conflict detection complete: missing coaches: {len(preview.missing_coaches)}, "
            f"conflicts: {len(preview.conflicts)}"
        )
        return preview

    def check_ownership(
        self, preview: ImportPreview, user: ImportingUser, role: ImportRole
    ) -> Optional[CoachOwnershipWarning]:
        """Blocks a coach from importing a workbook that names another coach."""
        if role is not ImportRole.COACH:
            return None
        detected = list(preview.metadata.coach_names)
        if not detected and preview.metadata.coach_name:
            detected = [preview.metadata.coach_name]
        for coach_name in detected:
            if not names_match(coach_name, user.name):
                return CoachOwnershipWarning(
                    detected_coach=coach_name,
                    importing_user=user.name,
                    should_block_import=True,
                )
        return None

    def apply_lead_scope(self, preview: ImportPreview, user: ImportingUser) -> List[str]:
        """Drop engineers that already belong to another lead."""
        kept: List[ParsedEngineer] = []
        dropped: List[str] = []
        for engineer in preview.engineers:
            existing = self.engineers.find_by_name(engineer.name)
            if existing is not None and existing.lead_user_id is not None and existing.lead_user_id != user.id:
                dropped.append(engineer.name)
            else:
                kept.append(engineer)

        if dropped:
            preview.engineers = kept
            preview.warnings.append(f"Skipping engineers not under your lead: {', '.join(dropped)}")
            preview.metadata = summarize_engineers(kept, preview.metadata.file_name)
            logger.info(f"Lead scope dropped {len(dropped)} engineers for {user.name}")
        return dropped

    def _check_engineer(self, preview: ImportPreview, engineer: ParsedEngineer, role: ImportRole) -> None:
        suggested = (
            SuggestedAction.ASSIGN_TO_IMPORTER if role is ImportRole.COACH else SuggestedAction.MANUAL_SELECT
        )

        if not engineer.coach_name:
            preview.missing_coaches.append(
                MissingCoach(engineer_name=engineer.name, excel_coach_name=None, suggested_action=suggested)
            )
            return

        coach = self.users.find_coach_by_name(engineer.coach_name)
        if coach is None:
            preview.missing_coaches.append(
                MissingCoach(
                    engineer_name=engineer.name,
                    excel_coach_name=engineer.coach_name,
                    suggested_action=suggested,
                )
            )
            logger.info(f"Missing coach: {engineer.coach_name} for {engineer.name} -> {suggested.value}")
            return

        existing = self.engineers.find_by_name(engineer.name)
        if existing is None:
            return
        current = self.assignments.get_active_for_engineer(existing.id)
        if current is None or current.coach_user_id == coach.id:
            return

        current_coach = self.users.get_by_id(current.coach_user_id)
        conflict = CoachConflict(
            engineer_name=engineer.name,
            current_coach=current_coach.name if current_coach else "Unknown",
            excel_coach=engineer.coach_name,
            action=ConflictAction.SKIP if role is ImportRole.COACH else ConflictAction.MANUAL,
        )
        preview.conflicts.append(conflict)
        logger.info(
            f"Conflict: {engineer.name} - current: {conflict.current_coach}, "
            f"workbook: {conflict.excel_coach}, action: {conflict.action.value}"
        )


__all__ = ["CoachReconciler"]
