"""Applies a confirmed import preview to the database.

Each write commits on its own, so a failure part-way through leaves the
engineers (and months) already processed in place. Counts are threaded
through as :class:`ImportTotals` values rather than shared counters.
"""

from __future__ import annotations

import logging
from collections import OrderedDict, deque
from datetime import date
from typing import Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from config.case_fields import (
    KEEP_CURRENT_COACH,
    REASSIGN_TO_SHEET_COACH,
    field_for_parameter,
    month_number,
)
from database.models import Engineer
from database.repositories import EngineerRepository, UserRepository
from processing.import_errors import CoachAssignmentError, EngineerCommitError
from processing.import_logging import log_engineer_failure
from processing.import_stats import ImportTotals
from processing.parsed_models import ParsedCase, ParsedEngineer
from utils.error_handling import format_error_message

from .coach_assignment_service import CoachAssignmentService
from .evaluation_service import EvaluationService
from .import_models import ConflictAction, ImportingUser, ImportPreview, ImportResult, ImportRole

logger = logging.getLogger(__name__)


def case_field_values(case: ParsedCase) -> Dict[str, bool]:
    """Known case fields set by the row; unknown (None) cells are left out."""
    values: Dict[str, bool] = {}
    for name, value in case.parameters.items():
        if value is None:
            continue
        field = field_for_parameter(name)
        if field is not None:
            values[field] = value
    return values


def group_cases_by_month(cases: List[ParsedCase]) -> "OrderedDict[int, List[ParsedCase]]":
    """Cases keyed by month number in first-seen order; unknown months count as January."""
    groups: "OrderedDict[int, List[ParsedCase]]" = OrderedDict()
    for case in cases:
        groups.setdefault(month_number(case.month) or 1, []).append(case)
    return groups


class ImportCommitter:
    """Writes engineers, coach assignments, evaluations and cases."""

    def __init__(self, session: Session):
        self.session = session
        self.engineers = EngineerRepository(session)
        self.users = UserRepository(session)
        self.assignment_service = CoachAssignmentService(session)
        self.evaluation_service = EvaluationService(session)

    def commit(
        self,
        preview: ImportPreview,
        year: int,
        selections: Optional[Mapping[str, int]],
        user: ImportingUser,
        role: ImportRole,
    ) -> ImportResult:
        selections = selections or {}
        result = ImportResult()
        totals = ImportTotals()

        for parsed in preview.engineers:
            conflict = preview.conflict_for(parsed.name)
            if conflict is not None and conflict.action is ConflictAction.SKIP:
                result.skipped_engineers.append(parsed.name)
                logger.info(f"Skipping {parsed.name}: coach conflict with {conflict.current_coach}")
                continue

            try:
                totals = totals + self.commit_engineer(
                    parsed, year, selections.get(parsed.name), user, role, result.errors
                )
            except EngineerCommitError as e:
                self.session.rollback()
                totals = totals + e.totals
                result.errors.append(str(e))
                log_engineer_failure(
                    logger=logger,
                    engineer_name=parsed.name,
                    error=e,
                    file_name=preview.metadata.file_name,
                )

        result.imported_engineers = totals.engineers
        result.imported_evaluations = totals.evaluations
        result.imported_cases = totals.cases
        result.success = not result.errors
        return result

    def commit_engineer(
        self,
        parsed: ParsedEngineer,
        year: int,
        selection: Optional[int],
        user: ImportingUser,
        role: ImportRole,
        errors: Optional[List[str]] = None,
    ) -> ImportTotals:
        """Import one engineer and return what was written.

        Cases that fail individually are reported in ``errors`` and skipped.

        Raises:
            EngineerCommitError: the engineer could not be fully imported;
                carries the totals already committed.
        """
        logger.info(f"Processing engineer: {parsed.name}")
        errors = errors if errors is not None else []
        totals = ImportTotals()
        try:
            engineer, created = self.find_or_create_engineer(parsed, user, role)
            if created:
                totals = totals.add(engineers=1)

            self.apply_coach_selection(parsed, engineer, selection, user, role)

            if not self.assignment_service.has_active_coach(engineer.id):
                logger.warning(f"Skipping evaluation import for {engineer.name}: no active coach assignment")
                raise EngineerCommitError(
                    f"{parsed.name}: No active coach assignment - please assign a coach first", totals
                )

            for month, cases in group_cases_by_month(parsed.cases).items():
                totals = self.import_month(engineer, date(year, month, 1), cases, user, totals, errors)
        except EngineerCommitError:
            raise
        except Exception as e:
            raise EngineerCommitError(format_error_message(e, f"Engineer {parsed.name}"), totals) from e
        return totals

    def find_or_create_engineer(
        self, parsed: ParsedEngineer, user: ImportingUser, role: ImportRole
    ) -> tuple[Engineer, bool]:
        existing = self.engineers.find_by_name(parsed.name)
        if existing is not None:
            logger.info(f"Found existing engineer: {existing.name} (ID: {existing.id})")
            return existing, False

        lead_user_id = user.id if role is ImportRole.LEAD and user.is_lead else None
        engineer = self.engineers.create(parsed.name, lead_user_id=lead_user_id)
        logger.info(f"Created new engineer: {engineer.name} (ID: {engineer.id}, lead: {lead_user_id or 'none'})")
        return engineer, True

    def resolve_target_coach(
        self,
        parsed: ParsedEngineer,
        engineer: Engineer,
        selection: Optional[int],
        user: ImportingUser,
        role: ImportRole,
    ) -> Optional[int]:
        """Coach user id the engineer should be assigned to, or None."""
        if selection == KEEP_CURRENT_COACH:
            logger.info(f"Keeping current coach for {parsed.name}")
            return None

        if selection is not None and selection > 0:
            logger.info(f"Manual selection: assigning {parsed.name} to coach ID {selection}")
            return selection

        if selection == REASSIGN_TO_SHEET_COACH and parsed.coach_name:
            coach = self.users.find_coach_by_name(parsed.coach_name)
            if coach is not None:
                logger.info(f"Reassigning {parsed.name} to workbook coach {coach.name}")
                return coach.id
            logger.warning(f"Workbook coach not found: {parsed.coach_name}")
            return user.id if role is ImportRole.COACH else None

        if self.assignment_service.has_active_coach(engineer.id):
            return None

        if parsed.coach_name:
            coach = self.users.find_coach_by_name(parsed.coach_name)
            if coach is not None:
                logger.info(f"Auto-assigning {parsed.name} to workbook coach {coach.name}")
                return coach.id

        return self.fallback_coach(user)

    def fallback_coach(self, user: ImportingUser) -> Optional[int]:
        if user.is_coach:
            return user.id
        if user.is_admin or user.is_lead:
            coaches = self.users.get_active_coaches()
            if coaches:
                logger.warning(
                    f"Assigning to first available coach {coaches[0].name} for non-coach import by {user.name}",
                    extra={"event": "import.fallback_coach", "coach_user_id": coaches[0].id},
                )
                return coaches[0].id
        return None

    def apply_coach_selection(
        self,
        parsed: ParsedEngineer,
        engineer: Engineer,
        selection: Optional[int],
        user: ImportingUser,
        role: ImportRole,
    ) -> None:
        target = self.resolve_target_coach(parsed, engineer, selection, user, role)
        if target is None:
            logger.info(f"No coach assignment created for {engineer.name}")
            return
        if self.assignment_service.has_active_coach(engineer.id):
            logger.info(f"Skipping coach assignment for {engineer.name}: already has an active coach")
            return
        try:
            self.assignment_service.create_assignment(engineer.id, target)
        except CoachAssignmentError as e:
            logger.warning(f"Failed to create coach assignment for {engineer.name}: {e}")

    def import_month(
        self,
        engineer: Engineer,
        evaluation_date: date,
        cases: List[ParsedCase],
        user: ImportingUser,
        totals: ImportTotals,
        errors: List[str],
    ) -> ImportTotals:
        """Create the month's evaluation and place its cases, empty slots first.

        A failed write is rolled back so the session stays usable for the
        remaining cases and engineers.
        """
        engineer_name = engineer.name
        try:
            evaluation = self.evaluation_service.create_evaluation(
                engineer.id, evaluation_date, created_by=user.id
            )
        except Exception as e:
            self.session.rollback()
            message = format_error_message(e, f"Engineer {engineer_name} ({evaluation_date:%Y-%m})")
            logger.error(f"Failed to create evaluation for {engineer_name}, {evaluation_date:%Y-%m}: {e}")
            raise EngineerCommitError(message, totals) from e

        totals = totals.add(evaluations=1)
        evaluation_id = evaluation.id
        empty_slots = deque(self.evaluation_service.get_empty_cases(evaluation_id))

        for case in cases:
            fields = case_field_values(case)
            try:
                if empty_slots:
                    self.evaluation_service.update_case(
                        empty_slots[0], case_id=case.case_id, notes=case.notes, fields=fields
                    )
                    empty_slots.popleft()
                else:
                    self.evaluation_service.add_case(
                        evaluation_id, case_id=case.case_id, notes=case.notes, fields=fields
                    )
            except Exception as e:
                self.session.rollback()
                logger.warning(f"Failed to process case {case.case_id} for evaluation {evaluation_id}: {e}")
                errors.append(format_error_message(e, f"Engineer {engineer_name} case {case.case_id}"))
                continue
            totals = totals.add(cases=1)
        return totals


__all__ = ["ImportCommitter", "case_field_values", "group_cases_by_month"]
