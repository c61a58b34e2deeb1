"""Evaluation and case-slot rules used by the workbook importer."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Mapping, Optional

from sqlalchemy.orm import Session

from config.case_fields import CASE_FIELDS, DEFAULT_CASE_SLOTS
from database.models import CaseEvaluation, Evaluation
from database.repositories import (
    CaseEvaluationRepository,
    CoachAssignmentRepository,
    EvaluationRepository,
)
from processing.import_errors import (
    DuplicateCaseError,
    DuplicateEvaluationError,
    MissingCoachAssignmentError,
)

logger = logging.getLogger(__name__)


class EvaluationService:
    """Creates evaluations with their pre-allocated case slots."""

    def __init__(self, session: Session, default_slots: int = DEFAULT_CASE_SLOTS):
        self.session = session
        self.default_slots = default_slots
        self.evaluations = EvaluationRepository(session)
        self.cases = CaseEvaluationRepository(session)
        self.assignments = CoachAssignmentRepository(session)

    def create_evaluation(
        self, engineer_id: int, evaluation_date: date, created_by: Optional[int] = None
    ) -> Evaluation:
        """Create the engineer's evaluation for a month.

        The evaluation is owned by the engineer's active coach and starts
        with ``default_slots`` empty case slots numbered from 1.

        Raises:
            DuplicateEvaluationError: one already exists for that month.
            MissingCoachAssignmentError: the engineer has no active coach.
        """
        if self.evaluations.find_for_month(engineer_id, evaluation_date):
            raise DuplicateEvaluationError("Evaluation already exists for this engineer and month")

        assignment = self.assignments.get_active_for_engineer(engineer_id)
        if assignment is None:
            raise MissingCoachAssignmentError("No active coach assignment found for this engineer")

        evaluation = self.evaluations.create(
            engineer_id=engineer_id,
            coach_user_id=assignment.coach_user_id,
            evaluation_date=evaluation_date,
            created_by=created_by,
        )
        self.cases.create_slots(evaluation.id, self.default_slots)

        logger.info(
            f"Evaluation created: engineer {engineer_id} for {evaluation_date.isoformat()}",
            extra={"event": "evaluation.create", "evaluation_id": evaluation.id},
        )
        return evaluation

    def get_cases(self, evaluation_id: int) -> List[CaseEvaluation]:
        return self.cases.get_by_evaluation(evaluation_id)

    def get_empty_cases(self, evaluation_id: int) -> List[CaseEvaluation]:
        return self.cases.get_empty(evaluation_id)

    def _ensure_case_id_free(
        self, evaluation_id: int, case_id: Optional[str], exclude_id: Optional[int] = None
    ) -> None:
        if not case_id:
            return
        existing = self.cases.find_by_case_id(evaluation_id, case_id)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateCaseError(f"A case with ID {case_id} already exists in this evaluation")

    def add_case(
        self,
        evaluation_id: int,
        case_id: Optional[str] = None,
        notes: Optional[str] = None,
        fields: Optional[Mapping[str, bool]] = None,
    ) -> CaseEvaluation:
        """Append a new case after the highest case_number allocated so far."""
        self._ensure_case_id_free(evaluation_id, case_id)

        values = {name: bool(value) for name, value in (fields or {}).items() if name in CASE_FIELDS}
        case = self.cases.create(
            evaluation_id=evaluation_id,
            case_number=self.cases.max_case_number(evaluation_id) + 1,
            case_id=case_id or None,
            notes=notes,
            **values,
        )
        logger.info(f"Case added to evaluation {evaluation_id}: case #{case.case_number} (ID: {case_id or 'none'})")
        return case

    def update_case(
        self,
        case: CaseEvaluation,
        case_id: Optional[str] = None,
        notes: Optional[str] = None,
        fields: Optional[Mapping[str, bool]] = None,
    ) -> CaseEvaluation:
        """Fill or edit a slot; ``None`` arguments leave the column untouched."""
        changes = {name: bool(value) for name, value in (fields or {}).items() if name in CASE_FIELDS}
        if case_id is not None:
            self._ensure_case_id_free(case.evaluation_id, case_id, exclude_id=case.id)
            changes["case_id"] = case_id
        if notes is not None:
            changes["notes"] = notes
        if not changes:
            return case
        return self.cases.update(case, **changes)

    def soft_delete_evaluation(self, evaluation_id: int, deleted_by: Optional[int] = None) -> None:
        evaluation = self.evaluations.get_by_id(evaluation_id)
        if evaluation is None or evaluation.deleted_at is not None:
            raise ValueError(f"Evaluation {evaluation_id} not found")
        self.evaluations.update(evaluation, deleted_at=datetime.utcnow(), updated_by=deleted_by)
        logger.info(f"Evaluation soft deleted: ID {evaluation_id}")
