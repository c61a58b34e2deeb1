"""Coach assignment rules shared by the importer and manual edits."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from database.models import CoachAssignment
from database.repositories import CoachAssignmentRepository, UserRepository
from processing.import_errors import CoachAssignmentError

logger = logging.getLogger(__name__)


class CoachAssignmentService:
    """Create, end and query engineer/coach pairings."""

    def __init__(self, session: Session):
        self.session = session
        self.assignments = CoachAssignmentRepository(session)
        self.users = UserRepository(session)

    def has_active_coach(self, engineer_id: int) -> bool:
        return self.assignments.count_active_for_engineer(engineer_id) > 0

    def get_current_assignment(self, engineer_id: int) -> Optional[CoachAssignment]:
        """Most recent active assignment (by start date), if any."""
        return self.assignments.get_active_for_engineer(engineer_id)

    def create_assignment(
        self,
        engineer_id: int,
        coach_user_id: int,
        start_date: Optional[date] = None,
    ) -> CoachAssignment:
        """Pair an engineer with a coach, reactivating a matching ended row.

        Raises:
            CoachAssignmentError: unknown/non-coach user, or the pair is
                already active.
        """
        start_date = start_date or date.today()

        coach = self.users.get_active_by_id(coach_user_id)
        if coach is None or not coach.is_coach:
            raise CoachAssignmentError(f"User {coach_user_id} is not an active coach")

        if self.assignments.find_active_pair(engineer_id, coach_user_id):
            raise CoachAssignmentError("Active assignment already exists for this engineer-coach pair")

        inactive = self.assignments.find_inactive_pair(engineer_id, coach_user_id, start_date)
        if inactive is not None:
            assignment = self.assignments.update(inactive, is_active=True, end_date=None)
            logger.info(f"Coach assignment reactivated: assignment ID {assignment.id}")
        else:
            assignment = self.assignments.create(engineer_id, coach_user_id, start_date)
            logger.info(f"Coach assignment created: assignment ID {assignment.id}")

        logger.info(
            "Coach assignment completed",
            extra={
                "event": "coach_assignment.create",
                "engineer_id": engineer_id,
                "coach_user_id": coach_user_id,
            },
        )
        return assignment

    def end_assignment(self, assignment_id: int, end_date: Optional[date] = None) -> CoachAssignment:
        assignment = self.assignments.get_by_id(assignment_id)
        if assignment is None:
            raise CoachAssignmentError(f"Assignment {assignment_id} not found")
        return self.assignments.update(
            assignment, is_active=False, end_date=end_date or date.today()
        )
