"""Coach assignment repository."""

from datetime import date
from typing import List, Optional

from sqlalchemy import and_

from ..models import CoachAssignment
from ..base_repository import BaseRepository


class CoachAssignmentRepository(BaseRepository[CoachAssignment]):
    """Repository for CoachAssignment operations."""

    model = CoachAssignment

    def create(self, engineer_id: int, coach_user_id: int, start_date: date) -> CoachAssignment:
        return super().create(
            engineer_id=engineer_id,
            coach_user_id=coach_user_id,
            start_date=start_date,
            is_active=True,
        )

    def get_for_engineer(
        self, engineer_id: int, active_only: bool = False
    ) -> List[CoachAssignment]:
        """Assignments for an engineer, most recent start date first."""
        query = self.session.query(CoachAssignment).filter(
            CoachAssignment.engineer_id == engineer_id
        )
        if active_only:
            query = query.filter(CoachAssignment.is_active.is_(True))
        return query.order_by(
            CoachAssignment.start_date.desc(), CoachAssignment.id.desc()
        ).all()

    def get_active_for_engineer(self, engineer_id: int) -> Optional[CoachAssignment]:
        assignments = self.get_for_engineer(engineer_id, active_only=True)
        return assignments[0] if assignments else None

    def count_active_for_engineer(self, engineer_id: int) -> int:
        return (
            self.session.query(CoachAssignment)
            .filter(
                and_(
                    CoachAssignment.engineer_id == engineer_id,
                    CoachAssignment.is_active.is_(True),
                )
            )
            .count()
        )

    def find_active_pair(self, engineer_id: int, coach_user_id: int) -> Optional[CoachAssignment]:
        return (
            self.session.query(CoachAssignment)
            .filter(
                and_(
                    CoachAssignment.engineer_id == engineer_id,
                    CoachAssignment.coach_user_id == coach_user_id,
                    CoachAssignment.is_active.is_(True),
                )
            )
            .first()
        )

    def find_inactive_pair(
        self, engineer_id: int, coach_user_id: int, start_date: date
    ) -> Optional[CoachAssignment]:
        return (
            self.session.query(CoachAssignment)
            .filter(
                and_(
                    CoachAssignment.engineer_id == engineer_id,
                    CoachAssignment.coach_user_id == coach_user_id,
                    CoachAssignment.start_date == start_date,
                    CoachAssignment.is_active.is_(False),
                )
            )
            .first()
        )
