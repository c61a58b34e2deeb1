"""Evaluation repositories for Evaluation and CaseEvaluation operations."""

from datetime import date
from typing import List, Optional

from sqlalchemy import and_, func, or_

from ..models import CaseEvaluation, Evaluation
from ..base_repository import BaseRepository


def _month_bounds(day: date) -> tuple[date, date]:
    start = day.replace(day=1)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


class EvaluationRepository(BaseRepository[Evaluation]):
    """Repository for Evaluation operations."""

    model = Evaluation

    def create(
        self,
        engineer_id: int,
        coach_user_id: int,
        evaluation_date: date,
        created_by: Optional[int] = None,
    ) -> Evaluation:
        return super().create(
            engineer_id=engineer_id,
            coach_user_id=coach_user_id,
            evaluation_date=evaluation_date,
            created_by=created_by,
            updated_by=created_by,
        )

    def find_for_month(self, engineer_id: int, evaluation_date: date) -> Optional[Evaluation]:
        """Non-deleted evaluation for the engineer in the same year and month."""
        start, end = _month_bounds(evaluation_date)
        return (
            self.session.query(Evaluation)
            .filter(
                and_(
                    Evaluation.engineer_id == engineer_id,
                    Evaluation.evaluation_date >= start,
                    Evaluation.evaluation_date < end,
                    Evaluation.deleted_at.is_(None),
                )
            )
            .first()
        )

    def get_by_engineer(self, engineer_id: int) -> List[Evaluation]:
        return (
            self.session.query(Evaluation)
            .filter(Evaluation.engineer_id == engineer_id, Evaluation.deleted_at.is_(None))
            .order_by(Evaluation.evaluation_date)
            .all()
        )


class CaseEvaluationRepository(BaseRepository[CaseEvaluation]):
    """Repository for CaseEvaluation slots."""

    model = CaseEvaluation

    def get_by_evaluation(self, evaluation_id: int) -> List[CaseEvaluation]:
        return (
            self.session.query(CaseEvaluation)
            .filter(
                CaseEvaluation.evaluation_id == evaluation_id,
                CaseEvaluation.deleted_at.is_(None),
            )
            .order_by(CaseEvaluation.case_number)
            .all()
        )

    def get_empty(self, evaluation_id: int) -> List[CaseEvaluation]:
        """Slots with no case_id, in ascending case_number order."""
        return (
            self.session.query(CaseEvaluation)
            .filter(
                CaseEvaluation.evaluation_id == evaluation_id,
                CaseEvaluation.deleted_at.is_(None),
                or_(CaseEvaluation.case_id.is_(None), CaseEvaluation.case_id == ""),
            )
            .order_by(CaseEvaluation.case_number)
            .all()
        )

    def find_by_case_id(self, evaluation_id: int, case_id: str) -> Optional[CaseEvaluation]:
        return (
            self.session.query(CaseEvaluation)
            .filter(
                CaseEvaluation.evaluation_id == evaluation_id,
                CaseEvaluation.case_id == case_id,
                CaseEvaluation.deleted_at.is_(None),
            )
            .first()
        )

    def max_case_number(self, evaluation_id: int) -> int:
        """Highest case_number ever allocated, soft-deleted rows included."""
        value = (
            self.session.query(func.max(CaseEvaluation.case_number))
            .filter(CaseEvaluation.evaluation_id == evaluation_id)
            .scalar()
        )
        return value or 0

    def create_slots(self, evaluation_id: int, count: int) -> List[CaseEvaluation]:
        slots = [
            CaseEvaluation(evaluation_id=evaluation_id, case_number=number)
            for number in range(1, count + 1)
        ]
        self.session.add_all(slots)
        self.session.commit()
        return slots
