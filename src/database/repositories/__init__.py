"""Repository package - provides clean interface to database operations."""

from .user import UserRepository
from .engineer import EngineerRepository
from .coach_assignment import CoachAssignmentRepository
from .evaluation import EvaluationRepository, CaseEvaluationRepository

__all__ = [
    "UserRepository",
    "EngineerRepository",
    "CoachAssignmentRepository",
    "EvaluationRepository",
    "CaseEvaluationRepository",
]
