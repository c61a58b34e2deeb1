"""Database models package.

Re-exports all models from submodules. New code can import directly from
submodules for better organization.
"""

# Base class
from ..base import Base

# People
from .core import User, Engineer

# Coaching
from .coaching import CoachAssignment

# Evaluations
from .evaluations import Evaluation, CaseEvaluation

__all__ = [
    # Base
    "Base",
    # People
    "User",
    "Engineer",
    # Coaching
    "CoachAssignment",
    # Evaluations
    "Evaluation",
    "CaseEvaluation",
]
