"""Coach assignment model."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from ..base import Base


class CoachAssignment(Base):
    """An (engineer, coach) pairing; active while ``end_date`` is unset."""

    __tablename__ = "engineer_coach_assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    engineer_id = Column(Integer, ForeignKey("engineers.id"), nullable=False)
    coach_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    engineer = relationship("Engineer", back_populates="coach_assignments")
    coach = relationship("User", foreign_keys=[coach_user_id])

    # No unique constraint on (engineer_id, is_active): the importer relies on
    # an existence check right before insert.
    __table_args__ = (Index("ix_assignment_engineer_active", "engineer_id", "is_active"),)

    def __repr__(self):
        return (
            f"<CoachAssignment(id={self.id}, engineer_id={self.engineer_id}, "
            f"coach_user_id={self.coach_user_id}, active={self.is_active})>"
        )
