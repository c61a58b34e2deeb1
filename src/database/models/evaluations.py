"""Evaluation models: Evaluation and its CaseEvaluation slots."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from ..base import Base


class Evaluation(Base):
    """One monthly evaluation of an engineer by their coach."""

    __tablename__ = "evaluations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    engineer_id = Column(Integer, ForeignKey("engineers.id"), nullable=False)
    coach_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    evaluation_date = Column(Date, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    engineer = relationship("Engineer", back_populates="evaluations")
    coach = relationship("User", foreign_keys=[coach_user_id])
    cases = relationship(
        "CaseEvaluation",
        back_populates="evaluation",
        order_by="CaseEvaluation.case_number",
    )

    __table_args__ = (Index("ix_evaluation_engineer_date", "engineer_id", "evaluation_date"),)

    def __repr__(self):
        return f"<Evaluation(id={self.id}, engineer_id={self.engineer_id}, date={self.evaluation_date})>"


class CaseEvaluation(Base):
    """A case slot within an evaluation; empty until ``case_id`` is set."""

    __tablename__ = "case_evaluations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    evaluation_id = Column(Integer, ForeignKey("evaluations.id"), nullable=False)
    case_number = Column(Integer, nullable=False)
    case_id = Column(String(100), nullable=True)
    kb_potential = Column(Boolean, nullable=False, default=False)
    article_linked = Column(Boolean, nullable=False, default=False)
    article_improved = Column(Boolean, nullable=False, default=False)
    improvement_opportunity = Column(Boolean, nullable=False, default=False)
    article_created = Column(Boolean, nullable=False, default=False)
    create_opportunity = Column(Boolean, nullable=False, default=False)
    relevant_link = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    evaluation = relationship("Evaluation", back_populates="cases")

    __table_args__ = (Index("ix_case_evaluation_number", "evaluation_id", "case_number"),)

    @property
    def is_empty(self) -> bool:
        return not self.case_id

    def __repr__(self):
        return f"<CaseEvaluation(id={self.id}, case_number={self.case_number}, case_id='{self.case_id}')>"
