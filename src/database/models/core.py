"""Core database models: User, Engineer."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from ..base import Base


class User(Base):
    """An application user; role flags decide what they may import."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_coach = Column(Boolean, nullable=False, default=False)
    is_lead = Column(Boolean, nullable=False, default=False)
    is_manager = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}')>"


class Engineer(Base):
    """The person being evaluated (not a system role)."""

    __tablename__ = "engineers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    lead_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    lead = relationship("User", foreign_keys=[lead_user_id])
    coach_assignments = relationship("CoachAssignment", back_populates="engineer")
    evaluations = relationship("Evaluation", back_populates="engineer")

    def __repr__(self):
        return f"<Engineer(id={self.id}, name='{self.name}')>"
