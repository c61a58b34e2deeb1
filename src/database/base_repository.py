"""Shared SQLAlchemy repository helpers."""

from __future__ import annotations

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    """Provides common CRUD helpers for repositories.

    Every write commits immediately; callers never get a transaction that
    spans more than one point write.
    """

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    def create(self, **kwargs) -> ModelT:
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.commit()
        self.session.refresh(instance)
        return instance

    def update(self, instance: ModelT, **changes) -> ModelT:
        for key, value in changes.items():
            setattr(instance, key, value)
        self.session.commit()
        self.session.refresh(instance)
        return instance

    def get_by_id(self, pk: int) -> Optional[ModelT]:
        return self.session.query(self.model).filter(self.model.id == pk).first()

    def list_all(self) -> list[ModelT]:
        return self.session.query(self.model).all()
