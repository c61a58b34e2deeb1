"""Centralized session factory helpers.

This is the CANONICAL source for session management. Import session-related
functions from here, not from base.py.

Usage:
    from database.session import database_session_factory, session_scope

    factory = database_session_factory(db_path)
    with session_scope(factory) as session:
        service = EvaluationImportService(session)
        ...
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

from sqlalchemy.orm import Session

from .base import (
    dispose_all_engines,
    get_db_session,
    init_db,
    resolve_db_path,
)

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]

__all__ = [
    "SessionFactory",
    "database_session_factory",
    "session_scope",
    "get_db_session",
    "init_db",
    "dispose_all_engines",
]


def database_session_factory(db_path: Optional[Path] = None) -> SessionFactory:
    """Return a session factory bound to a database file (tables created on first use)."""
    target = resolve_db_path(db_path)

    def _factory() -> Session:
        init_db(target)
        return get_db_session(target)

    return _factory


@contextmanager
def session_scope(factory: SessionFactory) -> Iterator[Session]:
    """Context manager for commit/rollback semantics around a session factory.

    Repositories commit each write themselves, so the final commit only
    flushes anything left pending. A rollback here never undoes earlier
    point writes.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.warning(f"Session rolled back: {e}")
        raise
    finally:
        session.close()
