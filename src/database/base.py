"""Database engine and declarative base utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import NullPool

from utils.env import get_database_path

Base = declarative_base()

# -----------------------------------------------------------------------------
# Engine registry for proper cleanup
# -----------------------------------------------------------------------------

# Track engines per database path for proper disposal
_engines: Dict[str, Engine] = {}


def _get_or_create_engine(db_path: Path) -> Engine:
    """Get or create an engine for the given database path.

    Uses NullPool so every point query opens and closes its own connection.
    """
    db_path_str = str(db_path.resolve())

    if db_path_str in _engines:
        return _engines[db_path_str]

    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )
    _engines[db_path_str] = engine
    return engine


def dispose_all_engines() -> None:
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()


def resolve_db_path(db_path: Optional[Path] = None) -> Path:
    """Return ``db_path`` or the configured default database location."""
    return Path(db_path) if db_path is not None else get_database_path()


def get_db_session(db_path: Optional[Path] = None) -> Session:
    engine = _get_or_create_engine(resolve_db_path(db_path))
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return SessionLocal()


def init_db(db_path: Optional[Path] = None) -> None:
    """Create all tables for the given (or configured) database."""
    import database.models  # noqa: F401  (register mappers)

    engine = _get_or_create_engine(resolve_db_path(db_path))
    Base.metadata.create_all(bind=engine)
