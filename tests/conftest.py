"""Pytest configuration and fixtures."""

import sys
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Generator, Iterable, List, Optional, Sequence, Tuple

import pytest
from openpyxl import Workbook
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from database.base import Base
from database.models import User
from database.repositories import UserRepository
from services.import_models import ImportingUser


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def in_memory_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(in_memory_engine) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=in_memory_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db_session: Session) -> Dict[str, User]:
    """Seed one user per role; two of them are coaches."""
    repo = UserRepository(db_session)
    return {
        "admin": repo.create(name="Alex Admin", email="alex@example.com", is_admin=True),
        "sam": repo.create(name="Sam Lee", email="sam@example.com", is_coach=True),
        "pat": repo.create(name="Pat Kim", email="pat@example.com", is_coach=True),
        "lead": repo.create(name="Lee Lead", email="lee@example.com", is_lead=True),
    }


@pytest.fixture
def importer():
    """Build an ImportingUser from a seeded user."""

    def _importer(user: User) -> ImportingUser:
        return ImportingUser.from_user(user)

    return _importer


# ---------------------------------------------------------------------------
# Workbook Fixtures
# ---------------------------------------------------------------------------

DEFAULT_HEADERS = [
    "KB Potential",
    "Article Linked",
    "Article Improved",
    "Improvement Opportunity",
    "Article Created",
    "Create Opportunity",
    "Relevant Link",
]

# (case_number, month, notes, parameter values in header order)
CaseRow = Tuple[Any, Optional[str], Optional[str], Sequence[Any]]


class WorkbookBuilder:
    """Builds coaching workbooks in the quarterly template.

    The first sheet is always a summary tab, as in real workbooks.
    """

    def __init__(self):
        self.workbook = Workbook()
        self.workbook.active.title = "Summary"
        self.workbook.active["A1"] = "Team summary"

    def add_sheet(
        self,
        title: str,
        engineer: Optional[str] = None,
        coach: Optional[str] = None,
        quarters: Iterable[Tuple[str, List[CaseRow]]] = (),
        headers: Sequence[str] = DEFAULT_HEADERS,
        first_quarter_row: int = 5,
    ) -> "WorkbookBuilder":
        sheet = self.workbook.create_sheet(title)
        if engineer:
            sheet["D1"] = engineer
        if coach:
            sheet["H1"] = coach
        for offset, header in enumerate(headers):
            sheet.cell(row=2, column=3 + offset, value=header)

        row = first_quarter_row
        for quarter, cases in quarters:
            sheet.cell(row=row, column=1, value=quarter)
            row += 1
            for case_number, month, notes, values in cases:
                sheet.cell(row=row, column=2, value=case_number)
                for offset, value in enumerate(values):
                    sheet.cell(row=row, column=3 + offset, value=value)
                sheet.cell(row=row, column=10, value=month)
                sheet.cell(row=row, column=11, value=notes)
                row += 1
        return self

    def add_blank_sheet(self, title: str) -> "WorkbookBuilder":
        self.workbook.create_sheet(title)
        return self

    def to_bytes(self) -> bytes:
        buffer = BytesIO()
        self.workbook.save(buffer)
        return buffer.getvalue()


@pytest.fixture
def workbook_builder():
    """Factory for WorkbookBuilder instances."""
    return WorkbookBuilder


@pytest.fixture
def jane_doe_workbook(workbook_builder) -> bytes:
    """Jane Doe coached by Sam Lee with one January case in Q1."""
    return (
        workbook_builder()
        .add_sheet(
            "Jane",
            engineer="Jane Doe",
            coach="Sam Lee",
            quarters=[("Q1", [(12, "Jan", "Good triage", ["yes", "no"])])],
        )
        .to_bytes()
    )
