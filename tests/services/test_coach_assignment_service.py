"""Tests for coach assignment rules."""

from datetime import date

import pytest

from database.repositories import EngineerRepository
from processing.import_errors import CoachAssignmentError
from services.coach_assignment_service import CoachAssignmentService


@pytest.fixture
def service(db_session):
    return CoachAssignmentService(db_session)


@pytest.fixture
def engineer(db_session):
    return EngineerRepository(db_session).create("Jane Doe")


def test_create_assignment_makes_coach_active(service, engineer, users):
    assignment = service.create_assignment(engineer.id, users["sam"].id, date(2024, 1, 1))

    assert assignment.is_active is True
    assert service.has_active_coach(engineer.id)
    assert service.get_current_assignment(engineer.id).id == assignment.id


def test_non_coach_is_rejected(service, engineer, users):
    with pytest.raises(CoachAssignmentError, match="not an active coach"):
        service.create_assignment(engineer.id, users["admin"].id)

    assert not service.has_active_coach(engineer.id)


def test_active_pair_is_rejected(service, engineer, users):
    service.create_assignment(engineer.id, users["sam"].id)

    with pytest.raises(CoachAssignmentError, match="already exists"):
        service.create_assignment(engineer.id, users["sam"].id)


def test_ended_assignment_with_same_start_is_reactivated(service, engineer, users):
    start = date(2024, 2, 1)
    first = service.create_assignment(engineer.id, users["sam"].id, start)
    service.end_assignment(first.id, date(2024, 3, 1))
    assert not service.has_active_coach(engineer.id)

    again = service.create_assignment(engineer.id, users["sam"].id, start)

    assert again.id == first.id
    assert again.is_active is True
    assert again.end_date is None


def test_current_assignment_is_most_recent_start(service, engineer, users):
    service.create_assignment(engineer.id, users["sam"].id, date(2024, 1, 1))
    latest = service.create_assignment(engineer.id, users["pat"].id, date(2024, 6, 1))

    assert service.get_current_assignment(engineer.id).id == latest.id


def test_end_unknown_assignment(service):
    with pytest.raises(CoachAssignmentError, match="not found"):
        service.end_assignment(999)
