"""End-to-end preview/commit tests for workbook imports."""

from datetime import date

import pytest

from database.models import CaseEvaluation, CoachAssignment, Engineer, Evaluation
from database.repositories import EngineerRepository
from processing.import_errors import WorkbookReadError
from services.coach_assignment_service import CoachAssignmentService
from services.evaluation_import_service import EvaluationImportService
from services.import_models import ImportPreview, ImportRole


@pytest.fixture
def service(db_session):
    return EvaluationImportService(db_session)


def _cases(db_session, evaluation):
    return (
        db_session.query(CaseEvaluation)
        .filter(CaseEvaluation.evaluation_id == evaluation.id)
        .order_by(CaseEvaluation.case_number)
        .all()
    )


class TestPreview:
    def test_jane_doe_preview(self, service, users, importer, jane_doe_workbook):
        preview = service.preview_import(jane_doe_workbook, "team.xlsx", importer(users["sam"]), ImportRole.COACH)

        assert preview.coach_ownership_warning is None
        assert preview.conflicts == []
        assert preview.missing_coaches == []
        assert preview.errors == []
        assert [engineer.name for engineer in preview.engineers] == ["Jane Doe"]
        case = preview.engineers[0].evaluations[0].cases[0]
        assert preview.engineers[0].evaluations[0].quarter == "Q1"
        assert case.case_number == 12
        assert case.month == "Jan"
        assert case.parameters["KB Potential"] is True
        assert case.parameters["Article Linked"] is False

    def test_preview_writes_nothing_and_repeats(self, db_session, service, users, importer, jane_doe_workbook):
        user = importer(users["admin"])

        first = service.preview_import(jane_doe_workbook, "team.xlsx", user, ImportRole.ADMIN)
        second = service.preview_import(jane_doe_workbook, "team.xlsx", user, ImportRole.ADMIN)

        assert first.to_dict() == second.to_dict()
        assert db_session.query(Engineer).count() == 0
        assert db_session.query(Evaluation).count() == 0

    def test_ownership_gate_short_circuits(self, service, users, importer, jane_doe_workbook):
        preview = service.preview_import(jane_doe_workbook, "team.xlsx", importer(users["pat"]), "coach")

        assert preview.coach_ownership_warning.should_block_import is True
        assert preview.conflicts == []
        assert preview.missing_coaches == []

    def test_unreadable_workbook_is_fatal(self, service, users, importer):
        with pytest.raises(WorkbookReadError):
            service.preview_import(b"garbage", "team.xlsx", importer(users["sam"]))


class TestCommit:
    def test_jane_doe_commit(self, db_session, service, users, importer, jane_doe_workbook):
        user = importer(users["sam"])
        preview = service.preview_import(jane_doe_workbook, "team.xlsx", user, ImportRole.COACH)

        result = service.commit_import(preview, 2024, {}, user, ImportRole.COACH)

        assert result.success is True
        assert (result.imported_engineers, result.imported_evaluations, result.imported_cases) == (1, 1, 1)
        engineer = EngineerRepository(db_session).find_by_name("Jane Doe")
        assignment = CoachAssignmentService(db_session).get_current_assignment(engineer.id)
        assert assignment.coach_user_id == users["sam"].id
        evaluation = db_session.query(Evaluation).one()
        assert evaluation.evaluation_date == date(2024, 1, 1)
        assert evaluation.coach_user_id == users["sam"].id
        slots = _cases(db_session, evaluation)
        assert len(slots) == 7
        assert slots[0].case_number == 1
        assert slots[0].case_id == "12"
        assert slots[0].kb_potential is True
        assert slots[0].article_linked is False
        assert slots[0].notes == "Good triage"
        assert all(slot.case_id is None for slot in slots[1:])

    def test_same_month_in_second_workbook_is_an_error(
        self, db_session, service, users, importer, workbook_builder, jane_doe_workbook
    ):
        user = importer(users["sam"])
        first = service.preview_import(jane_doe_workbook, "team.xlsx", user)
        service.commit_import(first, 2024, {}, user)

        second_workbook = (
            workbook_builder()
            .add_sheet(
                "Jane",
                engineer="Jane Doe",
                coach="Sam Lee",
                quarters=[("Q1", [(40, "January", None, ["no"])])],
            )
            .to_bytes()
        )
        second = service.preview_import(second_workbook, "later.xlsx", user)
        result = service.commit_import(second, 2024, {}, user)

        assert result.success is False
        assert result.imported_evaluations == 0
        assert len(result.errors) == 1
        assert "Jane Doe" in result.errors[0]
        assert "Evaluation already exists for this engineer and month" in result.errors[0]
        assert db_session.query(Evaluation).count() == 1

    def test_blocked_preview_is_refused(self, db_session, service, users, importer, jane_doe_workbook):
        user = importer(users["pat"])
        preview = service.preview_import(jane_doe_workbook, "team.xlsx", user, ImportRole.COACH)

        result = service.commit_import(preview, 2024, {}, user, ImportRole.COACH)

        assert result.success is False
        assert result.errors == ["Import blocked: workbook belongs to coach Sam Lee"]
        assert db_session.query(Engineer).count() == 0

    def test_preview_round_trip_before_commit(self, db_session, service, users, importer, jane_doe_workbook):
        user = importer(users["admin"])
        preview = service.preview_import(jane_doe_workbook, "team.xlsx", user, ImportRole.ADMIN)

        restored = ImportPreview.from_dict(preview.to_dict())
        result = service.commit_import(restored, 2023, {"Jane Doe": users["pat"].id}, user, ImportRole.ADMIN)

        assert result.success is True
        assert db_session.query(CoachAssignment).one().coach_user_id == users["pat"].id
        assert db_session.query(Evaluation).one().evaluation_date == date(2023, 1, 1)

    def test_skip_conflict_leaves_engineer_untouched(
        self, db_session, service, users, importer, jane_doe_workbook
    ):
        engineer = EngineerRepository(db_session).create("Jane Doe")
        CoachAssignmentService(db_session).create_assignment(engineer.id, users["pat"].id)
        user = importer(users["sam"])
        preview = service.preview_import(jane_doe_workbook, "team.xlsx", user, ImportRole.COACH)

        result = service.commit_import(preview, 2024, {}, user, ImportRole.COACH)

        assert result.skipped_engineers == ["Jane Doe"]
        assert result.success is True
        assert db_session.query(Evaluation).count() == 0
