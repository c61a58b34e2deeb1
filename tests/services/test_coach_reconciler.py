"""Tests for read-only coach reconciliation."""

import pytest

from database.models import CoachAssignment, Engineer
from database.repositories import EngineerRepository, UserRepository
from processing.parsed_models import ParsedCase, ParsedEngineer, QuarterEvaluation
from processing.workbook_parser import summarize_engineers
from services.coach_assignment_service import CoachAssignmentService
from services.coach_reconciler import CoachReconciler
from services.import_models import ConflictAction, ImportPreview, ImportRole, SuggestedAction


def _engineer(name, coach=None):
    case = ParsedCase(case_number=1, quarter="Q1", month="Jan")
    return ParsedEngineer(name=name, coach_name=coach, evaluations=[QuarterEvaluation("Q1", [case])])


def make_preview(*engineers):
    return ImportPreview(engineers=list(engineers), metadata=summarize_engineers(engineers, "team.xlsx"))


@pytest.fixture
def reconciler(db_session):
    return CoachReconciler(db_session)


@pytest.fixture
def jane_with_pat(db_session, users):
    engineer = EngineerRepository(db_session).create("Jane Doe")
    CoachAssignmentService(db_session).create_assignment(engineer.id, users["pat"].id)
    return engineer


class TestOwnershipGate:
    def test_other_coach_blocks_import(self, reconciler, users, importer):
        preview = make_preview(_engineer("Jane Doe", "Sam Lee"), _engineer("Max Roe"))

        reconciler.reconcile(preview, importer(users["pat"]), ImportRole.COACH)

        warning = preview.coach_ownership_warning
        assert warning is not None
        assert warning.should_block_import is True
        assert warning.detected_coach == "Sam Lee"
        assert warning.importing_user == "Pat Kim"
        assert preview.conflicts == []
        assert preview.missing_coaches == []

    def test_own_workbook_passes_case_insensitively(self, reconciler, users, importer):
        preview = make_preview(_engineer("Jane Doe", "sam LEE"))

        reconciler.reconcile(preview, importer(users["sam"]), ImportRole.COACH)

        assert preview.coach_ownership_warning is None

    def test_any_foreign_coach_in_workbook_blocks(self, reconciler, users, importer):
        preview = make_preview(_engineer("Jane Doe", "Sam Lee"), _engineer("Max Roe", "Pat Kim"))

        reconciler.reconcile(preview, importer(users["sam"]), ImportRole.COACH)

        assert preview.is_blocked
        assert preview.coach_ownership_warning.detected_coach == "Pat Kim"

    def test_gate_only_applies_to_coach_imports(self, reconciler, users, importer):
        preview = make_preview(_engineer("Jane Doe", "Sam Lee"))

        reconciler.reconcile(preview, importer(users["admin"]), ImportRole.ADMIN)

        assert preview.coach_ownership_warning is None


class TestMissingCoaches:
    def test_unknown_coach_needs_manual_selection_for_admin(self, reconciler, users, importer):
        preview = make_preview(_engineer("Jane Doe", "Nobody Here"))

        reconciler.reconcile(preview, importer(users["admin"]), ImportRole.ADMIN)

        assert len(preview.missing_coaches) == 1
        missing = preview.missing_coaches[0]
        assert missing.engineer_name == "Jane Doe"
        assert missing.excel_coach_name == "Nobody Here"
        assert missing.suggested_action is SuggestedAction.MANUAL_SELECT

    def test_no_coach_named_suggests_importer_for_coach(self, reconciler, users, importer):
        preview = make_preview(_engineer("Jane Doe"))

        reconciler.reconcile(preview, importer(users["sam"]), ImportRole.COACH)

        assert preview.coach_ownership_warning is None
        missing = preview.missing_coaches[0]
        assert missing.excel_coach_name is None
        assert missing.suggested_action is SuggestedAction.ASSIGN_TO_IMPORTER

    def test_deleted_coach_does_not_resolve(self, db_session, reconciler, users, importer):
        UserRepository(db_session).update(users["pat"], deleted_at=users["pat"].created_at)
        preview = make_preview(_engineer("Jane Doe", "Pat Kim"))

        reconciler.reconcile(preview, importer(users["lead"]), ImportRole.LEAD)

        assert [m.excel_coach_name for m in preview.missing_coaches] == ["Pat Kim"]


class TestConflicts:
    def test_different_active_coach_needs_manual_choice(self, reconciler, users, importer, jane_with_pat):
        preview = make_preview(_engineer("jane doe", "Sam Lee"))

        reconciler.reconcile(preview, importer(users["admin"]), ImportRole.ADMIN)

        assert len(preview.conflicts) == 1
        conflict = preview.conflicts[0]
        assert conflict.engineer_name == "jane doe"
        assert conflict.current_coach == "Pat Kim"
        assert conflict.excel_coach == "Sam Lee"
        assert conflict.action is ConflictAction.MANUAL

    def test_coach_import_skips_another_coachs_engineer(self, reconciler, users, importer, jane_with_pat):
        preview = make_preview(_engineer("Jane Doe", "Sam Lee"))

        reconciler.reconcile(preview, importer(users["sam"]), ImportRole.COACH)

        assert preview.conflicts[0].action is ConflictAction.SKIP

    def test_same_coach_is_not_a_conflict(self, reconciler, users, importer, jane_with_pat):
        preview = make_preview(_engineer("Jane Doe", "Pat Kim"))

        reconciler.reconcile(preview, importer(users["pat"]), ImportRole.COACH)

        assert preview.conflicts == []
        assert preview.missing_coaches == []

    def test_new_engineer_is_not_a_conflict(self, reconciler, users, importer):
        preview = make_preview(_engineer("New Person", "Sam Lee"))

        reconciler.reconcile(preview, importer(users["sam"]), ImportRole.COACH)

        assert preview.conflicts == []


class TestLeadScope:
    def test_engineers_of_other_leads_are_dropped(self, db_session, reconciler, users, importer):
        other_lead = UserRepository(db_session).create(name="Other Lead", is_lead=True)
        engineers = EngineerRepository(db_session)
        engineers.create("Jane Doe", lead_user_id=other_lead.id)
        engineers.create("Max Roe", lead_user_id=users["lead"].id)
        engineers.create("Ana Li")
        preview = make_preview(
            _engineer("Jane Doe", "Sam Lee"), _engineer("Max Roe", "Sam Lee"), _engineer("Ana Li", "Sam Lee")
        )

        reconciler.reconcile(preview, importer(users["lead"]), ImportRole.LEAD)

        assert [engineer.name for engineer in preview.engineers] == ["Max Roe", "Ana Li"]
        assert preview.warnings == ["Skipping engineers not under your lead: Jane Doe"]
        assert preview.errors == []
        assert preview.metadata.total_cases == 2

    def test_admin_import_is_not_scoped(self, db_session, reconciler, users, importer):
        other_lead = UserRepository(db_session).create(name="Other Lead", is_lead=True)
        EngineerRepository(db_session).create("Jane Doe", lead_user_id=other_lead.id)
        preview = make_preview(_engineer("Jane Doe", "Sam Lee"))

        reconciler.reconcile(preview, importer(users["admin"]), ImportRole.ADMIN)

        assert len(preview.engineers) == 1
        assert preview.warnings == []


def test_reconcile_is_a_pure_read(db_session, reconciler, users, importer, jane_with_pat):
    def run():
        preview = make_preview(_engineer("Jane Doe", "Sam Lee"), _engineer("Max Roe", "Nobody Here"))
        reconciler.reconcile(preview, importer(users["admin"]), ImportRole.ADMIN)
        return preview

    first = run()
    second = run()

    assert first.to_dict() == second.to_dict()
    assert db_session.query(Engineer).count() == 1
    assert db_session.query(CoachAssignment).count() == 1
