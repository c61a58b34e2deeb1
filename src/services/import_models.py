"""Shared models for the evaluation workbook import workflow.

Everything here is ephemeral: previews and results carry names and counts,
never database ids, and round-trip through plain JSON-compatible dicts so a
preview can be handed to the caller and sent back with coach selections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from processing.parsed_models import (
    ParsedCase,
    ParsedEngineer,
    PreviewMetadata,
    QuarterEvaluation,
)


class ImportRole(str, Enum):
    COACH = "coach"
    LEAD = "lead"
    ADMIN = "admin"


class ConflictAction(str, Enum):
    SKIP = "skip"
    REASSIGN = "reassign"
    MANUAL = "manual"


class SuggestedAction(str, Enum):
    ASSIGN_TO_IMPORTER = "assign_to_importer"
    MANUAL_SELECT = "manual_select"


def normalize_import_role(value: Union[str, ImportRole, None]) -> ImportRole:
    """Normalize a string/enum to an ImportRole (defaults to coach)."""
    if isinstance(value, ImportRole):
        return value
    if not value:
        return ImportRole.COACH
    try:
        return ImportRole(value.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown import role '{value}'") from None


@dataclass(frozen=True)
class ImportingUser:
    """Already-authenticated caller identity with role flags."""

    id: int
    name: str
    is_admin: bool = False
    is_coach: bool = False
    is_lead: bool = False
    is_manager: bool = False

    @classmethod
    def from_user(cls, user: Any) -> "ImportingUser":
        return cls(
            id=user.id,
            name=user.name,
            is_admin=bool(user.is_admin),
            is_coach=bool(user.is_coach),
            is_lead=bool(user.is_lead),
            is_manager=bool(user.is_manager),
        )


def resolve_import_role(
    user: ImportingUser, requested: Union[str, ImportRole, None] = None
) -> ImportRole:
    """Derive the import role the way the upload endpoint does.

    Admins and managers import as whatever role they ask for (admin by
    default), leads import as lead, everyone else as coach.
    """
    if user.is_admin or user.is_manager:
        return normalize_import_role(requested) if requested else ImportRole.ADMIN
    if user.is_lead:
        return ImportRole.LEAD
    return ImportRole.COACH


@dataclass
class CoachConflict:
    engineer_name: str
    current_coach: str
    excel_coach: Optional[str]
    action: ConflictAction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "engineer_name": self.engineer_name,
            "current_coach": self.current_coach,
            "excel_coach": self.excel_coach,
            "action": self.action.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CoachConflict":
        return cls(
            engineer_name=data["engineer_name"],
            current_coach=data["current_coach"],
            excel_coach=data.get("excel_coach"),
            action=ConflictAction(data["action"]),
        )


@dataclass
class MissingCoach:
    engineer_name: str
    excel_coach_name: Optional[str]
    suggested_action: SuggestedAction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "engineer_name": self.engineer_name,
            "excel_coach_name": self.excel_coach_name,
            "suggested_action": self.suggested_action.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MissingCoach":
        return cls(
            engineer_name=data["engineer_name"],
            excel_coach_name=data.get("excel_coach_name"),
            suggested_action=SuggestedAction(data["suggested_action"]),
        )


@dataclass
class CoachOwnershipWarning:
    detected_coach: str
    importing_user: str
    should_block_import: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detected_coach": self.detected_coach,
            "importing_user": self.importing_user,
            "should_block_import": self.should_block_import,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CoachOwnershipWarning":
        return cls(
            detected_coach=data["detected_coach"],
            importing_user=data["importing_user"],
            should_block_import=bool(data["should_block_import"]),
        )


@dataclass
class ImportPreview:
    """Parsed workbook plus reconciliation findings; nothing persisted yet."""

    engineers: List[ParsedEngineer]
    metadata: PreviewMetadata
    conflicts: List[CoachConflict] = field(default_factory=list)
    missing_coaches: List[MissingCoach] = field(default_factory=list)
    coach_ownership_warning: Optional[CoachOwnershipWarning] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_blocked(self) -> bool:
        warning = self.coach_ownership_warning
        return bool(warning and warning.should_block_import)

    def conflict_for(self, engineer_name: str) -> Optional[CoachConflict]:
        for conflict in self.conflicts:
            if conflict.engineer_name == engineer_name:
                return conflict
        return None

    def to_dict(self) -> Dict[str, Any]:
        warning = self.coach_ownership_warning
        return {
            "engineers": [engineer.to_dict() for engineer in self.engineers],
            "conflicts": [conflict.to_dict() for conflict in self.conflicts],
            "metadata": self.metadata.to_dict(),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "missing_coaches": [missing.to_dict() for missing in self.missing_coaches],
            "coach_ownership_warning": warning.to_dict() if warning else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ImportPreview":
        warning = data.get("coach_ownership_warning")
        return cls(
            engineers=[ParsedEngineer.from_dict(item) for item in data.get("engineers") or []],
            metadata=PreviewMetadata.from_dict(data.get("metadata") or {}),
            conflicts=[CoachConflict.from_dict(item) for item in data.get("conflicts") or []],
            missing_coaches=[MissingCoach.from_dict(item) for item in data.get("missing_coaches") or []],
            coach_ownership_warning=CoachOwnershipWarning.from_dict(warning) if warning else None,
            errors=list(data.get("errors") or []),
            warnings=list(data.get("warnings") or []),
        )


@dataclass
class ImportResult:
    """Summary of what a commit wrote; the database rows are the record."""

    success: bool = False
    imported_engineers: int = 0
    imported_evaluations: int = 0
    imported_cases: int = 0
    skipped_engineers: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "imported_engineers": self.imported_engineers,
            "imported_evaluations": self.imported_evaluations,
            "imported_cases": self.imported_cases,
            "skipped_engineers": list(self.skipped_engineers),
            "errors": list(self.errors),
        }


__all__ = [
    "ImportRole",
    "ConflictAction",
    "SuggestedAction",
    "normalize_import_role",
    "resolve_import_role",
    "ImportingUser",
    "ParsedCase",
    "QuarterEvaluation",
    "ParsedEngineer",
    "CoachConflict",
    "MissingCoach",
    "CoachOwnershipWarning",
    "PreviewMetadata",
    "ImportPreview",
    "ImportResult",
]
