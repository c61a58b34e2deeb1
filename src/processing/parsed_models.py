"""Structures produced by parsing one engineer worksheet.

These live only for the duration of one import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

CaseNumber = Union[int, float]


@dataclass
class ParsedCase:
    case_number: CaseNumber
    quarter: str
    month: Optional[str] = None
    notes: Optional[str] = None
    parameters: Dict[str, Optional[bool]] = field(default_factory=dict)

    @property
    def case_id(self) -> str:
        """The case number as it is stored in a case slot."""
        return str(self.case_number)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "case_number": self.case_number,
            "quarter": self.quarter,
            "month": self.month,
            "notes": self.notes,
            "parameters": dict(self.parameters),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParsedCase":
        return cls(
            case_number=data["case_number"],
            quarter=data["quarter"],
            month=data.get("month"),
            notes=data.get("notes"),
            parameters=dict(data.get("parameters") or {}),
        )


@dataclass
class QuarterEvaluation:
    quarter: str
    cases: List[ParsedCase] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"quarter": self.quarter, "cases": [case.to_dict() for case in self.cases]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuarterEvaluation":
        return cls(
            quarter=data["quarter"],
            cases=[ParsedCase.from_dict(item) for item in data.get("cases") or []],
        )


@dataclass
class ParsedEngineer:
    name: str
    coach_name: Optional[str] = None
    evaluations: List[QuarterEvaluation] = field(default_factory=list)

    @property
    def cases(self) -> List[ParsedCase]:
        """All cases in sheet order across quarters."""
        return [case for evaluation in self.evaluations for case in evaluation.cases]

    @property
    def case_count(self) -> int:
        return sum(len(evaluation.cases) for evaluation in self.evaluations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "coach_name": self.coach_name,
            "evaluations": [evaluation.to_dict() for evaluation in self.evaluations],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParsedEngineer":
        return cls(
            name=data["name"],
            coach_name=data.get("coach_name"),
            evaluations=[QuarterEvaluation.from_dict(item) for item in data.get("evaluations") or []],
        )


@dataclass
class PreviewMetadata:
    file_name: str
    coach_name: Optional[str] = None  # only set when every sheet agrees
    coach_names: List[str] = field(default_factory=list)
    total_cases: int = 0
    quarters_found: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coach_name": self.coach_name,
            "coach_names": list(self.coach_names),
            "total_cases": self.total_cases,
            "quarters_found": list(self.quarters_found),
            "file_name": self.file_name,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PreviewMetadata":
        return cls(
            file_name=data.get("file_name", ""),
            coach_name=data.get("coach_name"),
            coach_names=list(data.get("coach_names") or []),
            total_cases=int(data.get("total_cases") or 0),
            quarters_found=list(data.get("quarters_found") or []),
        )


__all__ = ["CaseNumber", "ParsedCase", "QuarterEvaluation", "ParsedEngineer", "PreviewMetadata"]
