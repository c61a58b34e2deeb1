"""Parser for a single engineer worksheet.

Works on the dense grid produced by :func:`processing.sheet_grid.sheet_to_grid`
and reads cell positions exclusively from a :class:`config.sheet_layout.SheetLayout`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional

import pandas as pd

from config.case_fields import MONTH_ABBREVIATIONS
from config.sheet_layout import SheetLayout, get_sheet_layout

from .import_errors import SheetParseError
from .parsed_models import CaseNumber, ParsedCase, ParsedEngineer, QuarterEvaluation
from .sheet_grid import cell_text, cell_value

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({"true", "1", "yes", "y"})
FALSE_VALUES = frozenset({"false", "0", "no", "n"})


@dataclass(frozen=True)
class ParameterHeader:
    name: str
    column: int


@dataclass(frozen=True)
class QuarterSegment:
    """Inclusive row range that starts at a quarter marker."""

    name: str
    start_row: int
    end_row: int


@dataclass(frozen=True)
class SheetMetadata:
    engineer_name: Optional[str] = None
    coach_name: Optional[str] = None


def parse_boolean(value: Any) -> Optional[bool]:
    """Tri-state parse of a parameter cell; never raises."""
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        text = str(value).strip().lower()
    except Exception:
        return None
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return None


def parse_case_number(value: Any) -> Optional[CaseNumber]:
    """Return the numeric case number in ``value`` or None for non-case rows.

    Zero and blank cells do not mark a case row. Integral floats come back
    as ints so that case ids read ``"12"`` rather than ``"12.0"``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            number = int(number)
    if number == 0:
        return None
    return number


def month_label(value: Any) -> Optional[str]:
    """Month cell as a label; native date cells become their English abbreviation."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return MONTH_ABBREVIATIONS[value.month - 1]
    text = str(value).strip()
    return text or None


class EngineerSheetParser:
    """Turns one sheet grid into a :class:`ParsedEngineer`."""

    def __init__(self, layout: Optional[SheetLayout] = None):
        self.layout = layout or get_sheet_layout()

    def extract_metadata(self, grid: pd.DataFrame) -> SheetMetadata:
        """Engineer and coach names from the metadata row, if they look like names."""
        row = self.layout.metadata_row
        return SheetMetadata(
            engineer_name=self._first_person_name(grid, row, self.layout.engineer_name_columns),
            coach_name=self._first_person_name(grid, row, self.layout.coach_name_columns),
        )

    def _first_person_name(self, grid: pd.DataFrame, row: int, columns) -> Optional[str]:
        pattern = self.layout.person_name_regex
        for column in columns:
            text = cell_text(grid, row, column)
            if text and pattern.search(text):
                return text
        return None

    def extract_parameter_headers(self, grid: pd.DataFrame) -> List[ParameterHeader]:
        headers = []
        for column in self.layout.parameter_columns:
            text = cell_text(grid, self.layout.header_row, column)
            if text:
                headers.append(ParameterHeader(name=text, column=column))
        return headers

    def find_quarters(self, grid: pd.DataFrame) -> List[QuarterSegment]:
        """Quarter segments in physical sheet order."""
        pattern = self.layout.quarter_regex
        markers = []
        for row in range(len(grid.index)):
            value = cell_value(grid, row, self.layout.quarter_column)
            if value is None:
                continue
            match = pattern.search(str(value))
            if match:
                markers.append((match.group(0).upper(), row))

        last_row = len(grid.index) - 1
        segments = []
        for index, (name, start_row) in enumerate(markers):
            end_row = markers[index + 1][1] - 1 if index + 1 < len(markers) else last_row
            segments.append(QuarterSegment(name=name, start_row=start_row, end_row=end_row))
        return segments

    def parse_cases(
        self,
        grid: pd.DataFrame,
        segment: QuarterSegment,
        headers: List[ParameterHeader],
    ) -> List[ParsedCase]:
        layout = self.layout
        cases = []
        for row in range(segment.start_row, segment.end_row + 1):
            case_number = parse_case_number(cell_value(grid, row, layout.case_number_column))
            if case_number is None:
                continue
            cases.append(
                ParsedCase(
                    case_number=case_number,
                    quarter=segment.name,
                    month=month_label(cell_value(grid, row, layout.month_column)),
                    notes=cell_text(grid, row, layout.notes_column),
                    parameters={
                        header.name: parse_boolean(cell_value(grid, row, header.column))
                        for header in headers
                    },
                )
            )
        return cases

    def parse_sheet(self, title: str, grid: pd.DataFrame) -> ParsedEngineer:
        """Parse a sheet grid; quarters without case rows are left out."""
        if grid.empty:
            raise SheetParseError("Empty sheet")

        metadata = self.extract_metadata(grid)
        headers = self.extract_parameter_headers(grid)
        engineer = ParsedEngineer(
            name=metadata.engineer_name or title,
            coach_name=metadata.coach_name,
        )

        for segment in self.find_quarters(grid):
            cases = self.parse_cases(grid, segment, headers)
            if cases:
                engineer.evaluations.append(QuarterEvaluation(quarter=segment.name, cases=cases))

        logger.debug(
            f"Parsed sheet '{title}': {engineer.case_count} cases in {len(engineer.evaluations)} quarters",
            extra={"event": "import.sheet.parsed", "sheet": title, "engineer": engineer.name},
        )
        return engineer


__all__ = [
    "TRUE_VALUES",
    "FALSE_VALUES",
    "ParameterHeader",
    "QuarterSegment",
    "SheetMetadata",
    "parse_boolean",
    "parse_case_number",
    "month_label",
    "EngineerSheetParser",
]
