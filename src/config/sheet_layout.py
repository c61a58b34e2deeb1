"""Sheet layout definitions for coaching evaluation workbooks.

A ``SheetLayout`` captures every fixed row/column position the parser relies
on. Alternate spreadsheet templates are supported by registering another
layout; nothing in the reconciliation or commit code reads cell positions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Pattern, Tuple


@dataclass(frozen=True)
class SheetLayout:
    """Cell positions (0-based) and heuristics for one workbook template."""

    name: str
    metadata_row: int = 0
    coach_name_columns: Tuple[int, ...] = (6, 7, 8)  # G, H, I
    engineer_name_columns: Tuple[int, ...] = (2, 3, 4)  # C, D, E
    header_row: int = 1
    first_parameter_column: int = 2  # C
    last_parameter_column: int = 8  # I
    quarter_column: int = 0  # A
    case_number_column: int = 1  # B
    month_column: int = 9  # J
    notes_column: int = 10  # K
    min_columns: int = 15
    summary_sheet_count: int = 1
    placeholder_sheet_pattern: str = r"Engineer\s+\d+"
    person_name_pattern: str = r"\w+\s+\w+"
    quarter_pattern: str = r"Q[1-4]"

    @property
    def parameter_columns(self) -> range:
        return range(self.first_parameter_column, self.last_parameter_column + 1)

    @property
    def person_name_regex(self) -> Pattern[str]:
        return re.compile(self.person_name_pattern)

    @property
    def quarter_regex(self) -> Pattern[str]:
        return re.compile(self.quarter_pattern, re.IGNORECASE)

    @property
    def placeholder_sheet_regex(self) -> Pattern[str]:
        return re.compile(self.placeholder_sheet_pattern, re.IGNORECASE)


QUARTERLY_TEMPLATE = SheetLayout(name="quarterly")

_LAYOUTS: Dict[str, SheetLayout] = {QUARTERLY_TEMPLATE.name: QUARTERLY_TEMPLATE}


def register_sheet_layout(layout: SheetLayout) -> None:
    """Make a layout available by name (replaces an existing registration)."""
    _LAYOUTS[layout.name] = layout


def get_sheet_layout(name: str | None = None) -> SheetLayout:
    """Return a registered layout, defaulting to the quarterly template."""
    if not name:
        return QUARTERLY_TEMPLATE
    try:
        return _LAYOUTS[name]
    except KeyError:
        raise ValueError(f"Unknown sheet layout '{name}'") from None


__all__ = [
    "SheetLayout",
    "QUARTERLY_TEMPLATE",
    "register_sheet_layout",
    "get_sheet_layout",
]
