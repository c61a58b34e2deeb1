"""Worksheet to dense grid conversion.

openpyxl exposes cells lazily and may hand back rich-text runs or error
codes; the parser wants a rectangular block of plain scalars addressable by
0-based (row, column) taken from the sheet's top-left corner.
"""

from __future__ import annotations

from typing import Any, Optional

import pandas as pd
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.worksheet.worksheet import Worksheet

DEFAULT_MIN_COLUMNS = 15


def _flatten_text_runs(runs) -> str:
    parts = []
    for run in runs:
        if isinstance(run, TextBlock):
            parts.append(run.text or "")
        elif run is not None:
            parts.append(str(getattr(run, "text", run)))
    return "".join(parts)


def normalize_cell_value(cell) -> Any:
    """Return a plain scalar for ``cell`` or ``None`` when it has no usable value."""
    if cell is None or getattr(cell, "data_type", None) == "e":
        return None

    value = cell.value
    if isinstance(value, CellRichText):
        return _flatten_text_runs(value)
    if isinstance(value, TextBlock):
        return value.text
    if isinstance(value, (list, tuple)):
        return _flatten_text_runs(value)
    return value


def sheet_to_grid(worksheet: Worksheet, min_columns: int = DEFAULT_MIN_COLUMNS) -> pd.DataFrame:
    """Materialize ``worksheet`` as an object DataFrame indexed from the A1 corner.

    At least ``min_columns`` columns are present so fixed column positions
    can always be read. A sheet without any values yields an empty frame.
    """
    max_row = worksheet.max_row or 0
    max_column = worksheet.max_column or 0
    width = max(max_column, min_columns)

    rows = []
    has_values = False
    if max_row and max_column:
        for row in worksheet.iter_rows(min_row=1, max_row=max_row, min_col=1, max_col=width):
            values = [normalize_cell_value(cell) for cell in row]
            values.extend([None] * (width - len(values)))
            has_values = has_values or any(value is not None for value in values)
            rows.append(values)

    if not has_values:
        return pd.DataFrame(columns=range(width), dtype=object)

    return pd.DataFrame(rows, columns=range(width), dtype=object)


def cell_value(grid: pd.DataFrame, row: int, column: int) -> Optional[Any]:
    """Read one grid value; out-of-range positions and NaN read as ``None``."""
    if row < 0 or column < 0 or row >= len(grid.index) or column >= len(grid.columns):
        return None
    value = grid.iat[row, column]
    if value is None:
        return None
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    return value


def cell_text(grid: pd.DataFrame, row: int, column: int) -> Optional[str]:
    """Read one grid value as trimmed text; blank text reads as ``None``."""
    value = cell_value(grid, row, column)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "DEFAULT_MIN_COLUMNS",
    "normalize_cell_value",
    "sheet_to_grid",
    "cell_value",
    "cell_text",
]
