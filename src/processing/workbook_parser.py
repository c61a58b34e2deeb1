"""Workbook-level parsing for evaluation imports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Union

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from config.sheet_layout import SheetLayout, get_sheet_layout
from utils.error_handling import ErrorCollector, timed
from utils.names import normalize_name

from .engineer_sheet_parser import EngineerSheetParser
from .import_errors import WorkbookReadError
from .parsed_models import ParsedEngineer, PreviewMetadata
from .sheet_grid import sheet_to_grid

logger = logging.getLogger(__name__)

WorkbookSource = Union[bytes, bytearray, str, Path, BinaryIO]


@dataclass
class ParsedWorkbook:
    engineers: List[ParsedEngineer] = field(default_factory=list)
    metadata: PreviewMetadata = field(default_factory=lambda: PreviewMetadata(file_name=""))
    errors: List[str] = field(default_factory=list)


def open_workbook(source: WorkbookSource) -> Workbook:
    """Load a workbook from bytes, a path or a binary stream.

    Cached values are read instead of formulas and rich text is preserved
    so it can be flattened per cell.

    Raises:
        WorkbookReadError: the source is not a readable xlsx workbook
    """
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(source)
    elif isinstance(source, Path):
        source = str(source)

    try:
        return load_workbook(source, data_only=True, rich_text=True)
    except Exception as e:
        raise WorkbookReadError(f"Failed to parse Excel file: {e}") from e


def summarize_engineers(engineers: Iterable[ParsedEngineer], file_name: str) -> PreviewMetadata:
    """Workbook metadata computed from the parsed engineers.

    ``coach_name`` is only set when every sheet that names a coach names the
    same one; all distinct names are kept in ``coach_names``.
    """
    coach_names: List[str] = []
    seen = set()
    quarters = set()
    total_cases = 0
    for engineer in engineers:
        total_cases += engineer.case_count
        quarters.update(evaluation.quarter for evaluation in engineer.evaluations)
        key = normalize_name(engineer.coach_name)
        if key and key not in seen:
            seen.add(key)
            coach_names.append(engineer.coach_name)

    if len(coach_names) > 1:
        logger.warning(
            f"Workbook '{file_name}' names {len(coach_names)} different coaches: {', '.join(coach_names)}",
            extra={"event": "import.coach_mismatch", "file": file_name, "coach_names": coach_names},
        )

    return PreviewMetadata(
        file_name=file_name,
        coach_name=coach_names[0] if len(coach_names) == 1 else None,
        coach_names=coach_names,
        total_cases=total_cases,
        quarters_found=sorted(quarters),
    )


class EvaluationWorkbookParser:
    """Parses every engineer sheet of a coaching workbook."""

    def __init__(self, layout: Optional[SheetLayout] = None):
        self.layout = layout or get_sheet_layout()
        self.sheet_parser = EngineerSheetParser(self.layout)

    def engineer_sheets(self, workbook: Workbook) -> List[Worksheet]:
        """Worksheets holding engineer data (summary and placeholder tabs skipped)."""
        placeholder = self.layout.placeholder_sheet_regex
        sheets = []
        for index, sheet in enumerate(workbook.worksheets):
            if index < self.layout.summary_sheet_count:
                continue
            if placeholder.search(sheet.title):
                continue
            sheets.append(sheet)
        return sheets

    @timed
    def parse(self, source: WorkbookSource, file_name: str) -> ParsedWorkbook:
        workbook = open_workbook(source)
        sheets = self.engineer_sheets(workbook)
        logger.info(f"Processing {len(sheets)} engineer sheets from '{file_name}'")

        result = ParsedWorkbook()
        collector = ErrorCollector("workbook parse")
        for sheet in sheets:
            with collector.catch(f"Sheet {sheet.title}"):
                grid = sheet_to_grid(sheet, self.layout.min_columns)
                engineer = self.sheet_parser.parse_sheet(sheet.title, grid)
                if engineer.evaluations:
                    result.engineers.append(engineer)
                else:
                    logger.info(f"Sheet '{sheet.title}' has no case rows; skipped")

        result.errors.extend(collector.errors)
        logger.info(f"{collector.get_summary()} for '{file_name}': {len(result.engineers)} engineers")
        result.metadata = summarize_engineers(result.engineers, file_name)
        return result


__all__ = [
    "WorkbookSource",
    "ParsedWorkbook",
    "open_workbook",
    "summarize_engineers",
    "EvaluationWorkbookParser",
]
