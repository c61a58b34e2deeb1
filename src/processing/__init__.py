"""Processing module for coaching evaluation workbooks.

This module contains:
- Worksheet normalization into dense pandas grids
- The per-engineer sheet parser (metadata, parameters, quarters, cases)
- The workbook parser that turns an upload into parsed engineers
- Import models, totals, errors and structured logging helpers

Key components:
- EvaluationWorkbookParser: Parses every engineer sheet in a workbook
- EngineerSheetParser: Parses a single normalized sheet grid
"""

from .engineer_sheet_parser import EngineerSheetParser
from .workbook_parser import EvaluationWorkbookParser

__all__ = [
    "EngineerSheetParser",
    "EvaluationWorkbookParser",
]
