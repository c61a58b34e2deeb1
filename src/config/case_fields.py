"""Case field vocabulary shared by the import parser and committer."""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

CASE_FIELDS: Tuple[str, ...] = (
    "kb_potential",
    "article_linked",
    "article_improved",
    "improvement_opportunity",
    "article_created",
    "create_opportunity",
    "relevant_link",
)

# Ordered (substring, field) pairs. Full names are listed before the short
# fallbacks so that "createopportunity" is not swallowed by "opportunity".
PARAMETER_FIELD_MATCHERS: Tuple[Tuple[str, str], ...] = (
    ("kbpotential", "kb_potential"),
    ("articlelinked", "article_linked"),
    ("articleimproved", "article_improved"),
    ("improvementopportunity", "improvement_opportunity"),
    ("articlecreated", "article_created"),
    ("createopportunity", "create_opportunity"),
    ("relevantlink", "relevant_link"),
    ("potential", "kb_potential"),
    ("linked", "article_linked"),
    ("improved", "article_improved"),
    ("opportunity", "improvement_opportunity"),
    ("created", "article_created"),
    ("relevant", "relevant_link"),
)

DEFAULT_CASE_SLOTS = 7

# Coach selection sentinels sent back with a preview.
KEEP_CURRENT_COACH = -1
REASSIGN_TO_SHEET_COACH = -2

UNKNOWN_MONTH = "Unknown"

MONTH_NUMBERS: Dict[str, int] = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

MONTH_ABBREVIATIONS: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_NON_LETTERS = re.compile(r"[^a-z]")


def normalize_parameter_name(name: str) -> str:
    """Lower-case a header and strip everything that is not a letter."""
    return _NON_LETTERS.sub("", (name or "").lower())


def field_for_parameter(name: str) -> Optional[str]:
    """Map a free-text parameter header to a case field, or None."""
    normalized = normalize_parameter_name(name)
    if not normalized:
        return None
    for needle, field in PARAMETER_FIELD_MATCHERS:
        if needle in normalized:
            return field
    return None


def month_number(label: Optional[str]) -> Optional[int]:
    """Resolve an English month label (or 1-12) to its number."""
    if not label:
        return None
    key = str(label).strip().lower()
    if key in MONTH_NUMBERS:
        return MONTH_NUMBERS[key]
    if key.isdigit() and 1 <= int(key) <= 12:
        return int(key)
    return None


__all__ = [
    "CASE_FIELDS",
    "PARAMETER_FIELD_MATCHERS",
    "DEFAULT_CASE_SLOTS",
    "KEEP_CURRENT_COACH",
    "REASSIGN_TO_SHEET_COACH",
    "UNKNOWN_MONTH",
    "MONTH_NUMBERS",
    "MONTH_ABBREVIATIONS",
    "normalize_parameter_name",
    "field_for_parameter",
    "month_number",
]
