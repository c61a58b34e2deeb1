"""Helpers for comparing human-entered person names."""

import re
from typing import Iterable, Optional, TypeVar

_WHITESPACE = re.compile(r"\s+")

T = TypeVar("T")


def normalize_name(name: Optional[str]) -> str:
    """Trim, collapse inner whitespace and casefold a name for comparison."""
    return _WHITESPACE.sub(" ", (name or "").strip()).casefold()


def names_match(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive equality of two names; blanks never match."""
    left_key = normalize_name(left)
    return bool(left_key) and left_key == normalize_name(right)


def find_by_name(items: Iterable[T], name: Optional[str], attr: str = "name") -> Optional[T]:
    """Return the first item whose ``attr`` matches ``name``."""
    for item in items:
        if names_match(getattr(item, attr, None), name):
            return item
    return None
