"""Tests for sheet layout registration."""

import pytest

from config.sheet_layout import QUARTERLY_TEMPLATE, SheetLayout, get_sheet_layout, register_sheet_layout


def test_default_layout_is_quarterly_template():
    layout = get_sheet_layout()

    assert layout is QUARTERLY_TEMPLATE
    assert list(layout.parameter_columns) == [2, 3, 4, 5, 6, 7, 8]
    assert layout.coach_name_columns == (6, 7, 8)
    assert layout.engineer_name_columns == (2, 3, 4)


def test_layout_patterns():
    layout = get_sheet_layout("quarterly")

    assert layout.quarter_regex.search("q3 FY24").group(0) == "q3"
    assert layout.quarter_regex.search("Q5") is None
    assert layout.person_name_regex.search("Sam Lee")
    assert not layout.person_name_regex.search("Sam")
    assert layout.placeholder_sheet_regex.search("Engineer 7")


def test_registered_layout_is_returned_by_name():
    register_sheet_layout(SheetLayout(name="monthly", month_column=11))

    assert get_sheet_layout("monthly").month_column == 11


def test_unknown_layout():
    with pytest.raises(ValueError, match="Unknown sheet layout"):
        get_sheet_layout("does-not-exist")
