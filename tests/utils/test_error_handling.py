"""Tests for error handling utilities."""

import logging
from unittest.mock import patch

from utils.error_handling import ErrorCollector, format_error_message, log_exception, timed


class TestFormatErrorMessage:
    """Tests for format_error_message function."""

    def test_basic_error_message(self):
        assert format_error_message(ValueError("Invalid value")) == "Invalid value"

    def test_with_context(self):
        result = format_error_message(ValueError("Empty sheet"), context="Sheet Jane")
        assert result == "Sheet Jane: Empty sheet"

    def test_with_type(self):
        result = format_error_message(ValueError("Invalid value"), context="Loading", include_type=True)
        assert result == "Loading: ValueError: Invalid value"

    def test_empty_error_message_uses_type(self):
        assert format_error_message(ValueError("")) == "ValueError"
        assert format_error_message(Exception("None"), include_type=True) == "Exception"


class TestLogException:
    """Tests for log_exception function."""

    def test_logs_error_with_context(self):
        error = ValueError("Test error")

        with patch("utils.error_handling.logger") as mock_logger:
            log_exception(error, "Test context", extra={"file": "team.xlsx"}, level=logging.WARNING)

            mock_logger.log.assert_called_once()
            call_args = mock_logger.log.call_args
            assert call_args[0][0] == logging.WARNING
            assert call_args[0][1] == "Test context: Test error"
            assert call_args[1]["exc_info"] is True
            assert call_args[1]["extra"]["error_type"] == "ValueError"
            assert call_args[1]["extra"]["file"] == "team.xlsx"


class TestErrorCollector:
    def test_collects_and_continues(self):
        collector = ErrorCollector("workbook parse")
        processed = []

        for title in ["Jane", "Blank", "Max"]:
            with collector.catch(f"Sheet {title}"):
                if title == "Blank":
                    raise ValueError("Empty sheet")
                processed.append(title)

        assert processed == ["Jane", "Max"]
        assert collector.errors == ["Sheet Blank: Empty sheet"]
        assert collector.has_errors
        assert collector.get_summary() == "workbook parse completed with 1 error(s)"

    def test_clean_run_summary(self):
        collector = ErrorCollector("commit")

        with collector.catch("Engineer Jane Doe"):
            pass

        assert not collector.has_errors
        assert collector.get_summary() == "commit completed successfully"

    def test_keyboard_interrupt_is_not_swallowed(self):
        collector = ErrorCollector("parse")

        try:
            with collector.catch("Sheet Jane"):
                raise KeyboardInterrupt
        except KeyboardInterrupt:
            pass
        else:
            raise AssertionError("KeyboardInterrupt was swallowed")

        assert collector.errors == []


def test_timed_passes_through():
    @timed
    def add(a, b):
        return a + b

    assert add(2, 3) == 5
    assert add.__name__ == "add"
