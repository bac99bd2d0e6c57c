"""Tests for task field validation."""

import pytest

from todotxt_cli.todo import TaskData
from todotxt_cli.utils.validation import (
    TaskValidationError, collect_task_data_errors, validate_task_data, is_plain_text,
    is_valid_tag, is_valid_priority, is_valid_date_string, is_valid_recurrence,
)


class TestPatterns:
    """Test the individual field patterns."""

    def test_tag(self):
        assert is_valid_tag("work")
        assert is_valid_tag("q3-report")
        assert not is_valid_tag("two words")
        assert not is_valid_tag("a+b")
        assert not is_valid_tag("")

    def test_priority(self):
        assert is_valid_priority("A")
        assert is_valid_priority("Z")
        assert not is_valid_priority("a")
        assert not is_valid_priority("AB")

    def test_date_string(self):
        assert is_valid_date_string("2024-12-31")
        assert is_valid_date_string("2024-00-00")  # shape only
        assert not is_valid_date_string("2024-13-01")
        assert not is_valid_date_string("2024-01-32")
        assert not is_valid_date_string("24-01-01")

    def test_recurrence(self):
        assert is_valid_recurrence("1d")
        assert is_valid_recurrence("7m")
        assert not is_valid_recurrence("8w")
        assert not is_valid_recurrence("1y")


class TestTaskDataValidation:
    """Test validation of whole TaskData records."""

    def test_empty_optional_fields_are_fine(self):
        validate_task_data(TaskData(text="Buy milk"))

    def test_all_fields_valid(self):
        data = TaskData(text="Buy milk", project="home", priority="A",
                        due_date="2024-02-29", recurrence="1w", contexts="shop errands")
        assert collect_task_data_errors(data) == []

    def test_text_required(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_task_data(TaskData(text="   "))
        assert exc_info.value.field_name == "text"

    def test_collects_every_error(self):
        data = TaskData(text="x", project="a b", priority="1", due_date="2024-02-30",
                        recurrence="9d", contexts="ok bad+ctx")
        fields = [error.field_name for error in collect_task_data_errors(data)]
        assert fields == ["project", "contexts", "priority", "due_date", "recurrence"]

    def test_raises_first_error(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_task_data(TaskData(text="x", priority="b", recurrence="0d"))
        assert exc_info.value.field_name == "priority"
        assert exc_info.value.value == "b"
        assert exc_info.value.suggestions


class TestTextValidation:
    """Test that task text cannot smuggle in todo.txt fields."""

    def test_plain_text(self):
        assert is_plain_text("Call mom (A)")
        assert is_plain_text("  Call   mom  ")
        assert not is_plain_text("(A) urgent")
        assert not is_plain_text("Call +mom")
        assert not is_plain_text("Call due:2024-05-01")
        assert not is_plain_text("x 2024-01-01 old news")

    def test_tags_rejected_by_default(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_task_data(TaskData(text="Call +mom (A)"))
        assert exc_info.value.field_name == "text"
        assert exc_info.value.suggestions

    def test_inline_tags_allowed_when_requested(self):
        data = TaskData(text="(A) Call mom +family @phone due:2024-05-01 rec:1w")
        assert collect_task_data_errors(data, inline_tags=True) == []

    def test_leading_date_rejected_with_inline_tags(self):
        errors = collect_task_data_errors(TaskData(text="2024-05-05 meeting notes"),
                                          inline_tags=True)
        assert [error.field_name for error in errors] == ["text"]
        assert "date" in str(errors[0])
