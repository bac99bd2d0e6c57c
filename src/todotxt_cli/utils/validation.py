"""Field validation for todo.txt task data.

These are the patterns a task form applies before handing a ``TaskData``
record to the core. ``Task.create`` and ``Task.update`` run the same checks
unless told not to, so garbage never reaches a serialised line.
"""

import logging
import re
from typing import Any, List

from .datetime import parse_date_or_none

logger = logging.getLogger(__name__)


PROJECT_REGEXP = re.compile(r"^[^+\s]+$")
CONTEXT_REGEXP = PROJECT_REGEXP
PRIORITY_REGEXP = re.compile(r"^[A-Z]$")
DATESTRING_REGEXP = re.compile(r"^\d{4}-(0\d|1[0-2])-([0-2]\d|3[01])$")
RECURRENCE_REGEXP = re.compile(r"^([1-7])(d|w|m)$")


class TaskValidationError(ValueError):
    """Exception raised when a task field fails its pattern."""

    def __init__(self, message: str, field_name: str, value: Any, suggestions: List[str] = None):
        self.field_name = field_name
        self.value = value
        self.suggestions = suggestions or []
        super().__init__(message)


def is_valid_tag(value: str) -> bool:
    """Check a project or context name (without its ``+``/``@`` sigil)."""
    return bool(PROJECT_REGEXP.match(value))


def is_valid_priority(value: str) -> bool:
    return bool(PRIORITY_REGEXP.match(value))


def is_valid_date_string(value: str) -> bool:
    return bool(DATESTRING_REGEXP.match(value))


def is_valid_recurrence(value: str) -> bool:
    return bool(RECURRENCE_REGEXP.match(value))


def is_plain_text(text: str) -> bool:
    """Check that ``text`` parses back as nothing but free text.

    Text holding a leading completion marker, priority or date, or a tag the
    line parser recognises, would turn into fields once the task is saved
    and read again.
    """
    from ..parser import TodoTxtFormat
    from ..todo import Task

    normalized = " ".join(text.split())
    return TodoTxtFormat.parse(normalized) == Task(text=normalized)


def text_error(text: str, inline_tags: bool = False):
    """Return a ``TaskValidationError`` for unstorable task text, or None.

    Args:
        text: Task text as typed
        inline_tags: Whether tags in the text are meant to be picked up as
            fields, as on task creation. Leading completion markers and dates
            are rejected either way since a new task sets those itself.
    """
    from ..parser import TodoTxtFormat

    if inline_tags:
        parsed = TodoTxtFormat.parse(text)
        if parsed.complete or parsed.creation_date is not None:
            return TaskValidationError(
                f"Task text cannot start with a completion marker or a date: {text!r}",
                "text", text,
                ["Remove the leading 'x YYYY-MM-DD' or date from the text"],
            )
        text = parsed.text

    if not is_plain_text(text):
        return TaskValidationError(
            f"Task text contains todo.txt markers or tags: {text!r}", "text", text,
            ["Set priority, project, contexts, due date and recurrence in their own fields",
             "Do not start the text with '(X)' or a date"],
        )
    return None


def collect_task_data_errors(data, inline_tags: bool = False) -> List[TaskValidationError]:
    """Check every field of a ``TaskData`` record.

    Empty strings mean "unset" and are always accepted, except for ``text``
    which is required.

    Args:
        data: A ``TaskData`` record
        inline_tags: Accept tags inside the text (see ``text_error``)

    Returns:
        One ``TaskValidationError`` per offending field, in field order
    """
    errors = []

    if not data.text or not data.text.strip():
        errors.append(TaskValidationError(
            "Task text is required", "text", data.text,
            ["Add a task description"],
        ))
    else:
        error = text_error(data.text, inline_tags)
        if error is not None:
            errors.append(error)

    if data.project and not is_valid_tag(data.project):
        errors.append(TaskValidationError(
            f"Invalid project: {data.project!r}", "project", data.project,
            ["Project names cannot contain spaces or '+'"],
        ))

    for context in (data.contexts or "").split():
        if not is_valid_tag(context):
            errors.append(TaskValidationError(
                f"Invalid context: {context!r}", "contexts", context,
                ["Context names cannot contain '+'"],
            ))

    if data.priority and not is_valid_priority(data.priority):
        errors.append(TaskValidationError(
            f"Invalid priority: {data.priority!r}", "priority", data.priority,
            ["Use a single uppercase letter A-Z"],
        ))

    if data.due_date and (not is_valid_date_string(data.due_date)
                          or parse_date_or_none(data.due_date) is None):
        errors.append(TaskValidationError(
            f"Invalid due date: {data.due_date!r}", "due_date", data.due_date,
            ["Use the YYYY-MM-DD format"],
        ))

    if data.recurrence and not is_valid_recurrence(data.recurrence):
        errors.append(TaskValidationError(
            f"Invalid recurrence: {data.recurrence!r}", "recurrence", data.recurrence,
            ["Use <amount><unit> with amount 1-7 and unit d, w or m, e.g. 2w"],
        ))

    return errors


def validate_task_data(data, inline_tags: bool = False) -> None:
    """Raise on the first invalid field of a ``TaskData`` record.

    Raises:
        TaskValidationError: If any field violates its pattern
    """
    errors = collect_task_data_errors(data, inline_tags)
    if errors:
        logger.debug("Rejected task data: %s", "; ".join(str(e) for e in errors))
        raise errors[0]
