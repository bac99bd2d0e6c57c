"""Task data model for the todo.txt format."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .recurring import TaskRecurrence
from .utils.datetime import add_days, date_to_string, string_to_date, today
from .utils.validation import validate_task_data

logger = logging.getLogger(__name__)


@dataclass
class TaskData:
    """Flat, string-only view of a task as edited in a form.

    An empty string means the field is unset.
    """
    text: str = ""
    project: str = ""
    priority: str = ""
    due_date: str = ""
    recurrence: str = ""
    contexts: str = ""  # space separated


@dataclass
class Task:
    """A single todo.txt task."""

    text: str = ""
    projects: List[str] = field(default_factory=list)
    contexts: List[str] = field(default_factory=list)
    priority: Optional[str] = None
    creation_date: Optional[date] = None
    due: Optional[date] = None
    recurrence: Optional[TaskRecurrence] = None
    complete: bool = False
    completed_date: Optional[date] = None

    def __post_init__(self):
        # completed_date is set if and only if the task is complete
        if self.complete and self.completed_date is None:
            self.completed_date = today()
        elif not self.complete:
            self.completed_date = None

    def __str__(self) -> str:
        return self.serialize()

    @property
    def project(self) -> str:
        """First project tag, or an empty string."""
        return self.projects[0] if self.projects else ""

    @property
    def due_string(self) -> str:
        return date_to_string(self.due)

    @property
    def recurrence_display(self) -> str:
        return self.recurrence.display() if self.recurrence else ""

    @classmethod
    def parse(cls, line: str) -> "Task":
        """Build a task from a raw todo.txt line."""
        from .parser import TodoTxtFormat
        return TodoTxtFormat.parse(line, task_class=cls)

    def serialize(self) -> str:
        """Render the task as a canonical todo.txt line."""
        from .parser import TodoTxtFormat
        return TodoTxtFormat.serialize(self)

    @classmethod
    def create(cls, data: TaskData, validate: bool = True) -> "Task":
        """Create a new pending task from form data.

        The text is parsed like a todo.txt line, so a leading priority and
        inline tags are picked up; non-empty TaskData fields take precedence
        over them. A leading completion marker or date is rejected, since a
        new task is pending and dated today. Without validation such text is
        kept as typed.

        Raises:
            TaskValidationError: If validate is True and a field is invalid
        """
        if validate:
            validate_task_data(data, inline_tags=True)

        task = cls.parse(data.text)
        if task.complete or task.creation_date is not None:
            logger.debug("Keeping leading markers of %r as text", data.text)
            task = cls(text=" ".join(data.text.split()))
        task.creation_date = today()
        if data.project:
            task.projects = [data.project]
        if data.contexts:
            task.contexts = data.contexts.split()
        if data.priority:
            task.priority = data.priority
        if data.due_date:
            task.due = string_to_date(data.due_date)
        if data.recurrence:
            task.recurrence = TaskRecurrence.parse(data.recurrence)

        logger.debug("Created task %r", task.serialize())
        return task

    def update(self, data: TaskData, validate: bool = True) -> None:
        """Overwrite the editable fields from form data.

        Empty fields clear the corresponding value. The text is stored as
        given (whitespace collapsed), so it must not hold anything the line
        parser would read back as a field.

        Raises:
            TaskValidationError: If validate is True and a field is invalid
        """
        if validate:
            validate_task_data(data)

        self.text = " ".join(data.text.split())
        self.projects = [data.project] if data.project else []
        self.contexts = data.contexts.split()
        self.priority = data.priority or None
        self.due = string_to_date(data.due_date) if data.due_date else None
        self.recurrence = TaskRecurrence.parse(data.recurrence) if data.recurrence else None

    def to_task_data(self) -> TaskData:
        """Snapshot of the editable fields; unset values become empty strings."""
        return TaskData(
            text=self.text,
            project=self.project,
            priority=self.priority or "",
            due_date=self.due_string,
            recurrence=str(self.recurrence) if self.recurrence else "",
            contexts=" ".join(self.contexts),
        )

    def toggle_complete(self) -> None:
        """Flip completion; completing stamps today's date, reopening clears it."""
        if not self.complete:
            self.complete = True
            self.completed_date = today()
        else:
            self.complete = False
            self.completed_date = None

    def is_overdue(self, on: Optional[date] = None) -> bool:
        """Check if the due date lies before the start of ``on`` (default today)."""
        if self.due is None:
            return False
        return self.due < (on or today())

    def postpone(self) -> bool:
        """Move the due date one day forward.

        Returns:
            False without changing anything if the task has no due date
        """
        if self.due is None:
            return False
        self.due = add_days(self.due, 1)
        logger.debug("Postponed task to %s", self.due_string)
        return True

    def recur(self) -> Optional["Task"]:
        """Return the next occurrence of a recurring task.

        The original task is left untouched. Returns None unless the task has
        both a due date and a recurrence rule.
        """
        if self.due is None or self.recurrence is None:
            return None
        next_task = self.clone()
        next_task.due = self.recurrence.add_to(self.due)
        logger.debug("Next occurrence of %r due %s", self.text, next_task.due_string)
        return next_task

    def clone(self) -> "Task":
        """Independent copy made by serializing and re-parsing."""
        return type(self).parse(self.serialize())
