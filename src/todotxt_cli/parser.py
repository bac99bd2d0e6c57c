"""todo.txt line parser and serializer."""

import re
from typing import List, Optional, Sequence, Type

from .extensions import TagExtension, apply_extensions, get_extensions
from .todo import Task
from .utils.datetime import date_to_string, parse_date_or_none
from .utils.validation import is_valid_tag


COMPLETED_RE = re.compile(r"^x (\d{4}-\d{2}-\d{2})(?:\s+|$)")
PRIORITY_RE = re.compile(r"^\(([A-Z])\)(?:\s+|$)")
CREATED_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:\s+|$)")


def _append_unique(items: List[str], value: str) -> None:
    if value not in items:
        items.append(value)


class TodoTxtFormat:
    """Handles conversion between Task objects and todo.txt lines."""

    @staticmethod
    def parse(line: str, extensions: Optional[Sequence[TagExtension]] = None,
              task_class: Type[Task] = Task) -> Task:
        """Parse a todo.txt line into a Task.

        Never raises: markers and tags that do not parse stay in the text.
        The result is an instance of ``task_class``.
        """
        if extensions is None:
            extensions = get_extensions()

        line = line.strip()
        complete = False
        completed_date = None
        priority = None
        creation_date = None

        # Completion marker and date
        m = COMPLETED_RE.match(line)
        if m:
            completed_date = parse_date_or_none(m.group(1))
            if completed_date is not None:
                complete = True
                line = line[m.end():]

        # Priority marker
        m = PRIORITY_RE.match(line)
        if m:
            priority = m.group(1)
            line = line[m.end():]

        # Creation date
        m = CREATED_RE.match(line)
        if m:
            creation_date = parse_date_or_none(m.group(1))
            if creation_date is not None:
                line = line[m.end():]

        values, line = apply_extensions(line, extensions)

        # +project and @context tags
        projects: List[str] = []
        contexts: List[str] = []
        words = []
        for token in line.split():
            if token.startswith("+") and is_valid_tag(token[1:]):
                _append_unique(projects, token[1:])
            elif token.startswith("@") and is_valid_tag(token[1:]):
                _append_unique(contexts, token[1:])
            else:
                words.append(token)

        return task_class(
            text=" ".join(words),
            projects=projects,
            contexts=contexts,
            priority=priority,
            creation_date=creation_date,
            due=values.get("due"),
            recurrence=values.get("rec"),
            complete=complete,
            completed_date=completed_date,
        )

    @staticmethod
    def serialize(task: Task) -> str:
        """Render a Task as a canonical todo.txt line."""
        parts = []

        if task.complete:
            parts.append(f"x {date_to_string(task.completed_date)}")

        if task.priority:
            parts.append(f"({task.priority})")

        if task.creation_date:
            parts.append(date_to_string(task.creation_date))

        if task.text:
            parts.append(task.text)

        parts.extend(f"+{project}" for project in task.projects)
        parts.extend(f"@{context}" for context in task.contexts)

        if task.due:
            parts.append(f"due:{date_to_string(task.due)}")

        if task.recurrence:
            parts.append(f"rec:{task.recurrence}")

        return " ".join(parts)


def parse_line(line: str, extensions: Optional[Sequence[TagExtension]] = None,
               task_class: Type[Task] = Task) -> Task:
    """Parse a single todo.txt line."""
    return TodoTxtFormat.parse(line, extensions, task_class)


def serialize_task(task: Task) -> str:
    """Render a Task as a todo.txt line."""
    return TodoTxtFormat.serialize(task)
