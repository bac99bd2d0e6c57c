"""todotxt-cli - parse, edit and reschedule todo.txt task lists."""

__version__ = "0.1.0"
__author__ = "todotxt-cli Team"

from .todo import Task, TaskData
from .recurring import TaskRecurrence, RecurrenceUnit
from .parser import TodoTxtFormat, parse_line, serialize_task
from .extensions import DueExtension, RecurrenceExtension, get_extensions
from .tasklist import TaskList, TaskFilter, TaskNotFoundError
from .utils.validation import TaskValidationError

__all__ = [
    "Task",
    "TaskData",
    "TaskRecurrence",
    "RecurrenceUnit",
    "TodoTxtFormat",
    "parse_line",
    "serialize_task",
    "DueExtension",
    "RecurrenceExtension",
    "get_extensions",
    "TaskList",
    "TaskFilter",
    "TaskNotFoundError",
    "TaskValidationError",
    "__version__",
]
