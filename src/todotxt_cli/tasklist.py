"""In-memory todo.txt task list with stable task ids."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .config import ConfigModel
from .todo import Task, TaskData

logger = logging.getLogger(__name__)


class TaskNotFoundError(KeyError):
    """Raised when a task id is not in the list."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(task_id)

    def __str__(self) -> str:
        return f"No task with id {self.task_id}"


@dataclass
class TaskFilter:
    """Criteria for narrowing down a task list."""
    project: str = ""
    context: str = ""
    due_before: Optional[date] = None  # inclusive
    hide_completed: bool = False

    def matches(self, task: Task) -> bool:
        if self.project and self.project not in task.projects:
            return False
        if self.context and self.context not in task.contexts:
            return False
        if self.due_before and (task.due is None or task.due > self.due_before):
            return False
        if self.hide_completed and task.complete:
            return False
        return True


class TaskList:
    """Ordered collection of tasks.

    Every task gets an integer id when it enters the list. Ids are never
    reused and do not depend on the task's position, so removing or
    appending tasks leaves existing ids valid.
    """

    def __init__(self, config: Optional[ConfigModel] = None):
        self.config = config or ConfigModel()
        self._tasks: Dict[int, Task] = {}
        self._next_id = 1

    @classmethod
    def from_lines(cls, lines: Iterable[str], config: Optional[ConfigModel] = None) -> "TaskList":
        """Build a list from todo.txt lines, skipping blank ones."""
        task_list = cls(config)
        for line in lines:
            if line.strip():
                task_list.add(Task.parse(line))
        return task_list

    @classmethod
    def from_text(cls, text: str, config: Optional[ConfigModel] = None) -> "TaskList":
        return cls.from_lines(text.splitlines(), config)

    def to_lines(self) -> List[str]:
        return [task.serialize() for task in self._tasks.values()]

    def to_text(self) -> str:
        lines = self.to_lines()
        return "\n".join(lines) + "\n" if lines else ""

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Tuple[int, Task]]:
        return iter(list(self._tasks.items()))

    def ids(self) -> List[int]:
        return list(self._tasks)

    def get(self, task_id: int) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    def add(self, task: Task) -> int:
        """Append an existing task and return its new id."""
        task_id = self._next_id
        self._next_id += 1
        self._tasks[task_id] = task
        return task_id

    def create(self, data: TaskData) -> int:
        """Create a task from form data and append it.

        Raises:
            TaskValidationError: If strict validation is on and data is invalid
        """
        task = Task.create(data, validate=self.config.strict_validation)
        if not self.config.keep_creation_date:
            task.creation_date = None
        task_id = self.add(task)
        logger.debug("Added task %d", task_id)
        return task_id

    def update(self, task_id: int, data: TaskData) -> None:
        self.get(task_id).update(data, validate=self.config.strict_validation)
        logger.debug("Updated task %d", task_id)

    def remove(self, task_id: int) -> Task:
        task = self.get(task_id)
        del self._tasks[task_id]
        logger.debug("Removed task %d", task_id)
        return task

    def toggle_complete(self, task_id: int) -> Optional[int]:
        """Toggle completion of a task.

        When a recurring task gets completed, its next occurrence is appended
        (still pending, since it is derived before completion).

        Returns:
            Id of the new occurrence, or None if none was created
        """
        task = self.get(task_id)
        next_task = None
        if not task.complete and self.config.recur_on_complete:
            next_task = task.recur()

        task.toggle_complete()

        if next_task is None:
            return None
        new_id = self.add(next_task)
        logger.debug("Task %d recurred as task %d", task_id, new_id)
        return new_id

    def postpone(self, task_id: int) -> bool:
        return self.get(task_id).postpone()

    def filter(self, task_filter: TaskFilter) -> List[int]:
        """Ids of the tasks matching ``task_filter``, in list order."""
        return [task_id for task_id, task in self._tasks.items() if task_filter.matches(task)]

    def projects(self) -> List[str]:
        return sorted({p for task in self._tasks.values() for p in task.projects})

    def contexts(self) -> List[str]:
        return sorted({c for task in self._tasks.values() for c in task.contexts})

    def sorted_ids(self, ids: Optional[Iterable[int]] = None) -> List[int]:
        """Order ids for display.

        Pending tasks first, then by priority (unset last), then by due date
        (unset last), then by id.
        """
        if ids is None:
            ids = self._tasks

        def sort_key(task_id: int):
            task = self._tasks[task_id]
            return (
                task.complete,
                task.priority is None,
                task.priority or "",
                task.due is None,
                task.due or date.min,
                task_id,
            )

        return sorted(ids, key=sort_key)
