"""
Recurrence rules for todo.txt tasks.

A rule is written ``<amount><unit>`` (``rec:2w`` on the task line) where
amount is 1-7 and unit is one of d, w or m. Completing a recurring task
produces a copy whose due date is advanced by the rule.
"""

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from .utils.validation import RECURRENCE_REGEXP, TaskValidationError


class RecurrenceUnit(Enum):
    """Calendar granularity of a recurrence rule"""
    DAY = "d"
    WEEK = "w"
    MONTH = "m"

    @property
    def label(self) -> str:
        return {
            RecurrenceUnit.DAY: "day",
            RecurrenceUnit.WEEK: "week",
            RecurrenceUnit.MONTH: "month",
        }[self]


@dataclass(frozen=True)
class TaskRecurrence:
    """An immutable ``(amount, unit)`` recurrence rule"""
    amount: int
    unit: RecurrenceUnit

    def __post_init__(self):
        if not 1 <= self.amount <= 7:
            raise TaskValidationError(
                f"Recurrence amount must be between 1 and 7, got {self.amount}",
                "recurrence", self.amount,
            )

    @classmethod
    def parse(cls, value: str) -> "TaskRecurrence":
        """Parse a rule such as ``3d`` or ``1m``.

        Raises:
            TaskValidationError: If the string is not a valid rule
        """
        match = RECURRENCE_REGEXP.match(value or "")
        if not match:
            raise TaskValidationError(
                f"Invalid recurrence: {value!r}", "recurrence", value,
                ["Use <amount><unit> with amount 1-7 and unit d, w or m"],
            )
        return cls(amount=int(match.group(1)), unit=RecurrenceUnit(match.group(2)))

    def __str__(self) -> str:
        return f"{self.amount}{self.unit.value}"

    def add_to(self, start: date) -> date:
        """Return ``start`` advanced by this rule.

        Adding months keeps the day of month, clamped to the length of the
        target month (Jan 31 + 1m is Feb 28, or Feb 29 in a leap year).
        """
        if self.unit == RecurrenceUnit.DAY:
            return start + timedelta(days=self.amount)
        if self.unit == RecurrenceUnit.WEEK:
            return start + timedelta(weeks=self.amount)
        return _add_months(start, self.amount)

    def display(self) -> str:
        """Human readable form, e.g. ``every day`` or ``every 3 week``."""
        result = "every"
        if self.amount > 1:
            result += f" {self.amount}"
        return f"{result} {self.unit.label}"


def _add_months(start: date, months: int) -> date:
    month = start.month - 1 + months
    year = start.year + month // 12
    month = month % 12 + 1

    # Handle month-end edge cases
    max_day = monthrange(year, month)[1]
    return date(year, month, min(start.day, max_day))
