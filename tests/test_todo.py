"""Tests for the Task model."""

import pytest
from datetime import date, timedelta

from todotxt_cli.recurring import TaskRecurrence
from todotxt_cli.todo import Task, TaskData
from todotxt_cli.utils.validation import TaskValidationError


class TestTaskCreate:
    """Test creating tasks from form data."""

    def test_create_minimal(self):
        task = Task.create(TaskData(text="Buy milk"))

        assert task.text == "Buy milk"
        assert task.creation_date == date.today()
        assert task.projects == []
        assert task.contexts == []
        assert task.priority is None
        assert task.due is None
        assert task.recurrence is None
        assert task.complete is False

    def test_create_all_fields(self):
        task = Task.create(TaskData(
            text="Pay rent", project="home", priority="A",
            due_date="2024-03-01", recurrence="1m", contexts="online bank",
        ))

        assert task.projects == ["home"]
        assert task.contexts == ["online", "bank"]
        assert task.priority == "A"
        assert task.due == date(2024, 3, 1)
        assert task.recurrence == TaskRecurrence.parse("1m")

    def test_create_picks_up_inline_tags(self):
        task = Task.create(TaskData(text="Pay rent +home @online due:2024-03-01"))

        assert task.text == "Pay rent"
        assert task.projects == ["home"]
        assert task.contexts == ["online"]
        assert task.due == date(2024, 3, 1)

    def test_form_project_wins_over_inline(self):
        task = Task.create(TaskData(text="Pay rent +home", project="flat"))
        assert task.projects == ["flat"]

    @pytest.mark.parametrize("text", [
        "x 2024-01-01 old news",
        "2024-05-05 meeting notes",
        "(A) 2024-05-05 meeting notes",
    ])
    def test_create_rejects_leading_completion_or_date(self, text):
        with pytest.raises(TaskValidationError) as exc_info:
            Task.create(TaskData(text=text))
        assert exc_info.value.field_name == "text"

    def test_create_without_validation_keeps_leading_date_as_text(self):
        task = Task.create(TaskData(text="2024-05-05 meeting notes"), validate=False)

        assert task.complete is False
        assert task.completed_date is None
        assert task.creation_date == date.today()
        assert task.text == "2024-05-05 meeting notes"
        assert task.clone() == task

    def test_create_takes_inline_priority(self):
        task = Task.create(TaskData(text="(A) urgent"))
        assert task.priority == "A"
        assert task.text == "urgent"
        assert task.clone() == task

    def test_create_rejects_leftover_markers(self):
        with pytest.raises(TaskValidationError) as exc_info:
            Task.create(TaskData(text="(A) (B) urgent"))
        assert exc_info.value.field_name == "text"

    def test_create_rejects_invalid_fields(self):
        with pytest.raises(TaskValidationError) as exc_info:
            Task.create(TaskData(text="Pay rent", due_date="2024-13-01"))
        assert exc_info.value.field_name == "due_date"

    def test_create_without_validation_accepts_odd_values(self):
        task = Task.create(TaskData(text="", priority="a"), validate=False)
        assert task.priority == "a"


class TestTaskUpdate:
    """Test in-place updates and TaskData snapshots."""

    def setup_method(self):
        self.task = Task.parse("(A) 2024-01-01 Pay rent +home @online due:2024-03-01 rec:1m")

    def test_to_task_data(self):
        assert self.task.to_task_data() == TaskData(
            text="Pay rent", project="home", priority="A",
            due_date="2024-03-01", recurrence="1m", contexts="online",
        )

    def test_to_task_data_unset_fields_are_empty(self):
        assert Task.parse("Buy milk").to_task_data() == TaskData(text="Buy milk")

    def test_update_overwrites(self):
        self.task.update(TaskData(text="Pay  the rent", project="flat", priority="B",
                                  due_date="2024-04-01", recurrence="2w", contexts="bank"))

        assert self.task.text == "Pay the rent"
        assert self.task.projects == ["flat"]
        assert self.task.contexts == ["bank"]
        assert self.task.priority == "B"
        assert self.task.due == date(2024, 4, 1)
        assert str(self.task.recurrence) == "2w"

    def test_update_clears_empty_fields(self):
        self.task.update(TaskData(text="Pay rent"))

        assert self.task.projects == []
        assert self.task.contexts == []
        assert self.task.priority is None
        assert self.task.due is None
        assert self.task.recurrence is None

    def test_update_keeps_creation_date(self):
        self.task.update(TaskData(text="Pay rent"))
        assert self.task.creation_date == date(2024, 1, 1)

    def test_update_rejects_invalid_fields(self):
        with pytest.raises(TaskValidationError):
            self.task.update(TaskData(text="Pay rent", project="two words"))
        # Nothing changed
        assert self.task.projects == ["home"]

    def test_task_data_round_trip(self):
        data = self.task.to_task_data()
        self.task.update(data)
        assert self.task.to_task_data() == data

    def test_updated_task_survives_clone(self):
        self.task.update(TaskData(text="Pay the rent (late)", project="flat", priority="B",
                                  due_date="2024-04-01", contexts="bank"))
        assert self.task.clone() == self.task

    @pytest.mark.parametrize("text", [
        "(A) urgent",
        "Call +mom (A)",
        "Call @phone",
        "Call due:2024-05-01",
        "Stretch rec:1d",
        "2024-05-05 meeting notes",
        "x 2024-05-05 done already",
    ])
    def test_update_rejects_text_with_fields(self, text):
        before = self.task.clone()
        with pytest.raises(TaskValidationError) as exc_info:
            self.task.update(TaskData(text=text))
        assert exc_info.value.field_name == "text"
        assert self.task == before

    @pytest.mark.parametrize("text", [
        "Call mom (A)",
        "x marks the spot",
        "Meet at 2024-05-05",
        "email a+b@example.com",
        "prec:1d and undue:2024-05-01",
    ])
    def test_update_accepts_text_that_stays_text(self, text):
        self.task.update(TaskData(text=text))
        assert self.task.text == text
        assert self.task.clone() == self.task


class TestTaskCompletion:
    """Test completion toggling."""

    def test_toggle_complete(self):
        task = Task.parse("Buy milk")

        task.toggle_complete()
        assert task.complete is True
        assert task.completed_date == date.today()

        task.toggle_complete()
        assert task.complete is False
        assert task.completed_date is None

    def test_toggle_twice_restores_completed_task(self):
        task = Task.parse("x 2024-01-02 Buy milk")

        task.toggle_complete()
        task.toggle_complete()

        assert task.complete is True
        assert task.completed_date is not None

    def test_completed_date_invariant(self):
        assert Task(text="a", complete=True).completed_date is not None
        assert Task(text="a", complete=False, completed_date=date(2024, 1, 1)).completed_date is None


class TestTaskScheduling:
    """Test overdue checks, postponing and recurrence."""

    def test_is_overdue(self):
        today = date(2024, 6, 15)
        assert Task(text="a", due=date(2024, 6, 14)).is_overdue(today) is True
        assert Task(text="a", due=today).is_overdue(today) is False
        assert Task(text="a", due=date(2024, 6, 16)).is_overdue(today) is False
        assert Task(text="a").is_overdue(today) is False

    def test_is_overdue_defaults_to_today(self):
        assert Task(text="a", due=date.today() - timedelta(days=1)).is_overdue() is True
        assert Task(text="a", due=date.today()).is_overdue() is False

    def test_postpone_rolls_over_month(self):
        task = Task.parse("Pay rent due:2024-01-31")

        assert task.postpone() is True
        assert task.due == date(2024, 2, 1)
        assert task.serialize() == "Pay rent due:2024-02-01"

    def test_postpone_without_due_date(self):
        task = Task.parse("Pay rent rec:1m")
        before = task.serialize()

        assert task.postpone() is False
        assert task.serialize() == before

    def test_recur_month_end(self):
        task = Task.parse("Pay rent due:2024-01-31 rec:1m")

        next_task = task.recur()

        assert next_task is not None
        assert next_task is not task
        assert next_task.due == date(2024, 2, 29)
        assert next_task.text == "Pay rent"
        assert next_task.recurrence == task.recurrence
        # Original untouched
        assert task.due == date(2024, 1, 31)

    def test_recur_copy_is_independent(self):
        task = Task.parse("Water plants +home due:2024-05-01 rec:3d")
        next_task = task.recur()

        next_task.projects.append("garden")
        assert task.projects == ["home"]

    def test_recur_needs_due_and_recurrence(self):
        assert Task.parse("Pay rent rec:1m").recur() is None
        assert Task.parse("Pay rent due:2024-01-31").recur() is None


class TestTaskMisc:
    """Test cloning and derived display values."""

    def test_clone(self):
        task = Task.parse("x 2024-01-02 (A) 2024-01-01 Call mom +family @phone due:2024-01-05 rec:1w")
        copy = task.clone()

        assert copy == task
        assert copy is not task
        copy.contexts.append("home")
        assert task.contexts == ["phone"]

    def test_derived_values(self):
        task = Task.parse("Stretch +health due:2024-01-05 rec:2d")
        assert task.project == "health"
        assert task.due_string == "2024-01-05"
        assert task.recurrence_display == "every 2 day"
        assert str(task) == "Stretch +health due:2024-01-05 rec:2d"

    def test_derived_values_unset(self):
        task = Task.parse("Stretch")
        assert task.project == ""
        assert task.due_string == ""
        assert task.recurrence_display == ""

    def test_subclass_parse_and_clone(self):
        class NotedTask(Task):
            pass

        task = NotedTask.parse("(A) Call mom +family due:2024-01-05")
        assert type(task) is NotedTask
        assert type(task.clone()) is NotedTask
        assert type(NotedTask.create(TaskData(text="Buy milk"))) is NotedTask
