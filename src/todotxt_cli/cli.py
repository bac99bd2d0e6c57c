"""Command-line interface for todotxt-cli.

Every command reads a todo.txt stream (a path, or ``-`` for stdin). Commands
that change tasks write the resulting todo.txt text to stdout; messages go
to stderr so the output can be redirected straight into a file.
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ConfigModel, load_config
from .parser import TodoTxtFormat
from .tasklist import TaskFilter, TaskList, TaskNotFoundError
from .todo import Task, TaskData
from .utils.datetime import parse_date_or_none
from .utils.validation import TaskValidationError

console = Console()
err_console = Console(stderr=True)

todo_file_argument = click.argument("todo_file", type=click.File("r"))


def load_tasks(ctx: click.Context, todo_file) -> TaskList:
    config: ConfigModel = ctx.obj["config"]
    return TaskList.from_text(todo_file.read(), config)


def emit(task_list: TaskList) -> None:
    click.echo(task_list.to_text(), nl=False)


def fail(message: str) -> None:
    err_console.print(f"[red]Error: {message}[/red]")
    sys.exit(1)


def get_task(task_list: TaskList, task_id: int) -> Task:
    try:
        return task_list.get(task_id)
    except TaskNotFoundError as e:
        fail(str(e))


def format_task_row(task_id: int, task: Task):
    """Cells for one row of the task table."""
    style = "dim strike" if task.complete else ""
    due = ""
    if task.due:
        color = "red" if task.is_overdue() and not task.complete else "blue"
        due = f"[{color}]{task.due_string}[/{color}]"
    return (
        str(task_id),
        task.priority or "",
        f"[{style}]{escape(task.text)}[/{style}]" if style else escape(task.text),
        " ".join(f"+{p}" for p in task.projects),
        " ".join(f"@{c}" for c in task.contexts),
        due,
        task.recurrence_display,
    )


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config_path, verbose):
    """Manage todo.txt task lists."""
    ctx.ensure_object(dict)
    config = load_config(config_path)
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj["config"] = config


@main.command("list")
@todo_file_argument
@click.option("--project", "-p", default=None, help="Only tasks in this project")
@click.option("--context", "-c", default="", help="Only tasks with this context")
@click.option("--due-before", default=None, help="Only tasks due on or before YYYY-MM-DD")
@click.option("--hide-completed", is_flag=True, help="Hide completed tasks")
@click.pass_context
def list_tasks(ctx, todo_file, project, context, due_before, hide_completed):
    """List tasks in a table."""
    config = ctx.obj["config"]
    task_list = load_tasks(ctx, todo_file)

    due_limit = None
    if due_before:
        due_limit = parse_date_or_none(due_before)
        if due_limit is None:
            fail("Invalid due date format. Use YYYY-MM-DD")

    task_filter = TaskFilter(
        project=config.default_project if project is None else project,
        context=context,
        due_before=due_limit,
        hide_completed=hide_completed or config.hide_completed,
    )
    ids = task_list.sorted_ids(task_list.filter(task_filter))
    if not ids:
        console.print("[yellow]No tasks found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    for column in ("ID", "Pri", "Task", "Projects", "Contexts", "Due", "Repeat"):
        table.add_column(column)
    for task_id in ids:
        table.add_row(*format_task_row(task_id, task_list.get(task_id)))
    console.print(table)


def _build_task_data(task_data, text, project, priority, due, rec, contexts):
    if text is not None:
        task_data.text = text
    if project is not None:
        task_data.project = project
    if priority is not None:
        task_data.priority = priority
    if due is not None:
        task_data.due_date = due
    if rec is not None:
        task_data.recurrence = rec
    if contexts:
        task_data.contexts = " ".join(contexts)
    return task_data


@main.command()
@todo_file_argument
@click.argument("text")
@click.option("--project", "-p", default=None, help="Project name")
@click.option("--priority", "-pr", default=None, help="Priority letter A-Z")
@click.option("--due", "-d", default=None, help="Due date (YYYY-MM-DD)")
@click.option("--rec", "-r", default=None, help="Recurrence, e.g. 1w or 3d")
@click.option("--context", "-c", "contexts", multiple=True, help="Context (can be used multiple times)")
@click.pass_context
def add(ctx, todo_file, text, project, priority, due, rec, contexts):
    """Add a new task."""
    config = ctx.obj["config"]
    task_list = load_tasks(ctx, todo_file)
    data = _build_task_data(TaskData(project=config.default_project), text, project, priority,
                            due, rec, contexts)
    try:
        task_id = task_list.create(data)
    except TaskValidationError as e:
        fail(str(e))
    err_console.print(f"[green]Added task {task_id}: {escape(task_list.get(task_id).text)}[/green]")
    emit(task_list)


@main.command()
@todo_file_argument
@click.argument("task_id", type=int)
@click.option("--text", "-t", default=None, help="New task text")
@click.option("--project", "-p", default=None, help="Project name (empty to clear)")
@click.option("--priority", "-pr", default=None, help="Priority letter (empty to clear)")
@click.option("--due", "-d", default=None, help="Due date (empty to clear)")
@click.option("--rec", "-r", default=None, help="Recurrence (empty to clear)")
@click.option("--context", "-c", "contexts", multiple=True, help="Replace contexts")
@click.pass_context
def edit(ctx, todo_file, task_id, text, project, priority, due, rec, contexts):
    """Edit fields of an existing task; unspecified fields are kept."""
    task_list = load_tasks(ctx, todo_file)
    task = get_task(task_list, task_id)
    data = _build_task_data(task.to_task_data(), text, project, priority, due, rec, contexts)
    try:
        task_list.update(task_id, data)
    except TaskValidationError as e:
        fail(str(e))
    err_console.print(f"[green]Updated task {task_id}[/green]")
    emit(task_list)


@main.command()
@todo_file_argument
@click.argument("task_id", type=int)
@click.pass_context
def done(ctx, todo_file, task_id):
    """Toggle completion of a task."""
    task_list = load_tasks(ctx, todo_file)
    task = get_task(task_list, task_id)
    new_id = task_list.toggle_complete(task_id)
    state = "completed" if task.complete else "reopened"
    err_console.print(f"[green]Task {task_id} {state}[/green]")
    if new_id is not None:
        err_console.print(f"[green]Next occurrence is task {new_id}, "
                          f"due {task_list.get(new_id).due_string}[/green]")
    emit(task_list)


@main.command()
@todo_file_argument
@click.argument("task_id", type=int)
@click.pass_context
def postpone(ctx, todo_file, task_id):
    """Move the due date of a task one day forward."""
    task_list = load_tasks(ctx, todo_file)
    task = get_task(task_list, task_id)
    if not task_list.postpone(task_id):
        fail(f"Task {task_id} has no due date")
    err_console.print(f"[green]Task {task_id} now due {task.due_string}[/green]")
    emit(task_list)


@main.command()
@todo_file_argument
@click.argument("task_id", type=int)
@click.pass_context
def rm(ctx, todo_file, task_id):
    """Remove a task."""
    task_list = load_tasks(ctx, todo_file)
    get_task(task_list, task_id)
    task = task_list.remove(task_id)
    err_console.print(f"[green]Removed task {task_id}: {escape(task.text)}[/green]")
    emit(task_list)


@main.command()
@todo_file_argument
@click.argument("task_id", type=int)
@click.pass_context
def show(ctx, todo_file, task_id):
    """Show all fields of a task."""
    task_list = load_tasks(ctx, todo_file)
    task = get_task(task_list, task_id)

    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Text", escape(task.text))
    table.add_row("Projects", ", ".join(task.projects))
    table.add_row("Contexts", ", ".join(task.contexts))
    table.add_row("Priority", task.priority or "")
    table.add_row("Created", str(task.creation_date or ""))
    table.add_row("Due", task.due_string + (" (overdue)" if task.is_overdue() else ""))
    table.add_row("Repeat", task.recurrence_display)
    table.add_row("Completed", str(task.completed_date) if task.complete else "no")
    table.add_row("Line", escape(task.serialize()))
    console.print(table)


@main.command()
@todo_file_argument
@click.pass_context
def check(ctx, todo_file):
    """Verify that every line survives a parse/serialize round trip."""
    failures = 0
    for number, line in enumerate(todo_file.read().splitlines(), start=1):
        if not line.strip():
            continue
        task = TodoTxtFormat.parse(line)
        if TodoTxtFormat.parse(TodoTxtFormat.serialize(task)) != task:
            failures += 1
            console.print(f"[red]Line {number} does not round-trip:[/red] {escape(line)}")
    if failures:
        sys.exit(1)
    console.print("[green]All lines round-trip[/green]")


if __name__ == "__main__":
    main()
