"""taskdeck CLI - personal task tracker."""

import json
import logging
import sys
from datetime import date, datetime

import click

from .config import load_config
from .core.calendar import DayIndicator, grid_weeks, month_title, shift_month
from .core.classify import DueState, local_date
from .core.tasks import FilterCriteria, Task
from .ports import NotFoundError, StoreError
from .workflows import (
    build_stores,
    current_time,
    load_calendar,
    load_task_view,
    projects_with_counts,
    quick_add,
    set_completed,
    toggle_task,
)

INDICATOR_MARKS = {
    DayIndicator.OVERDUE: "!",
    DayIndicator.DUE_TODAY: "*",
    DayIndicator.UPCOMING: "+",
    DayIndicator.EMPTY: " ",
}


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _open_stores(config):
    try:
        return build_stores(config)
    except StoreError as e:
        _fail(str(e))


def _serialize_task(t: Task, now: datetime) -> dict:
    data = t.to_api()
    data["status"] = t.due_state(now).value
    return data


def _format_task(t: Task, now: datetime) -> str:
    check = "x" if t.completed else " "
    marker = "!" * (4 - t.priority)
    due = ""
    if t.due_date:
        state = t.due_state(now)
        if state is DueState.DUE_TODAY:
            due = " (due today)"
        elif state is DueState.OVERDUE:
            due = f" (overdue since {local_date(t.due_date, now).strftime('%b %d')})"
        else:
            due = f" (due {local_date(t.due_date, now).strftime('%b %d')})"
    return f"{t.id:>4} [{check}] {marker:3} {t.title}{due}"


@click.group()
@click.version_option(package_name="taskdeck")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """taskdeck - personal task tracker."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command("list")
@click.option("--project", "project_id", default=None, help="Only tasks in this project id")
@click.option("--search", default=None, help="Case-insensitive title search")
@click.option("--completed/--pending", "completed", default=None, help="Completion status")
@click.option("--overdue", is_flag=True, help="Only open overdue tasks")
@click.option("--today", is_flag=True, help="Only open tasks due today")
@click.option("--due", "due_on", default=None, help="Only tasks due on a date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(project_id, search, completed, overdue, today, due_on, as_json):
    """List tasks, highest priority first."""
    config = load_config()
    tasks_repo, _ = _open_stores(config)
    now = current_time(config)

    try:
        due = date.fromisoformat(due_on) if due_on else None
    except ValueError:
        _fail(f"Invalid date {due_on!r}, expected YYYY-MM-DD")

    criteria = FilterCriteria(
        completed=completed,
        project_id=project_id,
        search=search,
        overdue_only=overdue,
        today_only=today,
        due_on=due,
    )
    view = load_task_view(tasks_repo, criteria, now, config.retry_attempts, config.retry_delay)
    if view.error:
        click.echo(f"Error: {view.error}", err=True)

    if as_json:
        click.echo(json.dumps([_serialize_task(t, now) for t in view.visible], indent=2))
        return

    if not view.visible:
        click.echo("No tasks.")
        return

    for task in view.visible:
        click.echo(_format_task(task, now))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Show task counters."""
    config = load_config()
    tasks_repo, _ = _open_stores(config)
    view = load_task_view(tasks_repo, None, current_time(config), config.retry_attempts, config.retry_delay)
    if view.error:
        click.echo(f"Error: {view.error}", err=True)

    s = view.stats
    if as_json:
        click.echo(json.dumps(s.to_dict(), indent=2))
        return

    click.echo(f"Total:     {s.total}")
    click.echo(f"Completed: {s.completed} ({s.completion_rate}%)")
    click.echo(f"Pending:   {s.pending}")
    click.echo(f"Overdue:   {s.overdue}")
    click.echo(f"Today:     {s.today}")


@main.command()
@click.option("--month", default=None, help="Month to show (YYYY-MM), defaults to this month")
@click.option("--offset", default=0, type=int, help="Months before (-) or after (+) --month")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def calendar(month: str | None, offset: int, as_json: bool):
    """Show a month calendar with due-task markers."""
    config = load_config()
    tasks_repo, _ = _open_stores(config)
    now = current_time(config)

    try:
        cursor = date.fromisoformat(f"{month}-01") if month else now.date()
    except ValueError:
        _fail(f"Invalid month {month!r}, expected YYYY-MM")
    cursor = shift_month(cursor, offset)

    grid = load_calendar(tasks_repo, cursor, now, config.retry_attempts, config.retry_delay)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "date": d.day.isoformat(),
                        "in_month": d.in_month,
                        "is_today": d.is_today,
                        "indicator": d.indicator.value,
                        "task_ids": [t.id for t in d.tasks],
                    }
                    for d in grid
                ],
                indent=2,
            )
        )
        return

    click.echo(month_title(cursor).center(35))
    click.echo(" Sun  Mon  Tue  Wed  Thu  Fri  Sat")
    for week in grid_weeks(grid):
        cells = []
        for d in week:
            label = f"{d.day.day:2}" if d.in_month else "  "
            today_mark = ">" if d.is_today else " "
            cells.append(f"{today_mark}{label}{INDICATOR_MARKS[d.indicator]} ")
        click.echo("".join(cells).rstrip())
    click.echo("\n! overdue  * due today  + upcoming  > today")


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.option("--project", "project_id", default=None, help="Project id for the new task")
@click.option("--priority", type=click.IntRange(1, 3), default=None, help="1 (high) to 3 (low)")
def add(text: tuple[str, ...], project_id: str | None, priority: int | None):
    """Add a task; phrases like "tomorrow" or "12/28" set the due date."""
    config = load_config()
    tasks_repo, _ = _open_stores(config)
    now = current_time(config)

    try:
        task = quick_add(
            tasks_repo,
            " ".join(text),
            now,
            project_id=project_id,
            priority=priority or config.default_priority,
        )
    except (StoreError, ValueError) as e:
        _fail(str(e))

    due = f" (due {local_date(task.due_date, now).strftime('%a %b %d')})" if task.due_date else ""
    click.echo(f"✓ Added {task.id}: {task.title}{due}")


def _set_completed(task_id: str, completed: bool) -> Task:
    config = load_config()
    tasks_repo, _ = _open_stores(config)
    try:
        return set_completed(tasks_repo, task_id, completed)
    except NotFoundError:
        _fail(f"No task with id {task_id}")
    except StoreError as e:
        _fail(f"Failed to update task: {e}")


@main.command()
@click.argument("task_id")
def done(task_id: str):
    """Mark a task completed."""
    task = _set_completed(task_id, True)
    click.echo(f"✓ Completed {task.id}: {task.title}")


@main.command()
@click.argument("task_id")
def reopen(task_id: str):
    """Mark a task open again."""
    task = _set_completed(task_id, False)
    click.echo(f"Reopened {task.id}: {task.title}")


@main.command()
@click.argument("task_id")
def toggle(task_id: str):
    """Flip a task between completed and open."""
    config = load_config()
    tasks_repo, _ = _open_stores(config)
    try:
        task = toggle_task(tasks_repo, task_id)
    except NotFoundError:
        _fail(f"No task with id {task_id}")
    except StoreError as e:
        _fail(f"Failed to update task: {e}")
    state = "Completed" if task.completed else "Reopened"
    click.echo(f"{state} {task.id}: {task.title}")


@main.command("rm")
@click.argument("task_id")
def remove(task_id: str):
    """Delete a task."""
    config = load_config()
    tasks_repo, _ = _open_stores(config)
    try:
        task = tasks_repo.delete(task_id)
    except NotFoundError:
        _fail(f"No task with id {task_id}")
    except StoreError as e:
        _fail(f"Failed to delete task: {e}")
    click.echo(f"Deleted {task.id}: {task.title}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def projects(as_json: bool):
    """List projects with their open task counts."""
    config = load_config()
    tasks_repo, project_repo = _open_stores(config)
    try:
        items = projects_with_counts(project_repo, tasks_repo, config.retry_attempts, config.retry_delay)
    except StoreError as e:
        _fail(f"Failed to load projects: {e}")

    if as_json:
        click.echo(json.dumps([p.to_api() for p in items], indent=2))
        return

    if not items:
        click.echo("No projects.")
        return

    for p in items:
        click.echo(f"{p.id:>4} {p.name} ({p.task_count} open)")


@main.command("project-add")
@click.argument("name")
@click.option("--color", default=None, help="Display color, e.g. #5B21B6")
def project_add(name: str, color: str | None):
    """Create a project."""
    config = load_config()
    _, project_repo = _open_stores(config)
    try:
        data = {"name": name}
        if color:
            data["color"] = color
        project = project_repo.create(data)
    except StoreError as e:
        _fail(f"Failed to create project: {e}")
    click.echo(f"✓ Added project {project.id}: {project.name}")


if __name__ == "__main__":
    main()
