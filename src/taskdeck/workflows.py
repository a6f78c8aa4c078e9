"""Shared workflow layer between the stores and the CLI.

Each function fetches whole collections from a repository, runs the pure core
over them, and degrades to an empty result when the store fails.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .adapters.memory_store import FileProjectStore, FileTaskStore
from .adapters.remote_api import RemoteClient, RemoteProjectStore, RemoteTaskStore
from .config import Config
from .core.calendar import CalendarDay, build_grid
from .core.quick_add import parse_quick_add
from .core.stats import TaskStats, aggregate
from .core.tasks import FilterCriteria, Project, Task, count_open_by_project, filter_tasks, sort_tasks
from .ports import ProjectRepository, StoreError, TaskRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def current_time(config: Config) -> datetime:
    """Reference instant for the engine, in the configured timezone."""
    if config.timezone:
        try:
            return datetime.now(ZoneInfo(config.timezone))
        except ZoneInfoNotFoundError:
            logger.warning(f"Unknown timezone {config.timezone!r}, using system local time")
    return datetime.now().astimezone()


def build_stores(config: Config) -> tuple[TaskRepository, ProjectRepository]:
    """Construct the task and project stores for the configured backend."""
    if config.backend == "remote":
        client = RemoteClient(config)
        return RemoteTaskStore(client), RemoteProjectStore(client)
    data_path = config.data_path
    return FileTaskStore(data_path / "tasks.json"), FileProjectStore(data_path / "projects.json")


def with_retry(fn: Callable[[], T], attempts: int = 3, delay: float = 0.5) -> T:
    """Call `fn`, retrying on StoreError. Re-raises the last failure."""
    attempts = max(1, attempts)
    last_error: StoreError | None = None
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except StoreError as e:
            last_error = e
            if attempt < attempts:
                logger.warning(f"Store call failed (attempt {attempt}/{attempts}): {e}")
                if delay:
                    time.sleep(delay)

    logger.error(f"Store call failed after {attempts} attempts: {last_error}")
    raise last_error


@dataclass
class TaskView:
    """What the task list screen shows."""

    visible: list[Task] = field(default_factory=list)
    all_tasks: list[Task] = field(default_factory=list)
    stats: TaskStats = field(default_factory=TaskStats)
    error: str = ""


def load_task_view(
    repo: TaskRepository,
    criteria: FilterCriteria | None,
    now: datetime,
    attempts: int = 3,
    delay: float = 0.5,
) -> TaskView:
    """
    Fetch all tasks, then filter, sort and count them client-side.

    Statistics always cover the full collection, not the filtered list.
    """
    try:
        all_tasks = with_retry(repo.get_all, attempts, delay)
    except StoreError as e:
        return TaskView(error=f"Failed to load tasks: {e}")

    visible = sort_tasks(filter_tasks(all_tasks, criteria, now))
    return TaskView(visible=visible, all_tasks=all_tasks, stats=aggregate(all_tasks, now))


def load_calendar(
    repo: TaskRepository,
    month: date,
    now: datetime,
    attempts: int = 3,
    delay: float = 0.5,
) -> list[CalendarDay]:
    """Month grid for `month`. Day buckets are empty if the store is unavailable."""
    try:
        tasks = with_retry(repo.get_all, attempts, delay)
    except StoreError:
        tasks = []
    return build_grid(month, tasks, now)


def quick_add(
    repo: TaskRepository,
    text: str,
    now: datetime,
    project_id: str | None = None,
    priority: int = 3,
) -> Task:
    """Create a task from free-form text like "Call client tomorrow"."""
    if not text.strip():
        raise ValueError("Task text is empty")

    parsed = parse_quick_add(text, now)
    task = repo.create(
        {
            "title": parsed.cleaned_title,
            "projectId": project_id,
            "priority": priority,
            "dueDate": parsed.implied_date,
        }
    )
    logger.info(f"Added task {task.id}: {task.title}")
    return task


def toggle_task(repo: TaskRepository, task_id: str) -> Task:
    """Flip a task between completed and open."""
    task = repo.get_by_id(task_id)
    return repo.update(task_id, {"completed": not task.completed})


def set_completed(repo: TaskRepository, task_id: str, completed: bool) -> Task:
    return repo.update(task_id, {"completed": completed})


def projects_with_counts(
    project_repo: ProjectRepository,
    task_repo: TaskRepository,
    attempts: int = 3,
    delay: float = 0.5,
) -> list[Project]:
    """Projects with task_count set to their number of open tasks."""
    projects = with_retry(project_repo.get_all, attempts, delay)
    try:
        counts = count_open_by_project(with_retry(task_repo.get_all, attempts, delay))
    except StoreError:
        counts = {}
    for project in projects:
        project.task_count = counts.get(project.id, 0)
    return projects
