"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum

from .classify import DueState, classify, local_date, parse_instant

DEFAULT_PROJECT_COLOR = "#5B21B6"


class Priority(IntEnum):
    """Task priority. Lower value sorts first."""

    HIGH = 1
    MEDIUM = 2
    LOW = 3


PRIORITY_LABELS = {
    Priority.HIGH: "High",
    Priority.MEDIUM: "Medium",
    Priority.LOW: "Low",
}


def priority_label(priority: int) -> str:
    """Human-readable priority label."""
    return PRIORITY_LABELS.get(priority, "Normal")


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _coerce_priority(value) -> int:
    """Read a stored priority, falling back to LOW for anything outside 1-3."""
    try:
        return Priority(int(value))
    except (TypeError, ValueError):
        return Priority.LOW


@dataclass
class Task:
    """A tracked task."""

    id: str
    title: str
    created_at: datetime
    priority: int = Priority.LOW
    due_date: datetime | None = None
    project_id: str | None = None
    completed: bool = False
    completed_at: datetime | None = None

    @property
    def priority_label(self) -> str:
        return priority_label(self.priority)

    def due_state(self, now: datetime) -> DueState:
        """Classify this task's due date against `now`."""
        return classify(self.due_date, now)

    @classmethod
    def from_api(cls, data: dict) -> "Task":
        """
        Create Task from a store record.

        Malformed dueDate/completedAt values are dropped rather than raised;
        a missing title becomes "" and a bad priority becomes LOW.
        """
        created = parse_instant(data.get("createdAt")) or datetime.fromtimestamp(0)
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            created_at=created,
            priority=_coerce_priority(data.get("priority")),
            due_date=parse_instant(data.get("dueDate")),
            project_id=data.get("projectId") or None,
            completed=bool(data.get("completed", False)),
            completed_at=parse_instant(data.get("completedAt")),
        )

    def to_api(self) -> dict:
        """Serialize to the store record shape."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "projectId": self.project_id,
            "dueDate": _isoformat(self.due_date),
            "priority": int(self.priority),
            "createdAt": _isoformat(self.created_at),
            "completedAt": _isoformat(self.completed_at),
        }


@dataclass
class Project:
    """A project that tasks can belong to."""

    id: str
    name: str
    color: str = DEFAULT_PROJECT_COLOR
    task_count: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Project":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            color=data.get("color") or DEFAULT_PROJECT_COLOR,
            task_count=data.get("taskCount", 0) or 0,
            created_at=parse_instant(data.get("createdAt")),
        )

    def to_api(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "taskCount": self.task_count,
            "createdAt": _isoformat(self.created_at),
        }


@dataclass
class FilterCriteria:
    """
    Independently optional task predicates, ANDed together.

    None, empty strings and False mean "not filtering on this field".
    """

    completed: bool | None = None
    project_id: str | None = None
    search: str | None = None
    overdue_only: bool = False
    today_only: bool = False
    due_on: date | None = None

    def is_empty(self) -> bool:
        return (
            self.completed is None
            and not self.project_id
            and not self.search
            and not self.overdue_only
            and not self.today_only
            and self.due_on is None
        )


def filter_tasks(
    tasks: list[Task],
    criteria: FilterCriteria | None,
    now: datetime,
) -> list[Task]:
    """
    Apply every active criterion to `tasks`.

    Pure function - returns a new list, never mutates the input.
    """
    if criteria is None or criteria.is_empty():
        return list(tasks)

    search = criteria.search.lower() if criteria.search else None

    def keep(t: Task) -> bool:
        if criteria.completed is not None and t.completed != criteria.completed:
            return False
        if criteria.project_id and t.project_id != criteria.project_id:
            return False
        if search and search not in t.title.lower():
            return False
        if criteria.overdue_only and (t.completed or t.due_state(now) is not DueState.OVERDUE):
            return False
        if criteria.today_only and (t.completed or t.due_state(now) is not DueState.DUE_TODAY):
            return False
        if criteria.due_on is not None and local_date(t.due_date, now) != criteria.due_on:
            return False
        return True

    return [t for t in tasks if keep(t)]


def sort_tasks(tasks: list[Task]) -> list[Task]:
    """
    Sort by priority (ascending) then creation time (newest first).

    sorted() is stable, so exact ties keep their input order.
    """

    def sort_key(t: Task) -> tuple[int, float]:
        return (t.priority, -t.created_at.timestamp())

    return sorted(tasks, key=sort_key)


def filter_by_project(tasks: list[Task], project_id: str) -> list[Task]:
    """Filter tasks to a specific project."""
    return [t for t in tasks if t.project_id == project_id]


def count_open_by_project(tasks: list[Task]) -> dict[str, int]:
    """Number of incomplete tasks per project id."""
    counts: dict[str, int] = {}
    for t in tasks:
        if t.project_id and not t.completed:
            counts[t.project_id] = counts.get(t.project_id, 0) + 1
    return counts
