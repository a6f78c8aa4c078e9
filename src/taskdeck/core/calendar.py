"""Pure calendar grid logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum

from .classify import DueState, classify, local_date
from .tasks import Task

GRID_DAYS = 42
WEEK_DAYS = 7


class DayIndicator(Enum):
    """Marker shown on a calendar cell, most severe state wins."""

    EMPTY = "empty"
    UPCOMING = "upcoming"
    DUE_TODAY = "due_today"
    OVERDUE = "overdue"


@dataclass
class CalendarDay:
    """One cell of the month grid."""

    day: date
    in_month: bool
    is_today: bool
    tasks: list[Task] = field(default_factory=list)
    indicator: DayIndicator = DayIndicator.EMPTY

    @property
    def open_tasks(self) -> list[Task]:
        return [t for t in self.tasks if not t.completed]

    @property
    def badge(self) -> str:
        """Open task count as shown on the cell ("" when nothing is open)."""
        count = len(self.open_tasks)
        if count == 0:
            return ""
        return "9+" if count > 9 else str(count)


def _first_of_month(cursor: date) -> date:
    return date(cursor.year, cursor.month, 1)


def shift_month(cursor: date, months: int) -> date:
    """First day of the month `months` away from `cursor`."""
    index = cursor.year * 12 + (cursor.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_title(cursor: date) -> str:
    return cursor.strftime("%B %Y")


def grid_start(cursor: date) -> date:
    """Sunday on or before the first of the cursor's month."""
    first = _first_of_month(cursor)
    # weekday(): Monday=0 .. Sunday=6
    return first - timedelta(days=(first.weekday() + 1) % 7)


def day_indicator(tasks: list[Task], now: datetime) -> DayIndicator:
    """
    Indicator for a day bucket.

    Completed tasks never count.
    """
    states = {classify(t.due_date, now) for t in tasks if not t.completed}
    if not states:
        return DayIndicator.EMPTY
    if DueState.OVERDUE in states:
        return DayIndicator.OVERDUE
    if DueState.DUE_TODAY in states:
        return DayIndicator.DUE_TODAY
    return DayIndicator.UPCOMING


def bucket_by_day(tasks: list[Task], now: datetime) -> dict[date, list[Task]]:
    """Group tasks by the local calendar day they are due. Undated tasks are skipped."""
    buckets: dict[date, list[Task]] = {}
    for t in tasks:
        d = local_date(t.due_date, now)
        if d is not None:
            buckets.setdefault(d, []).append(t)
    return buckets


def tasks_for_date(tasks: list[Task], target: date, now: datetime) -> list[Task]:
    """Tasks due on `target`, time of day ignored."""
    return [t for t in tasks if local_date(t.due_date, now) == target]


def build_grid(month_cursor: date, tasks: list[Task], now: datetime) -> list[CalendarDay]:
    """
    Build the six-week grid for the cursor's month.

    Always 42 consecutive days starting on a Sunday, so leading days of the
    previous month and trailing days of the next month are included.

    Pure function - no I/O.
    """
    if isinstance(month_cursor, datetime):
        month_cursor = month_cursor.date()

    start = grid_start(month_cursor)
    today = now.date()
    buckets = bucket_by_day(tasks, now)

    grid = []
    for offset in range(GRID_DAYS):
        d = start + timedelta(days=offset)
        bucket = buckets.get(d, [])
        grid.append(
            CalendarDay(
                day=d,
                in_month=(d.year, d.month) == (month_cursor.year, month_cursor.month),
                is_today=d == today,
                tasks=bucket,
                indicator=day_indicator(bucket, now),
            )
        )
    return grid


def grid_weeks(grid: list[CalendarDay]) -> list[list[CalendarDay]]:
    """Split a grid into rows of seven days."""
    return [grid[i : i + WEEK_DAYS] for i in range(0, len(grid), WEEK_DAYS)]
