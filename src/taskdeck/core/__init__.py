"""Functional core - pure business logic with no I/O."""

from .classify import DueState, classify, is_due_today, is_overdue, parse_instant
from .tasks import FilterCriteria, Priority, Project, Task, filter_tasks, sort_tasks
from .stats import TaskStats, aggregate
from .calendar import CalendarDay, DayIndicator, build_grid, shift_month
from .quick_add import QuickAddResult, parse_quick_add

__all__ = [
    # Classification
    "DueState",
    "classify",
    "is_due_today",
    "is_overdue",
    "parse_instant",
    # Tasks
    "FilterCriteria",
    "Priority",
    "Project",
    "Task",
    "filter_tasks",
    "sort_tasks",
    # Statistics
    "TaskStats",
    "aggregate",
    # Calendar
    "CalendarDay",
    "DayIndicator",
    "build_grid",
    "shift_month",
    # Quick add
    "QuickAddResult",
    "parse_quick_add",
]
