"""Aggregate task counters for dashboards."""

import math
from dataclasses import asdict, dataclass
from datetime import datetime

from .classify import DueState, classify
from .tasks import Task


@dataclass
class TaskStats:
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    today: int = 0
    completion_rate: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def completion_rate(completed: int, total: int) -> int:
    """Percentage completed, rounded half up. Zero for an empty collection."""
    if total <= 0:
        return 0
    return math.floor(100 * completed / total + 0.5)


def aggregate(tasks: list[Task], now: datetime) -> TaskStats:
    """
    Count totals, completion and due-date buckets in one pass.

    Only incomplete tasks count towards overdue and today.
    """
    stats = TaskStats()
    for t in tasks:
        stats.total += 1
        if t.completed:
            stats.completed += 1
            continue
        state = classify(t.due_date, now)
        if state is DueState.OVERDUE:
            stats.overdue += 1
        elif state is DueState.DUE_TODAY:
            stats.today += 1

    stats.pending = stats.total - stats.completed
    stats.completion_rate = completion_rate(stats.completed, stats.total)
    return stats
