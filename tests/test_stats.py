"""Tests for task statistics."""

from datetime import datetime, timedelta

import pytest

from taskdeck.core.stats import TaskStats, aggregate, completion_rate
from taskdeck.core.tasks import Task


@pytest.fixture
def now():
    return datetime(2024, 3, 10, 9, 0)


def make_task(task_id: str, now: datetime, completed: bool = False, due: datetime | None = None) -> Task:
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        created_at=now - timedelta(days=30),
        due_date=due,
        completed=completed,
        completed_at=now if completed else None,
    )


class TestAggregate:
    def test_empty_collection(self, now):
        stats = aggregate([], now)
        assert stats == TaskStats(total=0, completed=0, pending=0, overdue=0, today=0, completion_rate=0)

    def test_half_completed(self, now):
        tasks = [
            make_task("1", now, completed=True),
            make_task("2", now, completed=True),
            make_task("3", now),
            make_task("4", now),
        ]
        stats = aggregate(tasks, now)
        assert stats.total == 4
        assert stats.completed == 2
        assert stats.pending == 2
        assert stats.completion_rate == 50

    def test_overdue_and_today_count_only_open_tasks(self, now):
        tasks = [
            make_task("1", now, due=datetime(2024, 3, 9, 23, 59)),
            make_task("2", now, due=datetime(2024, 3, 10, 7, 0)),
            make_task("3", now, due=datetime(2024, 3, 10, 20, 0)),
            make_task("4", now, due=datetime(2024, 3, 12)),
            make_task("5", now, completed=True, due=datetime(2024, 3, 1)),
            make_task("6", now, completed=True, due=datetime(2024, 3, 10, 12, 0)),
        ]
        stats = aggregate(tasks, now)
        assert stats.overdue == 1
        assert stats.today == 2

    def test_undated_tasks_are_neither_overdue_nor_today(self, now):
        tasks = [make_task("1", now), make_task("2", now, due="garbage")]
        stats = aggregate(tasks, now)
        assert stats.overdue == 0
        assert stats.today == 0
        assert stats.pending == 2

    def test_to_dict(self, now):
        stats = aggregate([make_task("1", now, completed=True)], now)
        assert stats.to_dict() == {
            "total": 1,
            "completed": 1,
            "pending": 0,
            "overdue": 0,
            "today": 0,
            "completion_rate": 100,
        }


class TestCompletionRate:
    def test_zero_total(self):
        assert completion_rate(0, 0) == 0

    def test_rounds_to_nearest(self):
        assert completion_rate(1, 3) == 33
        assert completion_rate(2, 3) == 67

    def test_half_rounds_up(self):
        assert completion_rate(1, 8) == 13
