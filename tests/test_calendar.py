"""Tests for calendar grid logic."""

from datetime import date, datetime, timedelta

import pytest

from taskdeck.core.calendar import (
    CalendarDay,
    DayIndicator,
    bucket_by_day,
    build_grid,
    day_indicator,
    grid_start,
    grid_weeks,
    month_title,
    shift_month,
    tasks_for_date,
)
from taskdeck.core.tasks import Task


# Fixtures
@pytest.fixture
def now():
    return datetime(2024, 3, 10, 9, 0)


@pytest.fixture
def make_task(now):
    """Factory for creating tasks."""
    counter = iter(range(1, 1000))

    def _make(due: datetime | None, completed: bool = False) -> Task:
        return Task(
            id=str(next(counter)),
            title="Task",
            created_at=now - timedelta(days=10),
            due_date=due,
            completed=completed,
            completed_at=now if completed else None,
        )

    return _make


class TestGridShape:
    @pytest.mark.parametrize(
        "cursor",
        [date(2024, 3, 10), date(2024, 9, 1), date(2015, 2, 14), date(2023, 12, 31), date(2024, 2, 29)],
    )
    def test_always_42_consecutive_days_from_sunday(self, cursor, now):
        grid = build_grid(cursor, [], now)
        assert len(grid) == 42
        assert grid[0].day.weekday() == 6  # Sunday
        for prev, cur in zip(grid, grid[1:]):
            assert cur.day - prev.day == timedelta(days=1)

    def test_leading_days_from_previous_month(self, now):
        # March 1, 2024 is a Friday
        grid = build_grid(date(2024, 3, 15), [], now)
        assert grid[0].day == date(2024, 2, 25)
        assert grid[0].in_month is False
        assert grid[5].day == date(2024, 3, 1)
        assert grid[5].in_month is True
        assert grid[-1].day == date(2024, 4, 6)
        assert grid[-1].in_month is False

    def test_month_starting_on_sunday_has_no_leading_days(self, now):
        grid = build_grid(date(2024, 9, 20), [], now)
        assert grid[0].day == date(2024, 9, 1)

    def test_short_month_still_gets_six_weeks(self, now):
        # February 2015 starts on Sunday and fits in four weeks
        grid = build_grid(date(2015, 2, 1), [], now)
        assert grid[0].day == date(2015, 2, 1)
        assert grid[-1].day == date(2015, 3, 14)
        assert sum(d.in_month for d in grid) == 28

    def test_accepts_datetime_cursor(self, now):
        grid = build_grid(datetime(2024, 3, 31, 23, 0), [], now)
        assert grid[0].day == date(2024, 2, 25)

    def test_today_flag(self, now):
        grid = build_grid(date(2024, 3, 1), [], now)
        today_cells = [d for d in grid if d.is_today]
        assert len(today_cells) == 1
        assert today_cells[0].day == date(2024, 3, 10)

    def test_grid_start(self):
        assert grid_start(date(2024, 3, 31)) == date(2024, 2, 25)

    def test_weeks(self, now):
        weeks = grid_weeks(build_grid(date(2024, 3, 1), [], now))
        assert len(weeks) == 6
        assert all(len(w) == 7 for w in weeks)
        assert all(w[0].day.weekday() == 6 for w in weeks)


class TestBucketing:
    def test_empty_collection_gives_empty_buckets(self, now):
        grid = build_grid(date(2024, 3, 1), [], now)
        assert all(d.tasks == [] for d in grid)
        assert all(d.indicator is DayIndicator.EMPTY for d in grid)

    def test_tasks_land_on_their_day_ignoring_time(self, now, make_task):
        morning = make_task(datetime(2024, 3, 20, 0, 5))
        night = make_task(datetime(2024, 3, 20, 23, 55))
        other = make_task(datetime(2024, 3, 21, 12, 0))
        undated = make_task(None)
        grid = build_grid(date(2024, 3, 1), [morning, night, other, undated], now)

        by_day = {d.day: d for d in grid}
        assert by_day[date(2024, 3, 20)].tasks == [morning, night]
        assert by_day[date(2024, 3, 21)].tasks == [other]
        assert sum(len(d.tasks) for d in grid) == 3

    def test_tasks_outside_grid_are_dropped(self, now, make_task):
        far = make_task(datetime(2025, 6, 1))
        grid = build_grid(date(2024, 3, 1), [far], now)
        assert all(d.tasks == [] for d in grid)

    def test_trailing_days_get_tasks(self, now, make_task):
        april = make_task(datetime(2024, 4, 3, 9, 0))
        grid = build_grid(date(2024, 3, 1), [april], now)
        cell = next(d for d in grid if d.day == date(2024, 4, 3))
        assert cell.in_month is False
        assert cell.tasks == [april]

    def test_bucket_by_day(self, now, make_task):
        a = make_task(datetime(2024, 3, 1, 8, 0))
        b = make_task("not a date")
        assert bucket_by_day([a, b], now) == {date(2024, 3, 1): [a]}

    def test_tasks_for_date(self, now, make_task):
        a = make_task(datetime(2024, 3, 10, 23, 0))
        b = make_task(datetime(2024, 3, 11, 0, 0))
        assert tasks_for_date([a, b], date(2024, 3, 10), now) == [a]


class TestIndicator:
    def test_overdue_wins(self, now, make_task):
        tasks = [make_task(datetime(2024, 3, 5)), make_task(datetime(2024, 3, 5), completed=True)]
        assert day_indicator(tasks, now) is DayIndicator.OVERDUE

    def test_due_today(self, now, make_task):
        assert day_indicator([make_task(datetime(2024, 3, 10, 7, 0))], now) is DayIndicator.DUE_TODAY

    def test_upcoming(self, now, make_task):
        assert day_indicator([make_task(datetime(2024, 3, 15))], now) is DayIndicator.UPCOMING

    def test_completed_tasks_are_ignored_but_kept(self, now, make_task):
        done = make_task(datetime(2024, 3, 5), completed=True)
        grid = build_grid(date(2024, 3, 1), [done], now)
        cell = next(d for d in grid if d.day == date(2024, 3, 5))
        assert cell.indicator is DayIndicator.EMPTY
        assert cell.tasks == [done]
        assert cell.open_tasks == []
        assert cell.badge == ""

    def test_grid_indicators(self, now, make_task):
        tasks = [
            make_task(datetime(2024, 3, 4, 12, 0)),
            make_task(datetime(2024, 3, 10, 8, 0)),
            make_task(datetime(2024, 3, 10, 8, 0), completed=True),
            make_task(datetime(2024, 3, 18, 12, 0)),
        ]
        by_day = {d.day: d for d in build_grid(date(2024, 3, 1), tasks, now)}
        assert by_day[date(2024, 3, 4)].indicator is DayIndicator.OVERDUE
        assert by_day[date(2024, 3, 10)].indicator is DayIndicator.DUE_TODAY
        assert by_day[date(2024, 3, 18)].indicator is DayIndicator.UPCOMING
        assert by_day[date(2024, 3, 19)].indicator is DayIndicator.EMPTY


class TestCalendarDay:
    def test_badge_caps_at_nine(self, now, make_task):
        day = CalendarDay(
            day=date(2024, 3, 12),
            in_month=True,
            is_today=False,
            tasks=[make_task(datetime(2024, 3, 12)) for _ in range(12)],
        )
        assert day.badge == "9+"

    def test_badge_count(self, now, make_task):
        day = CalendarDay(
            day=date(2024, 3, 12),
            in_month=True,
            is_today=False,
            tasks=[make_task(datetime(2024, 3, 12)), make_task(datetime(2024, 3, 12), completed=True)],
        )
        assert day.badge == "1"


class TestMonthNavigation:
    def test_shift_forward(self):
        assert shift_month(date(2024, 1, 31), 1) == date(2024, 2, 1)

    def test_shift_across_year(self):
        assert shift_month(date(2024, 12, 15), 1) == date(2025, 1, 1)
        assert shift_month(date(2024, 1, 15), -1) == date(2023, 12, 1)

    def test_shift_zero_goes_to_first(self):
        assert shift_month(date(2024, 5, 20), 0) == date(2024, 5, 1)

    def test_month_title(self):
        assert month_title(date(2024, 3, 1)) == "March 2024"
