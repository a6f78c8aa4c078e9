"""Temporal classification of due dates - no I/O, no clock reads."""

import logging
from datetime import date, datetime, time
from enum import Enum

logger = logging.getLogger(__name__)


class DueState(Enum):
    """Where a due date sits relative to a reference instant."""

    NO_DUE_DATE = "no_due_date"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    UPCOMING = "upcoming"


def parse_instant(value, reference: datetime | None = None) -> datetime | None:
    """
    Coerce a due value into a datetime comparable with `reference`.

    Accepts datetimes, dates (read as local midnight) and ISO-8601 strings.
    Anything else, or anything that fails to parse, is None.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"Ignoring malformed due date: {value!r}")
            return None
    else:
        return None

    if reference is None:
        return parsed
    return _align(parsed, reference)


def _align(due: datetime, now: datetime) -> datetime:
    """Put `due` in the same timezone frame as `now`."""
    if now.tzinfo is None:
        if due.tzinfo is None:
            return due
        # Aware due against a naive reference: use system local time
        return due.astimezone().replace(tzinfo=None)
    if due.tzinfo is None:
        return due.replace(tzinfo=now.tzinfo)
    return due.astimezone(now.tzinfo)


def local_date(due, now: datetime) -> date | None:
    """Calendar day `due` falls on, in the timezone of `now`."""
    parsed = parse_instant(due, now)
    return parsed.date() if parsed else None


def classify(due, now: datetime) -> DueState:
    """
    Classify a due date against `now`.

    A due time earlier today is DUE_TODAY, not OVERDUE: the same-day check
    wins over the past-instant check.
    """
    parsed = parse_instant(due, now)
    if parsed is None:
        return DueState.NO_DUE_DATE

    if parsed.date() == now.date():
        return DueState.DUE_TODAY
    if parsed < now:
        return DueState.OVERDUE
    return DueState.UPCOMING


def is_overdue(due, now: datetime) -> bool:
    return classify(due, now) is DueState.OVERDUE


def is_due_today(due, now: datetime) -> bool:
    return classify(due, now) is DueState.DUE_TODAY
