"""Quick-add parsing: pull an implied due date out of free-form task text."""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable

_KEYWORD_STRIP = re.compile(r"\b(today|tomorrow|next week|next month)\b", re.IGNORECASE)
_NUMERIC_STRIP = re.compile(r"\d{1,2}[/\-.]\d{1,2}")


@dataclass
class QuickAddResult:
    implied_date: datetime | None
    cleaned_title: str


@dataclass
class DateRule:
    """
    One matcher in the quick-add rule table.

    `resolve` returns the implied date, or None when the rule does not apply.
    """

    name: str
    resolve: Callable[[str, datetime], datetime | None]


def _keyword(phrase: str, shift: Callable[[datetime], datetime]) -> DateRule:
    def resolve(text: str, now: datetime) -> datetime | None:
        if phrase in text.lower():
            return shift(now)
        return None

    return DateRule(name=phrase, resolve=resolve)


def _roll_days(year: int, month: int, day: int) -> date:
    """date(year, month, day) where an out-of-range day spills into later months."""
    return date(year, month, 1) + timedelta(days=day - 1)


def add_month_overflowing(now: datetime) -> datetime:
    """Same day-of-month next month; Jan 31 becomes early March."""
    year, month = (now.year + 1, 1) if now.month == 12 else (now.year, now.month + 1)
    rolled = _roll_days(year, month, now.day)
    return datetime.combine(rolled, now.timetz())


def _numeric(name: str, separator: str) -> DateRule:
    pattern = re.compile(rf"(\d{{1,2}}){re.escape(separator)}(\d{{1,2}})")

    def resolve(text: str, now: datetime) -> datetime | None:
        match = pattern.search(text)
        if not match:
            return None
        month, day = int(match.group(1)), int(match.group(2))
        if not (1 <= month <= 12 and 1 <= day <= 31):
            return None

        candidate = datetime.combine(_roll_days(now.year, month, day), time(), tzinfo=now.tzinfo)
        if candidate < now:
            candidate = datetime.combine(
                _roll_days(now.year + 1, candidate.month, candidate.day),
                time(),
                tzinfo=now.tzinfo,
            )
        return candidate

    return DateRule(name=name, resolve=resolve)


# Evaluated top to bottom, first match wins.
DATE_RULES: list[DateRule] = [
    _keyword("today", lambda now: now),
    _keyword("tomorrow", lambda now: now + timedelta(days=1)),
    _keyword("next week", lambda now: now + timedelta(days=7)),
    _keyword("next month", add_month_overflowing),
    _numeric("month/day", "/"),
    _numeric("month-day", "-"),
    _numeric("month.day", "."),
]


def extract_date(text: str, now: datetime, rules: list[DateRule] | None = None) -> datetime | None:
    """Run the rule table against `text` and return the first implied date."""
    for rule in rules if rules is not None else DATE_RULES:
        result = rule.resolve(text, now)
        if result is not None:
            return result
    return None


def clean_title(text: str) -> str:
    """Strip date phrases from `text`; falls back to the raw text if nothing is left."""
    cleaned = _KEYWORD_STRIP.sub("", text)
    cleaned = _NUMERIC_STRIP.sub("", cleaned)
    cleaned = cleaned.strip()
    return cleaned or text


def parse_quick_add(text: str, now: datetime) -> QuickAddResult:
    """Parse quick-add input into an implied due date and a cleaned title."""
    return QuickAddResult(
        implied_date=extract_date(text, now),
        cleaned_title=clean_title(text),
    )
