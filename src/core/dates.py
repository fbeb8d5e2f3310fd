"""
Calendar date helpers: ISO week numbers, week anchors, date keys.
"""

import calendar
from datetime import date, timedelta

from core.config import WEEK_ANCHOR_COUNT


def iso_week_number(d: date) -> int:
    """ISO-8601 week number (1-53). Dec 29-31 may be week 1 of the next year."""
    return d.isocalendar()[1]


def iso_week_key(d: date) -> tuple[int, int]:
    """Return (ISO year, ISO week) for a date."""
    iso = d.isocalendar()
    return (iso[0], iso[1])


def first_monday_of_year(year: int) -> date:
    """First date on or after Jan 1 that is a Monday."""
    d = date(year, 1, 1)
    return d + timedelta(days=(7 - d.weekday()) % 7)


def generate_week_anchors(year: int, count: int = WEEK_ANCHOR_COUNT) -> list[tuple[date, int]]:
    """
    Week start markers for a calendar view.

    Starts at the first Monday of the year and steps 7 days at a time. Each
    anchor is tagged with its ISO week number. Aggregation never reads these;
    it recomputes the week number from each entry's own date.
    """
    start = first_monday_of_year(year)
    anchors = []
    for week in range(count):
        d = start + timedelta(weeks=week)
        anchors.append((d, iso_week_number(d)))
    return anchors


def format_date_key(d: date) -> str:
    """Format date as YYYY-MM-DD (storage and marked-date key)."""
    return d.isoformat()


def parse_date_key(value) -> date | None:
    """Parse a YYYY-MM-DD key. Returns None for anything malformed."""
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_dates(year: int, month: int) -> list[date]:
    """All dates of a calendar month, ascending."""
    return [date(year, month, day) for day in range(1, days_in_month(year, month) + 1)]
