"""
Weekly and monthly hour aggregation.

Everything here is a pure function of the entry mapping and is re-run in full
after every change.
"""

from collections import defaultdict
from datetime import date

from core.config import KEY_WEEKS_BY_YEAR, WEEKLY_OVERTIME_THRESHOLD, WRAP_OVERNIGHT_SHIFTS
from core.dates import iso_week_key
from core.hours import calculate_hours_worked, calculate_overtime
from models.entries import MonthSummary, WeekSummary, WorkEntry


def build_week_summaries(
    entries: dict[date, WorkEntry],
    threshold: float = WEEKLY_OVERTIME_THRESHOLD,
    key_by_year: bool = KEY_WEEKS_BY_YEAR,
    wrap_overnight: bool = WRAP_OVERNIGHT_SHIFTS,
) -> list[WeekSummary]:
    """
    Group complete entries into ISO week buckets.

    Entries missing a start or end time are skipped entirely. With
    key_by_year, buckets are keyed by (ISO year, week); without it, by week
    number alone, so the same week number from different years is merged.

    Returns summaries sorted by week (and ISO year when keyed by year), each
    with ascending dates and month/year taken from its first date.
    """
    hours_by_week: dict = defaultdict(float)
    dates_by_week: dict = defaultdict(list)

    for entry_date, entry in entries.items():
        if not entry.is_complete:
            continue

        iso_year, week = iso_week_key(entry_date)
        key = (iso_year, week) if key_by_year else week

        hours_by_week[key] += calculate_hours_worked(entry.start, entry.end, wrap_overnight)
        dates_by_week[key].append(entry_date)

    summaries = []
    for key in sorted(hours_by_week):
        week = key[1] if key_by_year else key
        dates = sorted(dates_by_week[key])
        total = hours_by_week[key]
        summaries.append(
            WeekSummary(
                week_number=week,
                total_hours=total,
                overtime_hours=calculate_overtime(total, threshold),
                dates=dates,
                month=dates[0].month,
                year=dates[0].year,
            )
        )
    return summaries


def weeks_in_month(week_summaries: list[WeekSummary], year: int, month: int) -> list[WeekSummary]:
    """Weeks attributed to year/month: those whose first date falls in it."""
    return [w for w in week_summaries if w.dates and w.year == year and w.month == month]


def summarize_month(
    week_summaries: list[WeekSummary],
    year: int,
    month: int,
    threshold: float = WEEKLY_OVERTIME_THRESHOLD,
) -> MonthSummary:
    """
    Monthly totals over the weeks attributed to the month.

    A week straddling a month boundary counts wholly toward the month of its
    first date. Overtime is measured against threshold * number of weeks.
    """
    weeks = weeks_in_month(week_summaries, year, month)
    total = sum(w.total_hours for w in weeks)
    return MonthSummary(
        year=year,
        month=month,
        total_hours=total,
        overtime_hours=calculate_overtime(total, threshold * len(weeks)),
        weeks=weeks,
    )
