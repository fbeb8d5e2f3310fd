"""
Worked hours and overtime rules.
"""

from core.config import WRAP_OVERNIGHT_SHIFTS
from core.time_input import to_minutes

MINUTES_PER_DAY = 24 * 60


def calculate_hours_worked(
    start: str | None, end: str | None, wrap_overnight: bool = WRAP_OVERNIGHT_SHIFTS
) -> float:
    """
    Hours between two HH:MM values as a decimal (09:00-17:30 -> 8.5).

    Missing or incomplete values contribute 0.0. An end before the start
    yields a negative duration unless wrap_overnight is set, in which case
    the end is treated as the next day.
    """
    start_minutes = to_minutes(start)
    end_minutes = to_minutes(end)
    if start_minutes is None or end_minutes is None:
        return 0.0

    minutes = end_minutes - start_minutes
    if minutes < 0 and wrap_overnight:
        minutes += MINUTES_PER_DAY
    return minutes / 60


def calculate_overtime(total_hours: float, threshold: float) -> float:
    """Hours above the threshold, never negative."""
    return max(0.0, total_hours - threshold)
