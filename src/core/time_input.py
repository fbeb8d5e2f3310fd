"""
Time-of-day input sanitization.

Typed digits are turned into a 24-hour HH:MM value as the user types, so any
intermediate state ("1", "12", "12:3") is a valid result. Only a
5-character HH:MM value counts as a complete time.
"""

import re

MAX_HOUR = 23
MAX_MINUTE = 59


def format_time_input(raw) -> str:
    """
    Sanitize raw input to a partial or complete HH:MM string.

    Rules:
    1. Non-digits are discarded, at most 4 digits are kept
    2. Hour above 23 is replaced by "23" (once 2 digits are present)
    3. Minute above 59 is replaced by "59" (once 4 digits are present)
    4. ':' is inserted after the 2nd digit when there are more than 2

    Non-string input is converted with str() first, so 930 -> "23:0".

    Examples: "0965" -> "09:59", "2565" -> "23:59", "930" -> "23:0".
    """
    if raw is None:
        raw = ""
    digits = re.sub(r"\D", "", str(raw))[:4]

    hours = digits[:2]
    minutes = digits[2:]

    if len(hours) == 2 and int(hours) > MAX_HOUR:
        hours = str(MAX_HOUR)
    if len(minutes) == 2 and int(minutes) > MAX_MINUTE:
        minutes = str(MAX_MINUTE)

    if len(digits) > 2:
        return f"{hours}:{minutes}"
    return hours


def is_complete_time(value: str | None) -> bool:
    """Check for a complete, in-range HH:MM value."""
    if not isinstance(value, str) or not re.fullmatch(r"\d{2}:\d{2}", value):
        return False
    hours, minutes = value.split(":")
    return int(hours) <= MAX_HOUR and int(minutes) <= MAX_MINUTE


def to_minutes(value: str | None) -> int | None:
    """Minutes since midnight for a complete HH:MM value, else None."""
    if not is_complete_time(value):
        return None
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)
