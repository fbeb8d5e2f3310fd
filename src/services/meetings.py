"""
Recurring team meeting schedule.

Meetings follow a fixed 4-week cycle counted from MEETING_CYCLE_START:

    position 0: Thursday, Team 1
    position 1: Thursday, Team 2
    position 2: Tuesday,  Team 1
    position 3: Tuesday,  Team 2

Cycle weeks run Thursday to Wednesday, so the Tuesday of a position-2 week
falls 5 days after its Thursday.
"""

from dataclasses import replace
from datetime import date

from loguru import logger

from core.config import MEETING_CYCLE_START, MEETING_CYCLE_WEEKS
from core.dates import month_dates
from models.entries import MeetingOccurrence, MeetingOverride, Team

TUESDAY = 1
THURSDAY = 3

# cycle position -> (expected weekday, team)
CYCLE_SCHEDULE = {
    0: (THURSDAY, Team.TEAM_1),
    1: (THURSDAY, Team.TEAM_2),
    2: (TUESDAY, Team.TEAM_1),
    3: (TUESDAY, Team.TEAM_2),
}


def cycle_position(d: date, anchor: date = MEETING_CYCLE_START) -> int:
    """Index 0-3 of the cycle week containing d. Also defined before the anchor."""
    return ((d - anchor).days // 7) % MEETING_CYCLE_WEEKS


def occurrences_for_month(
    year: int, month: int, anchor: date = MEETING_CYCLE_START
) -> list[MeetingOccurrence]:
    """
    Generate the meetings of a month, ascending by date.

    Each call produces fresh ids; edits and cancellations applied to a
    previous result are not carried over.
    """
    occurrences = []
    for d in month_dates(year, month):
        weekday = d.weekday()
        if weekday not in (TUESDAY, THURSDAY):
            continue

        expected_weekday, team = CYCLE_SCHEDULE[cycle_position(d, anchor)]
        if weekday == expected_weekday:
            occurrences.append(MeetingOccurrence(date=d, team=team))

    return sorted(occurrences, key=lambda m: m.date)


def find_occurrence(occurrences: list[MeetingOccurrence], meeting_id: str) -> MeetingOccurrence | None:
    for meeting in occurrences:
        if meeting.id == meeting_id:
            return meeting
    return None


def edit_occurrence(
    occurrences: list[MeetingOccurrence], meeting_id: str, new_date: date
) -> list[MeetingOccurrence]:
    """
    Move a meeting to new_date. The new date is not checked against the cycle.

    Returns a new list sorted by date; an unknown id leaves it unchanged.
    """
    if find_occurrence(occurrences, meeting_id) is None:
        logger.warning(f"No meeting with id '{meeting_id}' to edit")
        return list(occurrences)

    updated = [replace(m, date=new_date) if m.id == meeting_id else m for m in occurrences]
    return sorted(updated, key=lambda m: m.date)


def cancel_occurrence(occurrences: list[MeetingOccurrence], meeting_id: str) -> list[MeetingOccurrence]:
    """Mark a meeting cancelled. Cancelled meetings stay in the list."""
    if find_occurrence(occurrences, meeting_id) is None:
        logger.warning(f"No meeting with id '{meeting_id}' to cancel")
        return list(occurrences)

    return [replace(m, is_cancelled=True) if m.id == meeting_id else m for m in occurrences]


def apply_overrides(
    occurrences: list[MeetingOccurrence],
    overrides: dict[tuple[date, Team], MeetingOverride],
) -> list[MeetingOccurrence]:
    """Re-apply stored edits/cancellations to a freshly generated month."""
    updated = []
    for meeting in occurrences:
        override = overrides.get((meeting.scheduled_date, meeting.team))
        if override is None:
            updated.append(meeting)
            continue
        updated.append(
            replace(
                meeting,
                date=override.new_date or meeting.date,
                is_cancelled=meeting.is_cancelled or override.is_cancelled,
            )
        )
    return sorted(updated, key=lambda m: m.date)
