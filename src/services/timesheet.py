"""
Calendar session: commands from the UI, recompute, and persistence.

The UI selects days, saves/removes hours, and edits/cancels meetings through
these functions. After each command it calls recompute() to get fresh
summaries, meetings and calendar markings.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ValidationError

from core.config import DB_PATH, ENTRIES_STORAGE_KEY, MEETING_OVERRIDES_STORAGE_KEY
from core.database import load_value, save_value
from core.dates import format_date_key, generate_week_anchors, parse_date_key
from core.logging import configure_logging
from core.time_input import format_time_input
from models.entries import (
    MeetingOccurrence,
    MeetingOverride,
    MonthSummary,
    SessionState,
    Team,
    WeekSummary,
    WorkEntry,
)
from services.aggregation import build_week_summaries, summarize_month
from services.meetings import (
    apply_overrides,
    cancel_occurrence,
    edit_occurrence,
    find_occurrence,
    occurrences_for_month,
)

DEFAULT_WEEK_NUMBER = 1


# =============================================================================
# SERIALIZATION
# =============================================================================


class StoredHours(BaseModel):
    """Stored start/end pair for one date."""

    start: str = ""
    end: str = ""


class StoredOverride(BaseModel):
    """Stored meeting override."""

    new_date: str | None = None
    is_cancelled: bool = False


def _load_json_object(text: str | None, what: str) -> dict:
    if not text:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Stored {what} are not valid JSON: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"Stored {what} are not a JSON object, got {type(data).__name__}")
        return {}
    return data


def serialize_entries(entries: dict[date, WorkEntry]) -> str:
    """Serialize entries as {"YYYY-MM-DD": {"start": ..., "end": ...}}."""
    data = {
        format_date_key(d): {"start": entry.start, "end": entry.end}
        for d, entry in sorted(entries.items())
    }
    return json.dumps(data)


def deserialize_entries(text: str | None) -> dict[date, WorkEntry]:
    """
    Parse stored entries, skipping anything malformed.

    Times are passed through the time parser again, so a tampered value like
    "99:99" comes back as "23:59".
    """
    entries = {}
    for key, value in _load_json_object(text, "entries").items():
        d = parse_date_key(key)
        if d is None or not isinstance(value, dict):
            logger.warning(f"Skipping malformed stored entry {key!r}")
            continue
        try:
            hours = StoredHours.model_validate(value)
        except ValidationError as e:
            logger.warning(f"Skipping invalid stored entry {key!r}: {e.error_count()} error(s)")
            continue
        entries[d] = WorkEntry(
            date=d, start=format_time_input(hours.start), end=format_time_input(hours.end)
        )
    return entries


def serialize_overrides(overrides: dict[tuple[date, Team], MeetingOverride]) -> str:
    """Serialize overrides as {"YYYY-MM-DD|TEAM_1": {"new_date": ..., "is_cancelled": ...}}."""
    data = {}
    for (scheduled, team), override in sorted(overrides.items(), key=lambda item: (item[0][0], item[0][1].name)):
        data[f"{format_date_key(scheduled)}|{team.name}"] = {
            "new_date": format_date_key(override.new_date) if override.new_date else None,
            "is_cancelled": override.is_cancelled,
        }
    return json.dumps(data)


def deserialize_overrides(text: str | None) -> dict[tuple[date, Team], MeetingOverride]:
    overrides = {}
    for key, value in _load_json_object(text, "meeting overrides").items():
        date_str, _, team_name = key.partition("|")
        scheduled = parse_date_key(date_str)
        if scheduled is None or team_name not in Team.__members__ or not isinstance(value, dict):
            logger.warning(f"Skipping malformed meeting override {key!r}")
            continue
        try:
            stored = StoredOverride.model_validate(value)
        except ValidationError as e:
            logger.warning(f"Skipping invalid meeting override {key!r}: {e.error_count()} error(s)")
            continue
        overrides[(scheduled, Team[team_name])] = MeetingOverride(
            new_date=parse_date_key(stored.new_date),
            is_cancelled=stored.is_cancelled,
        )
    return overrides


def load_entries(db_path: Path = DB_PATH) -> dict[date, WorkEntry]:
    return deserialize_entries(load_value(ENTRIES_STORAGE_KEY, db_path))


def save_entries(entries: dict[date, WorkEntry], db_path: Path = DB_PATH) -> bool:
    return save_value(ENTRIES_STORAGE_KEY, serialize_entries(entries), db_path)


def load_overrides(db_path: Path = DB_PATH) -> dict[tuple[date, Team], MeetingOverride]:
    return deserialize_overrides(load_value(MEETING_OVERRIDES_STORAGE_KEY, db_path))


def save_overrides(overrides: dict[tuple[date, Team], MeetingOverride], db_path: Path = DB_PATH) -> bool:
    return save_value(MEETING_OVERRIDES_STORAGE_KEY, serialize_overrides(overrides), db_path)


# =============================================================================
# SESSION COMMANDS
# =============================================================================


def start_session(db_path: Path | None = DB_PATH, setup_logging: bool = True) -> SessionState:
    """
    Create a session, loading stored entries and meeting overrides.

    Pass db_path=None for an in-memory session that never touches disk.
    """
    if setup_logging:
        configure_logging()

    state = SessionState(db_path=db_path)
    if db_path is not None:
        state.entries = load_entries(db_path)
        state.occurrence_overrides = load_overrides(db_path)
        logger.info(f"Loaded {len(state.entries)} entries from {db_path}")
    return state


def select_day(state: SessionState, d: date) -> WorkEntry:
    """Select a date and return its entry (an empty one if none is stored)."""
    state.selected_date = d
    return state.entries.get(d, WorkEntry(date=d))


def save_hours(state: SessionState, d: date, start: str | None, end: str | None) -> WorkEntry:
    """Store sanitized start/end times for a date and persist."""
    entry = WorkEntry(date=d, start=format_time_input(start), end=format_time_input(end))
    state.entries[d] = entry
    _persist_entries(state)
    return entry


def remove_hours(state: SessionState, d: date) -> None:
    """Delete the entry for a date. Missing dates are ignored."""
    if state.entries.pop(d, None) is not None:
        _persist_entries(state)


def load_meetings(state: SessionState, year: int, month: int) -> list[MeetingOccurrence]:
    """Generate the month's meetings and re-apply stored edits/cancellations."""
    state.occurrences = apply_overrides(occurrences_for_month(year, month), state.occurrence_overrides)
    return list(state.occurrences)


def edit_meeting(state: SessionState, meeting_id: str, new_date: date | str) -> list[MeetingOccurrence]:
    """Move a meeting. Date strings must be YYYY-MM-DD; anything else is ignored."""
    if isinstance(new_date, str):
        parsed = parse_date_key(new_date)
        if parsed is None:
            logger.warning(f"Ignoring meeting edit with invalid date {new_date!r}")
            return list(state.occurrences)
        new_date = parsed

    meeting = find_occurrence(state.occurrences, meeting_id)
    state.occurrences = edit_occurrence(state.occurrences, meeting_id, new_date)
    if meeting is not None:
        override = _override_for(state, meeting)
        override.new_date = new_date
        _persist_overrides(state)
    return list(state.occurrences)


def cancel_meeting(state: SessionState, meeting_id: str) -> list[MeetingOccurrence]:
    """Mark a meeting cancelled; it stays in the list."""
    meeting = find_occurrence(state.occurrences, meeting_id)
    state.occurrences = cancel_occurrence(state.occurrences, meeting_id)
    if meeting is not None:
        _override_for(state, meeting).is_cancelled = True
        _persist_overrides(state)
    return list(state.occurrences)


def _override_for(state: SessionState, meeting: MeetingOccurrence) -> MeetingOverride:
    key = (meeting.scheduled_date, meeting.team)
    return state.occurrence_overrides.setdefault(key, MeetingOverride())


def _persist_entries(state: SessionState) -> None:
    if state.db_path is not None:
        save_entries(state.entries, state.db_path)


def _persist_overrides(state: SessionState) -> None:
    if state.db_path is not None:
        save_overrides(state.occurrence_overrides, state.db_path)


# =============================================================================
# DERIVED VIEWS
# =============================================================================


@dataclass
class RecomputeResult:
    """Read-only views handed to the display layer."""

    week_summaries: list[WeekSummary]
    month_summary: MonthSummary
    occurrences: list[MeetingOccurrence]
    marked_dates: dict[str, dict] = field(default_factory=dict)


def build_marked_dates(entries: dict[date, WorkEntry], year: int) -> dict[str, dict]:
    """
    Calendar decorations keyed by YYYY-MM-DD.

    Week anchors carry their week number; dates with saved hours get the
    "has_hours" style on top (an anchor keeps its week number).
    """
    marked: dict[str, dict] = {}
    for anchor, week_number in generate_week_anchors(year):
        marked[format_date_key(anchor)] = {
            "starting_day": True,
            "week_number": week_number,
            "style": "week_start",
        }

    for d in entries:
        key = format_date_key(d)
        marked[key] = {**marked.get(key, {}), "style": "has_hours"}
    return marked


def header_week_number(marked_dates: dict[str, dict], d: date) -> int:
    """Week number shown in the calendar header; 1 when d isn't a marked anchor."""
    return marked_dates.get(format_date_key(d), {}).get("week_number", DEFAULT_WEEK_NUMBER)


def recompute(state: SessionState, year: int, month: int) -> RecomputeResult:
    """Rebuild every derived view for the displayed month from the session state."""
    week_summaries = build_week_summaries(state.entries)
    shown = {(m.scheduled_date.year, m.scheduled_date.month) for m in state.occurrences}
    if shown != {(year, month)}:
        load_meetings(state, year, month)

    return RecomputeResult(
        week_summaries=week_summaries,
        month_summary=summarize_month(week_summaries, year, month),
        occurrences=list(state.occurrences),
        marked_dates=build_marked_dates(state.entries, year),
    )
