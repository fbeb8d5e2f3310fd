import json
from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from core.config import ENTRIES_STORAGE_KEY
from core.database import load_value, save_value
from models.entries import Team, WorkEntry
from services.timesheet import (
    build_marked_dates,
    cancel_meeting,
    deserialize_entries,
    edit_meeting,
    header_week_number,
    load_meetings,
    recompute,
    remove_hours,
    save_hours,
    select_day,
    serialize_entries,
    start_session,
)


def test_select_day_returns_empty_entry_for_new_date(session):
    entry = select_day(session, date(2025, 1, 6))

    assert session.selected_date == date(2025, 1, 6)
    assert entry == WorkEntry(date=date(2025, 1, 6), start="", end="")


def test_save_hours_sanitizes_input(session):
    entry = save_hours(session, date(2025, 1, 6), "0900", "2565")

    assert entry.start == "09:00"
    assert entry.end == "23:59"
    assert select_day(session, date(2025, 1, 6)) == entry


def test_remove_hours(session):
    save_hours(session, date(2025, 1, 6), "09:00", "17:00")
    remove_hours(session, date(2025, 1, 6))
    remove_hours(session, date(2025, 1, 7))

    assert session.entries == {}


def test_recompute_after_each_mutation(session):
    save_hours(session, date(2025, 1, 6), "09:00", "17:30")
    result = recompute(session, 2025, 1)
    assert result.month_summary.total_hours == 8.5

    save_hours(session, date(2025, 1, 7), "09:00", "17:30")
    result = recompute(session, 2025, 1)
    assert [w.total_hours for w in result.week_summaries] == [17]

    remove_hours(session, date(2025, 1, 6))
    result = recompute(session, 2025, 1)
    assert result.month_summary.total_hours == 8.5
    assert len(result.occurrences) == 5


def test_recompute_switches_meeting_month(session):
    assert recompute(session, 2025, 1).occurrences[0].date == date(2025, 1, 2)
    assert recompute(session, 2025, 2).occurrences[0].date == date(2025, 2, 6)


def test_marked_dates():
    entries = {
        date(2025, 1, 6): WorkEntry(date=date(2025, 1, 6), start="09:00", end="17:00"),
        date(2025, 1, 8): WorkEntry(date=date(2025, 1, 8), start="09:00", end=""),
    }
    marked = build_marked_dates(entries, 2025)

    # Anchor with hours keeps its week number
    assert marked["2025-01-06"] == {"starting_day": True, "week_number": 2, "style": "has_hours"}
    assert marked["2025-01-13"] == {"starting_day": True, "week_number": 3, "style": "week_start"}
    assert marked["2025-01-08"] == {"style": "has_hours"}


def test_header_week_number_defaults_to_one():
    marked = build_marked_dates({}, 2025)

    assert header_week_number(marked, date(2025, 1, 13)) == 3
    assert header_week_number(marked, date(2025, 1, 14)) == 1


def test_entries_persist_across_sessions(db_session):
    save_hours(db_session, date(2025, 1, 6), "09:00", "17:30")
    save_hours(db_session, date(2025, 1, 7), "10:00", "")

    reloaded = start_session(db_path=db_session.db_path, setup_logging=False)

    assert reloaded.entries == db_session.entries
    assert recompute(reloaded, 2025, 1).month_summary.total_hours == 8.5


def test_serialized_format():
    entries = {date(2025, 1, 6): WorkEntry(date=date(2025, 1, 6), start="09:00", end="17:30")}

    assert json.loads(serialize_entries(entries)) == {"2025-01-06": {"start": "09:00", "end": "17:30"}}


def test_deserialize_skips_malformed_entries():
    text = json.dumps(
        {
            "2025-01-06": {"start": "09:00", "end": "17:30"},
            "not-a-date": {"start": "09:00", "end": "17:30"},
            "2025-01-07": "09:00-17:30",
            "2025-01-08": {"start": 900, "end": "17:30"},
            "2025-01-09": {"start": "9999"},
        }
    )

    entries = deserialize_entries(text)

    assert sorted(entries) == [date(2025, 1, 6), date(2025, 1, 9)]
    assert entries[date(2025, 1, 9)] == WorkEntry(date=date(2025, 1, 9), start="23:59", end="")


def test_deserialize_tolerates_garbage():
    assert deserialize_entries(None) == {}
    assert deserialize_entries("") == {}
    assert deserialize_entries("{not json") == {}
    assert deserialize_entries("[1, 2, 3]") == {}


def test_corrupt_store_loads_empty_session(tmp_path):
    db_path = tmp_path / "timesheet.db"
    save_value(ENTRIES_STORAGE_KEY, "{broken", db_path)

    assert start_session(db_path=db_path, setup_logging=False).entries == {}


def test_unwritable_store_keeps_memory_state(tmp_path):
    # A directory can't be opened as a database file
    state = start_session(db_path=tmp_path, setup_logging=False)
    save_hours(state, date(2025, 1, 6), "09:00", "17:00")

    assert date(2025, 1, 6) in state.entries


def test_cancel_meeting_kept_across_regeneration(db_session):
    meetings = load_meetings(db_session, 2025, 1)
    cancel_meeting(db_session, meetings[1].id)

    regenerated = load_meetings(db_session, 2025, 1)
    assert [m.is_cancelled for m in regenerated] == [False, True, False, False, False]
    assert regenerated[1].team == Team.TEAM_2

    reloaded = start_session(db_path=db_session.db_path, setup_logging=False)
    assert load_meetings(reloaded, 2025, 1)[1].is_cancelled


def test_edit_meeting_accepts_date_string(db_session):
    meetings = load_meetings(db_session, 2025, 1)

    edit_meeting(db_session, meetings[0].id, "2025-01-03")

    assert db_session.occurrences[0].date == date(2025, 1, 3)
    assert load_meetings(db_session, 2025, 1)[0].date == date(2025, 1, 3)
    assert load_value("teamMeetingOverrides", db_session.db_path) is not None


def test_edit_meeting_ignores_invalid_date(session):
    meetings = load_meetings(session, 2025, 1)

    edit_meeting(session, meetings[0].id, "next thursday")

    assert session.occurrences[0].date == date(2025, 1, 2)
    assert session.occurrence_overrides == {}


def test_returned_entry_cannot_change_session(session):
    save_hours(session, date(2025, 1, 6), "09:00", "17:00")
    entry = select_day(session, date(2025, 1, 6))

    with pytest.raises(FrozenInstanceError):
        entry.end = "18:00"

    assert session.entries[date(2025, 1, 6)].end == "17:00"


def test_returned_meetings_cannot_change_session(session):
    result = recompute(session, 2025, 1)

    with pytest.raises(FrozenInstanceError):
        result.occurrences[0].is_cancelled = True
    result.occurrences.clear()
    load_meetings(session, 2025, 1).clear()

    assert len(session.occurrences) == 5
    assert not any(m.is_cancelled for m in session.occurrences)
    assert session.occurrence_overrides == {}
