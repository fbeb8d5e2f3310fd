"""
Data models for work entries, summaries and team meetings.

Summaries are derived values: rebuilt from the entries on every change and
never persisted on their own.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path

from core.time_input import is_complete_time


@dataclass(frozen=True)
class WorkEntry:
    """Start/end times entered for one date. Empty string means not set."""

    date: date
    start: str = ""
    end: str = ""

    @property
    def is_complete(self) -> bool:
        return is_complete_time(self.start) and is_complete_time(self.end)


@dataclass
class WeekSummary:
    """Hours of one ISO week. month/year come from the week's first date."""

    week_number: int
    total_hours: float = 0.0
    overtime_hours: float = 0.0
    dates: list[date] = field(default_factory=list)
    month: int = 0
    year: int = 0


@dataclass
class MonthSummary:
    """Rollup of the weeks whose first date falls in year/month."""

    year: int
    month: int
    total_hours: float = 0.0
    overtime_hours: float = 0.0
    weeks: list[WeekSummary] = field(default_factory=list)


class Team(Enum):
    TEAM_1 = "Team 1"
    TEAM_2 = "Team 2"


def generate_meeting_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class MeetingOccurrence:
    """One generated team meeting. ids are only stable within one generation."""

    date: date
    team: Team
    is_cancelled: bool = False
    id: str = field(default_factory=generate_meeting_id)
    # Date the cycle rule produced; edits change `date` but never this
    scheduled_date: date | None = None

    def __post_init__(self):
        if self.scheduled_date is None:
            object.__setattr__(self, "scheduled_date", self.date)


@dataclass
class MeetingOverride:
    """User edit/cancel of a generated meeting, keyed by (scheduled date, team)."""

    new_date: date | None = None
    is_cancelled: bool = False


@dataclass
class SessionState:
    """Everything one calendar session owns. Passed explicitly to the services."""

    entries: dict[date, WorkEntry] = field(default_factory=dict)
    occurrences: list[MeetingOccurrence] = field(default_factory=list)
    occurrence_overrides: dict[tuple[date, Team], MeetingOverride] = field(default_factory=dict)
    selected_date: date | None = None
    db_path: Path | None = None
