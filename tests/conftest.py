"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.entries import WorkEntry  # noqa: E402
from services.timesheet import start_session  # noqa: E402


def make_entries(rows):
    """Build an entry mapping from (date, start, end) tuples."""
    return {d: WorkEntry(date=d, start=start, end=end) for d, start, end in rows}


@pytest.fixture
def sample_entries():
    """Two full January 2025 weeks plus one partial entry."""
    return make_entries(
        [
            # ISO week 2: 5 x 6.5h = 32.5h
            (date(2025, 1, 6), "09:00", "15:30"),
            (date(2025, 1, 7), "09:00", "15:30"),
            (date(2025, 1, 8), "09:00", "15:30"),
            (date(2025, 1, 9), "09:00", "15:30"),
            (date(2025, 1, 10), "09:00", "15:30"),
            # ISO week 3: 5 x 5h = 25h
            (date(2025, 1, 13), "08:00", "13:00"),
            (date(2025, 1, 14), "08:00", "13:00"),
            (date(2025, 1, 15), "08:00", "13:00"),
            (date(2025, 1, 16), "08:00", "13:00"),
            (date(2025, 1, 17), "08:00", "13:00"),
            # Start only, never counted
            (date(2025, 1, 18), "10:00", ""),
        ]
    )


@pytest.fixture
def session():
    """In-memory session that never touches disk."""
    return start_session(db_path=None, setup_logging=False)


@pytest.fixture
def db_session(tmp_path):
    """Session persisted to a temporary SQLite file."""
    return start_session(db_path=tmp_path / "timesheet.db", setup_logging=False)
