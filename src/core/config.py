"""
Configuration constants and environment setup.
"""

import os
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("TIMESHEET_DB_PATH", str(PROJECT_ROOT / "data" / "db" / "timesheet-calendar.db"))
)
OUTPUT_DIR = Path(os.environ.get("OUTPUT_DIR", str(PROJECT_ROOT / "output")))

# =============================================================================
# STORAGE KEYS
# =============================================================================

ENTRIES_STORAGE_KEY = "workingHoursByDate"
MEETING_OVERRIDES_STORAGE_KEY = "teamMeetingOverrides"

# =============================================================================
# HOURS CONFIGURATION
# =============================================================================

WEEKLY_OVERTIME_THRESHOLD = float(os.environ.get("WEEKLY_OVERTIME_THRESHOLD", "30"))

# Negative durations (end before start) pass through unless this is enabled
WRAP_OVERNIGHT_SHIFTS = os.environ.get("WRAP_OVERNIGHT_SHIFTS", "false").lower() == "true"

# Bucket weeks by (ISO year, week) instead of week number alone
KEY_WEEKS_BY_YEAR = os.environ.get("KEY_WEEKS_BY_YEAR", "true").lower() == "true"

# =============================================================================
# TEAM MEETING CONFIGURATION
# =============================================================================

MEETING_CYCLE_START = date(2025, 1, 2)  # first Thursday of 2025, cycle position 0
MEETING_CYCLE_WEEKS = 4

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

WEEK_ANCHOR_COUNT = 52

MONTH_SHEET_HEADERS = ["Week", "First Date", "Dates", "Total Hours", "Overtime Hours"]
MEETING_SHEET_HEADERS = ["Date", "Team", "Status"]

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FILE = os.environ.get("LOG_FILE", "")
