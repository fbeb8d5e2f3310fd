"""
Display formatting and Excel export of a month's summaries and meetings.
"""

from datetime import date
from pathlib import Path

from loguru import logger
from openpyxl import Workbook
from openpyxl.styles import Font

from core.config import MEETING_SHEET_HEADERS, MONTH_SHEET_HEADERS, OUTPUT_DIR
from models.entries import MeetingOccurrence, MonthSummary, Team, WeekSummary


def format_hours(hours: float) -> str:
    """Format hours with two decimals (e.g., '8.50 hours')."""
    return f"{hours:.2f} hours"


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def format_meeting_date(d: date) -> str:
    """Format date as 'Thu, Jan 2'."""
    return f"{d.strftime('%a')}, {d.strftime('%b')} {d.day}"


def format_month_title(year: int, month: int) -> str:
    """'Monthly Summary - January 2025'."""
    return f"Monthly Summary - {date(year, month, 1).strftime('%B')} {year}"


def team_label(team: Team) -> str:
    return team.value


def month_report_filename(year: int, month: int) -> str:
    """Report file name, e.g. timesheet_monthly_report_2025_01.xlsx."""
    return f"timesheet_monthly_report_{year}_{month:02d}.xlsx"


def write_week_summary_sheet(ws, month_summary: MonthSummary):
    """
    Write the weekly breakdown of a month followed by monthly totals.

    Rows: one per week attributed to the month, then "Monthly Total" and
    "Monthly Overtime".
    """
    for col_idx, header in enumerate(MONTH_SHEET_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    row_idx = 2
    for week in month_summary.weeks:
        row_data = [
            f"Week {week.week_number}",
            format_date_display(week.dates[0]),
            len(week.dates),
            round(week.total_hours, 2),
            round(week.overtime_hours, 2),
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)
        row_idx += 1

    # Totals, one blank row below the weeks
    row_idx += 1
    ws.cell(row=row_idx, column=1, value="Monthly Total").font = Font(bold=True)
    ws.cell(row=row_idx, column=4, value=round(month_summary.total_hours, 2))
    ws.cell(row=row_idx + 1, column=1, value="Monthly Overtime").font = Font(bold=True)
    ws.cell(row=row_idx + 1, column=5, value=round(month_summary.overtime_hours, 2))


def write_meetings_sheet(ws, occurrences: list[MeetingOccurrence]):
    """Write team meetings: date, team, and Scheduled/Cancelled status."""
    for col_idx, header in enumerate(MEETING_SHEET_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, meeting in enumerate(occurrences, start=2):
        ws.cell(row=row_idx, column=1, value=format_meeting_date(meeting.date))
        ws.cell(row=row_idx, column=2, value=team_label(meeting.team))
        ws.cell(row=row_idx, column=3, value="Cancelled" if meeting.is_cancelled else "Scheduled")


def create_month_excel_report(
    week_summaries: list[WeekSummary],
    month_summary: MonthSummary,
    occurrences: list[MeetingOccurrence],
    output_path: Path | None = None,
) -> Path:
    """
    Create Excel report for one month with two sheets.

    Sheet 1: "Weekly Summary" - weeks of the month plus monthly totals
    Sheet 2: "Team Meetings" - the month's meetings, cancelled ones included

    Saved to OUTPUT_DIR/timesheet_monthly_report_YYYY_MM.xlsx unless output_path
    is given. Returns the path written.
    """
    if output_path is None:
        output_path = OUTPUT_DIR / month_report_filename(month_summary.year, month_summary.month)

    wb = Workbook()

    ws_weeks = wb.active
    ws_weeks.title = "Weekly Summary"
    write_week_summary_sheet(ws_weeks, month_summary)

    ws_meetings = wb.create_sheet(title="Team Meetings")
    write_meetings_sheet(ws_meetings, occurrences)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    logger.info(
        f"Saved {format_month_title(month_summary.year, month_summary.month)} to: {output_path} "
        f"({len(month_summary.weeks)} of {len(week_summaries)} weeks, {len(occurrences)} meetings)"
    )
    return output_path
