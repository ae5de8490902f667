"""Attendance exports: per-meeting CSV and printable HTML, and the member report."""
import csv
import io
from datetime import datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from jinja2 import Environment, PackageLoader, select_autoescape

from cedoi.core.constants import REPORT_PERIODS
from cedoi.core.enums import AttendanceStatus
from cedoi.core.exceptions import ValidationError
from cedoi.core.utils import percent, to_utc
from cedoi.schemas import AttendanceSummary, Meeting, MemberReportRow
from cedoi.services.display import (
    ROLE_LABELS,
    STATUS_LABELS,
    display_agenda,
    display_company,
    display_date,
    display_datetime,
    display_name,
    display_time,
    display_venue,
)
from cedoi.services.reconciliation import build_roster
from cedoi.storage import AttendanceStore

REPORT_TITLE = "CEDOI Madurai Forum - Attendance Report"
MEMBER_COLUMNS = ["Name", "Company", "Role", "Attendance Status"]

_templates = Environment(
    loader=PackageLoader("cedoi", "templates"),
    autoescape=select_autoescape(["html"]),
)


def _report_context(meeting: Meeting, summary: AttendanceSummary, generated_at: datetime, tz: ZoneInfo) -> dict:
    """Fields shared by the CSV and HTML exports."""
    return {
        "title": REPORT_TITLE,
        "meeting_date": display_date(meeting.date, tz),
        "meeting_time": display_time(meeting.date, tz),
        "venue": display_venue(meeting),
        "theme": display_agenda(meeting),
        "generated_at": display_datetime(generated_at, tz),
        "summary": summary,
        "rows": [
            {
                "name": display_name(entry.user),
                "company": display_company(entry.user),
                "role": ROLE_LABELS[entry.user.role],
                "status": STATUS_LABELS[entry.status],
                "status_key": entry.status.value,
            }
            for entry in summary.members
        ],
    }


def export_meeting_csv(meeting: Meeting, summary: AttendanceSummary, generated_at: datetime, tz: ZoneInfo) -> str:
    """
    CSV export of one meeting: a header block, a blank line, then one row per
    roster member. Every field is quoted so commas in names survive.
    """
    context = _report_context(meeting, summary, generated_at, tz)
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL)

    writer.writerow([context["title"]])
    writer.writerow(["Meeting Date", context["meeting_date"]])
    writer.writerow(["Meeting Time", context["meeting_time"]])
    writer.writerow(["Venue", context["venue"]])
    writer.writerow(["Theme", context["theme"]])
    writer.writerow(["Generated At", context["generated_at"]])
    writer.writerow(["Total Members", summary.roster_size])
    writer.writerow(["Present", summary.present_count])
    writer.writerow(["Absent", summary.absent_count])
    writer.writerow(["Pending", summary.pending_count])
    writer.writerow(["Completion", f"{summary.completion_percentage}%"])
    writer.writerow(["Attendance Rate", f"{summary.attendance_rate}%"])
    writer.writerow([])

    writer.writerow(MEMBER_COLUMNS)
    for row in context["rows"]:
        writer.writerow([row["name"], row["company"], row["role"], row["status"]])

    return buffer.getvalue()


def render_meeting_html(meeting: Meeting, summary: AttendanceSummary, generated_at: datetime, tz: ZoneInfo) -> str:
    """Standalone printable HTML document with the same fields as the CSV."""
    template = _templates.get_template("attendance_report.html")
    return template.render(**_report_context(meeting, summary, generated_at, tz))


def report_filename(meeting: Meeting, tz: ZoneInfo, extension: str) -> str:
    local_date = meeting.date.astimezone(tz).strftime("%Y-%m-%d")
    return f"attendance-report-{local_date}.{extension}"


def member_report(store: AttendanceStore, period: str, now: datetime) -> List[MemberReportRow]:
    """
    Per-member attendance rates over the meetings in `period`.

    The rate is present meetings over all meetings in the period, so an
    unmarked meeting counts against the member. Sorted best first.
    """
    if period not in REPORT_PERIODS:
        raise ValidationError(f"Unknown period {period!r}. Expected one of: {', '.join(REPORT_PERIODS)}")

    days: Optional[int] = REPORT_PERIODS[period]
    now = to_utc(now)
    meetings = store.get_all_meetings()
    if days is not None:
        cutoff = now - timedelta(days=days)
        meetings = [m for m in meetings if cutoff <= to_utc(m.date) <= now]

    present_pairs = set()
    for meeting in meetings:
        for record in store.get_attendance_for_meeting(meeting.id):
            key = (str(meeting.id), str(record.user_id))
            if record.status is AttendanceStatus.PRESENT:
                present_pairs.add(key)
            else:
                present_pairs.discard(key)

    rows = []
    for user in build_roster(store.get_all_users()):
        present_count = sum(1 for meeting in meetings if (str(meeting.id), str(user.id)) in present_pairs)
        rows.append(MemberReportRow(
            user_id=user.id,
            name=display_name(user),
            company=display_company(user),
            role=user.role,
            present_count=present_count,
            total_meetings=len(meetings),
            attendance_rate=percent(present_count, len(meetings)),
        ))

    rows.sort(key=lambda row: (-row.attendance_rate, row.name.lower()))
    return rows


def export_member_report_csv(rows: List[MemberReportRow]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL)
    writer.writerow(["Name", "Company", "Role", "Present", "Total Meetings", "Attendance Rate"])
    for row in rows:
        writer.writerow([
            row.name,
            row.company,
            ROLE_LABELS[row.role],
            row.present_count,
            row.total_meetings,
            f"{row.attendance_rate}%",
        ])
    return buffer.getvalue()
