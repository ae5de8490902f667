"""Display fallbacks for optional fields.

Every surface that renders a user or meeting (reports, notifications) goes
through these helpers; nothing else substitutes defaults for missing values.
"""
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from cedoi.core.constants import DEFAULT_VENUE
from cedoi.core.enums import MemberStatus, Role
from cedoi.core.utils import to_timezone
from cedoi.schemas import Meeting, User

UNKNOWN_NAME = "Unknown member"
UNKNOWN_COMPANY = "-"
NO_AGENDA = "No agenda"

ROLE_LABELS = {
    Role.CHAIRMAN: "Chairman",
    Role.SONAI: "Organizer",
    Role.MEMBER: "Member",
}

STATUS_LABELS = {
    MemberStatus.PRESENT: "Present",
    MemberStatus.ABSENT: "Absent",
    MemberStatus.PENDING: "Pending",
}


def _text(value: Optional[str], fallback: str) -> str:
    if value is None:
        return fallback
    value = value.strip()
    return value or fallback


def display_name(user: User) -> str:
    return _text(user.name, UNKNOWN_NAME)


def display_company(user: User) -> str:
    return _text(user.company, UNKNOWN_COMPANY)


def display_venue(meeting: Meeting) -> str:
    return _text(meeting.venue, DEFAULT_VENUE)


def display_agenda(meeting: Meeting) -> str:
    return _text(meeting.agenda, NO_AGENDA)


def display_date(value: datetime, tz: ZoneInfo) -> str:
    return to_timezone(value, tz).strftime("%d %b %Y")


def display_time(value: datetime, tz: ZoneInfo) -> str:
    return to_timezone(value, tz).strftime("%I:%M %p")


def display_datetime(value: datetime, tz: ZoneInfo) -> str:
    return f"{display_date(value, tz)}, {display_time(value, tz)}"
