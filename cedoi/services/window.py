"""Attendance window gate.

Writes are accepted from WINDOW_OPENS_BEFORE_MINUTES before a meeting starts
until WINDOW_CLOSES_AFTER_MINUTES after it starts, both ends inclusive.
Reading attendance is never gated.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta

from cedoi.core.constants import WINDOW_CLOSES_AFTER_MINUTES, WINDOW_OPENS_BEFORE_MINUTES
from cedoi.core.exceptions import WindowClosedError
from cedoi.core.utils import minutes_since, minutes_until, plural, to_utc
from cedoi.schemas import Meeting


@dataclass(frozen=True)
class WindowCheck:
    allowed: bool
    reason: str
    opens_at: datetime
    starts_at: datetime
    closes_at: datetime


def attendance_window(meeting: Meeting):
    """Return (opens_at, starts_at, closes_at) in UTC."""
    starts_at = to_utc(meeting.date)
    return (
        starts_at - timedelta(minutes=WINDOW_OPENS_BEFORE_MINUTES),
        starts_at,
        starts_at + timedelta(minutes=WINDOW_CLOSES_AFTER_MINUTES),
    )


def check_write_window(meeting: Meeting, now: datetime) -> WindowCheck:
    """Decide whether attendance writes are accepted at `now`, with a reason."""
    now = to_utc(now)
    opens_at, starts_at, closes_at = attendance_window(meeting)

    if now < opens_at:
        allowed = False
        reason = (
            f"Attendance opens in {plural(minutes_until(opens_at - now), 'minute')} "
            f"({WINDOW_OPENS_BEFORE_MINUTES} minutes before the meeting starts)."
        )
    elif now < starts_at:
        allowed = True
        reason = f"Meeting starts in {plural(minutes_until(starts_at - now), 'minute')}. Attendance is open."
    elif now <= closes_at:
        allowed = True
        reason = (
            f"Meeting started {plural(minutes_since(now - starts_at), 'minute')} ago. "
            f"Attendance closes in {plural(minutes_until(closes_at - now), 'minute')}."
        )
    else:
        allowed = False
        reason = f"Attendance closed {plural(minutes_since(now - closes_at), 'minute')} ago."

    return WindowCheck(allowed, reason, opens_at, starts_at, closes_at)


def is_write_allowed(meeting: Meeting, now: datetime) -> bool:
    return check_write_window(meeting, now).allowed


def ensure_write_allowed(meeting: Meeting, now: datetime) -> WindowCheck:
    """Raise WindowClosedError with the human-readable reason if writes are closed."""
    check = check_write_window(meeting, now)
    if not check.allowed:
        raise WindowClosedError(check.reason)
    return check
