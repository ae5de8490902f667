"""Notification projection.

Notifications are recomputed from current data on every request. Nothing is
stored, so there is no read state to sync and no delivery guarantee.
"""
from datetime import datetime, timedelta
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from cedoi.core.constants import (
    LOW_ATTENDANCE_MIN_ROSTER,
    LOW_ATTENDANCE_THRESHOLD_PERCENT,
    NEW_MEETING_LOOKBACK_HOURS,
    REMINDER_LEAD_MINUTES,
    URGENT_LEAD_MINUTES,
)
from cedoi.core.enums import MemberStatus, Role
from cedoi.core.utils import minutes_until, plural, to_utc
from cedoi.schemas import AttendanceRecord, Meeting, Notification, NotificationType, User
from cedoi.services.attendance import member_status
from cedoi.services.display import display_date, display_venue
from cedoi.services.reconciliation import build_roster, reconcile
from cedoi.storage import AttendanceStore

WELCOME_MESSAGES = {
    Role.CHAIRMAN: "You can create meetings and monitor live attendance",
    Role.SONAI: "You can mark attendance for meetings",
    Role.MEMBER: "Stay updated with meeting schedules and notifications",
}


def _reminders(meetings: Iterable[Meeting], now: datetime) -> List[Notification]:
    notifications = []
    for meeting in meetings:
        until_start = to_utc(meeting.date) - now
        venue = display_venue(meeting)

        if timedelta(minutes=URGENT_LEAD_MINUTES) < until_start <= timedelta(minutes=REMINDER_LEAD_MINUTES):
            notifications.append(Notification(
                id=f"reminder_{meeting.id}",
                type=NotificationType.MEETING_REMINDER,
                title="Upcoming Meeting",
                message=f"Meeting at {venue} starts in {plural(minutes_until(until_start), 'minute')}",
                timestamp=now,
                meeting_id=meeting.id,
                action_required=True,
            ))
        elif timedelta(0) < until_start <= timedelta(minutes=URGENT_LEAD_MINUTES):
            notifications.append(Notification(
                id=f"urgent_{meeting.id}",
                type=NotificationType.MEETING_REMINDER,
                title="Meeting Starting Now!",
                message=f"Meeting at {venue} is starting now",
                timestamp=now,
                meeting_id=meeting.id,
                action_required=True,
            ))
    return notifications


def _organizer_attendance(
    user: User,
    todays_meeting: Meeting,
    roster: List[User],
    records: List[AttendanceRecord],
    now: datetime,
) -> List[Notification]:
    summary = reconcile(todays_meeting.id, roster, records)
    status = member_status(summary, user.id)
    venue = display_venue(todays_meeting)

    if status is MemberStatus.PENDING:
        return [Notification(
            id=f"attendance_required_{todays_meeting.id}",
            type=NotificationType.ATTENDANCE_REQUIRED,
            title="Attendance Required",
            message=f"Please mark your attendance for today's meeting at {venue}",
            timestamp=now,
            meeting_id=todays_meeting.id,
            action_required=True,
        )]
    if status is MemberStatus.ABSENT:
        return [Notification(
            id=f"marked_absent_{todays_meeting.id}",
            type=NotificationType.ATTENDANCE_UPDATE,
            title="Marked as Absent",
            message="You are marked absent for today's meeting. Contact the organizer if this is incorrect.",
            timestamp=now,
            meeting_id=todays_meeting.id,
        )]
    return []


def _live_attendance(
    todays_meeting: Meeting,
    roster: List[User],
    records: List[AttendanceRecord],
    now: datetime,
) -> List[Notification]:
    summary = reconcile(todays_meeting.id, roster, records)
    if summary.roster_size == 0 or summary.present_count + summary.absent_count == 0:
        return []

    notifications = [Notification(
        id=f"live_attendance_{todays_meeting.id}",
        type=NotificationType.ATTENDANCE_UPDATE,
        title="Live Attendance Update",
        message=(
            f"{summary.present_count}/{summary.roster_size} members present "
            f"({summary.attendance_rate}%)"
        ),
        timestamp=now,
        meeting_id=todays_meeting.id,
    )]

    if (
        summary.attendance_rate < LOW_ATTENDANCE_THRESHOLD_PERCENT
        and summary.roster_size > LOW_ATTENDANCE_MIN_ROSTER
    ):
        notifications.append(Notification(
            id=f"low_attendance_{todays_meeting.id}",
            type=NotificationType.ATTENDANCE_UPDATE,
            title="Low Attendance Alert",
            message=f"Only {summary.attendance_rate}% attendance. Consider sending reminders.",
            timestamp=now,
            meeting_id=todays_meeting.id,
            action_required=True,
        ))
    return notifications


def _new_meetings(meetings: Iterable[Meeting], now: datetime, tz: ZoneInfo) -> List[Notification]:
    lookback = timedelta(hours=NEW_MEETING_LOOKBACK_HOURS)
    notifications = []
    for meeting in meetings:
        if meeting.created_at is None:
            continue
        created_at = to_utc(meeting.created_at)
        if now - created_at <= lookback and to_utc(meeting.date) > now:
            notifications.append(Notification(
                id=f"new_meeting_{meeting.id}",
                type=NotificationType.MEETING_CREATED,
                title="New Meeting Scheduled",
                message=f"Meeting scheduled for {display_date(meeting.date, tz)} at {display_venue(meeting)}",
                timestamp=created_at,
                meeting_id=meeting.id,
            ))
    return notifications


def generate_notifications(
    user: User,
    meetings: List[Meeting],
    todays_meeting: Optional[Meeting],
    roster: List[User],
    records: List[AttendanceRecord],
    now: datetime,
    tz: ZoneInfo,
) -> List[Notification]:
    """
    Build the notification list for one user.

    `records` are the attendance records of `todays_meeting`; they are ignored
    when there is no meeting today.
    """
    now = to_utc(now)
    notifications = _reminders(meetings, now)

    if todays_meeting is not None:
        if user.role is Role.SONAI:
            notifications.extend(_organizer_attendance(user, todays_meeting, roster, records, now))
        elif user.role is Role.CHAIRMAN:
            notifications.extend(_live_attendance(todays_meeting, roster, records, now))

    notifications.extend(_new_meetings(meetings, now, tz))

    if not notifications:
        notifications.append(Notification(
            id="welcome",
            type=NotificationType.MEETING_REMINDER,
            title="Welcome to CEDOI Forum",
            message=WELCOME_MESSAGES[user.role],
            timestamp=now,
        ))
    return notifications


def notifications_for_user(store: AttendanceStore, user: User, now: datetime, tz: ZoneInfo) -> List[Notification]:
    todays_meeting = store.get_todays_meeting(now, tz)
    records = store.get_attendance_for_meeting(todays_meeting.id) if todays_meeting else []
    return generate_notifications(
        user=user,
        meetings=store.get_all_meetings(),
        todays_meeting=todays_meeting,
        roster=build_roster(store.get_all_users()),
        records=records,
        now=now,
        tz=tz,
    )
