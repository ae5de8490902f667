"""Attendance statistics."""
from typing import Iterable, Optional, Tuple

from cedoi.core.enums import AttendanceStatus
from cedoi.core.utils import percent
from cedoi.schemas import AttendanceRecord, EntityId, StatsResponse
from cedoi.storage import AttendanceStore


def _dedupe(records: Iterable[AttendanceRecord]) -> dict:
    """One record per (meeting, user), the last one winning."""
    latest = {}
    for record in records:
        latest[(str(record.meeting_id), str(record.user_id))] = record
    return latest


def _count(records: Iterable[AttendanceRecord]) -> Tuple[int, int]:
    present = absent = 0
    for record in records:
        if record.status is AttendanceStatus.PRESENT:
            present += 1
        else:
            absent += 1
    return present, absent


def get_attendance_stats(store: AttendanceStore, user_id: Optional[EntityId] = None) -> StatsResponse:
    """
    Forum-wide or per-member attendance totals.

    Forum-wide, totalMeetings counts every meeting. For a member it counts the
    meetings that member has a record for. averageAttendance is the share of
    marked records that are present, as a whole percent.
    """
    if user_id is None:
        meetings = store.get_all_meetings()
        records = []
        for meeting in meetings:
            records.extend(store.get_attendance_for_meeting(meeting.id))
        latest = _dedupe(records)
        total_meetings = len(meetings)
    else:
        latest = _dedupe(store.get_attendance_for_user(user_id))
        total_meetings = len({meeting_id for meeting_id, _ in latest})

    present, absent = _count(latest.values())
    return StatsResponse(
        total_meetings=total_meetings,
        average_attendance=percent(present, present + absent),
        present_count=present,
        absent_count=absent,
    )
