"""Attendance reconciliation.

Turns a meeting's roster and its stored records into the single canonical
view that the live monitor, dashboard, mobile list and exports all render.
Pure functions only: no storage access, no clock.
"""
from typing import Dict, Iterable, List

from cedoi.core.enums import MemberStatus, is_roster_role
from cedoi.core.utils import percent
from cedoi.schemas import AttendanceRecord, AttendanceSummary, EntityId, MemberAttendance, User


def build_roster(users: Iterable[User]) -> List[User]:
    """Users that can be marked for a meeting: members and organizers."""
    return [user for user in users if is_roster_role(user.role)]


def latest_records_by_user(records: Iterable[AttendanceRecord]) -> Dict[str, AttendanceRecord]:
    """
    Map user id -> record, later records overwriting earlier ones.

    Keys are stringified ids so int and str ids from different sources compare equal.
    """
    by_user: Dict[str, AttendanceRecord] = {}
    for record in records:
        by_user[str(record.user_id)] = record
    return by_user


def _sort_key(entry: MemberAttendance):
    return ((entry.user.name or "").lower(), str(entry.user.id))


def reconcile(
    meeting_id: EntityId,
    roster: Iterable[User],
    records: Iterable[AttendanceRecord],
) -> AttendanceSummary:
    """
    Derive per-member status, counts and percentages for one meeting.

    Members without a record are pending, never absent. Records for users
    outside the roster are ignored, so present + absent + pending always
    equals the roster size.
    """
    by_user = latest_records_by_user(records)

    partitions: Dict[MemberStatus, List[MemberAttendance]] = {status: [] for status in MemberStatus}
    roster_size = 0
    for user in roster:
        roster_size += 1
        record = by_user.get(str(user.id))
        if record is None:
            entry = MemberAttendance(user=user, status=MemberStatus.PENDING)
        else:
            entry = MemberAttendance(
                user=user,
                status=MemberStatus(record.status.value),
                record_id=record.id,
                marked_at=record.timestamp,
            )
        partitions[entry.status].append(entry)

    for entries in partitions.values():
        entries.sort(key=_sort_key)

    present_count = len(partitions[MemberStatus.PRESENT])
    absent_count = len(partitions[MemberStatus.ABSENT])
    pending_count = roster_size - present_count - absent_count

    return AttendanceSummary(
        meeting_id=meeting_id,
        roster_size=roster_size,
        present_count=present_count,
        absent_count=absent_count,
        pending_count=pending_count,
        is_complete=roster_size > 0 and pending_count == 0,
        completion_percentage=percent(present_count + absent_count, roster_size),
        attendance_rate=percent(present_count, roster_size),
        present=partitions[MemberStatus.PRESENT],
        absent=partitions[MemberStatus.ABSENT],
        pending=partitions[MemberStatus.PENDING],
    )
