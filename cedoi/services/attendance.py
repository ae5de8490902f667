"""Attendance business logic."""
from datetime import datetime
from typing import Iterable, List, Optional

from cedoi.core.enums import AttendanceStatus, MemberStatus
from cedoi.core.exceptions import InvalidStatusError, NotFoundError
from cedoi.core.logging_config import get_logger
from cedoi.schemas import AttendanceRecord, AttendanceSummary, EntityId, Meeting, User
from cedoi.services.reconciliation import build_roster, reconcile
from cedoi.services.window import ensure_write_allowed
from cedoi.storage import AttendanceStore

logger = get_logger(__name__)


def parse_status(status) -> AttendanceStatus:
    """Accept only the persisted statuses; 'pending' is computed, never written."""
    try:
        return AttendanceStatus(status)
    except ValueError:
        raise InvalidStatusError(
            f"Invalid attendance status {status!r}. Expected 'present' or 'absent'"
        )


def get_meeting_or_404(store: AttendanceStore, meeting_id: EntityId) -> Meeting:
    meeting = store.get_meeting(meeting_id)
    if meeting is None:
        raise NotFoundError("Meeting not found")
    return meeting


def get_user_or_404(store: AttendanceStore, user_id: EntityId) -> User:
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_roster(store: AttendanceStore) -> List[User]:
    return build_roster(store.get_all_users())


def get_summary(store: AttendanceStore, meeting_id: EntityId) -> AttendanceSummary:
    """Reconciled attendance for a meeting (read path; never gated)."""
    meeting = get_meeting_or_404(store, meeting_id)
    return reconcile(meeting.id, get_roster(store), store.get_attendance_for_meeting(meeting.id))


def set_status(
    store: AttendanceStore,
    meeting_id: EntityId,
    user_id: EntityId,
    status,
    now: datetime,
) -> AttendanceRecord:
    """
    Record a member's status for a meeting.

    Upserts the single record for (meeting, user): calling again with the same
    arguments leaves the same final state and only advances the timestamp.

    Raises:
        InvalidStatusError: status is not present/absent
        NotFoundError: meeting or user does not exist
        WindowClosedError: now is outside the attendance window
    """
    parsed = parse_status(status)
    meeting = get_meeting_or_404(store, meeting_id)
    user = get_user_or_404(store, user_id)
    ensure_write_allowed(meeting, now)

    record = store.update_status(meeting.id, user.id, parsed, now)
    logger.info(
        "attendance_marked",
        meeting_id=meeting.id,
        user_id=user.id,
        status=parsed.value,
        record_id=record.id,
    )
    return record


def mark_all_pending(
    store: AttendanceStore,
    meeting_id: EntityId,
    status,
    now: datetime,
) -> int:
    """
    Give every pending roster member the same status.

    Members that already have an explicit status are left alone. The window
    is checked once for the whole batch: a closed window rejects all of it.

    Returns:
        Number of records written
    """
    parsed = parse_status(status)
    meeting = get_meeting_or_404(store, meeting_id)
    ensure_write_allowed(meeting, now)

    summary = reconcile(meeting.id, get_roster(store), store.get_attendance_for_meeting(meeting.id))
    for entry in summary.pending:
        store.update_status(meeting.id, entry.user.id, parsed, now)

    logger.info(
        "bulk_mark_completed",
        meeting_id=meeting.id,
        status=parsed.value,
        updated=len(summary.pending),
    )
    return len(summary.pending)


def resolve_by_qr_code(qr_code: str, roster: Iterable[User]) -> User:
    """Exact, case-sensitive match of a scanned code against the roster."""
    for user in roster:
        if user.qr_code is not None and user.qr_code == qr_code:
            return user
    raise NotFoundError("No member matches the scanned QR code")


def scan_qr_code(
    store: AttendanceStore,
    meeting_id: EntityId,
    qr_code: str,
    now: datetime,
) -> tuple:
    """
    Mark the scanned member present.

    Returns:
        (user, record)
    """
    meeting = get_meeting_or_404(store, meeting_id)
    try:
        user = resolve_by_qr_code(qr_code, get_roster(store))
    except NotFoundError:
        logger.warning("qr_scan_not_found", meeting_id=meeting.id)
        raise

    record = set_status(store, meeting.id, user.id, AttendanceStatus.PRESENT, now)
    return user, record


def member_status(summary: AttendanceSummary, user_id: EntityId) -> Optional[MemberStatus]:
    """Effective status of one user in a summary, or None if not on the roster."""
    for entry in summary.members:
        if str(entry.user.id) == str(user_id):
            return entry.status
    return None
