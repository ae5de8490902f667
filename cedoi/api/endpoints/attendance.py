"""Attendance endpoints."""
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Request

from cedoi.api.deps import get_now, get_store, require_marker
from cedoi.core.rate_limit import RATE_LIMITS, limiter
from cedoi.schemas import (
    AttendanceCreate,
    AttendanceRecord,
    AttendanceSummary,
    BulkMarkRequest,
    BulkMarkResponse,
    EntityId,
    QrScanRequest,
    QrScanResponse,
    StatusUpdate,
    User,
    WindowStatus,
)
from cedoi.services.attendance import get_meeting_or_404, get_summary, mark_all_pending, scan_qr_code, set_status
from cedoi.services.window import check_write_window
from cedoi.storage import AttendanceStore

router = APIRouter()


@router.get("/{meeting_id}", response_model=List[AttendanceRecord])
async def list_attendance(meeting_id: EntityId, store: AttendanceStore = Depends(get_store)):
    """Stored records for a meeting. Pending members have no record here; see /summary."""
    return store.get_attendance_for_meeting(meeting_id)


@router.post("", response_model=AttendanceRecord)
@limiter.limit(RATE_LIMITS["attendance_write"])
async def create_attendance(
    request: Request,
    body: AttendanceCreate,
    marker: User = Depends(require_marker),
    store: AttendanceStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    """
    Mark a member. Repeating the call updates the existing record.

    Raises:
        InvalidStatusError: 400 for anything but present/absent
        NotFoundError: 404 for an unknown meeting or user
        WindowClosedError: 409 outside the attendance window
    """
    return set_status(store, body.meeting_id, body.user_id, body.status, now)


@router.put("/{meeting_id}/{user_id}", response_model=AttendanceRecord)
@limiter.limit(RATE_LIMITS["attendance_write"])
async def update_attendance(
    request: Request,
    meeting_id: EntityId,
    user_id: EntityId,
    body: StatusUpdate,
    marker: User = Depends(require_marker),
    store: AttendanceStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    """
    Set one member's status for a meeting, creating the record if needed.

    Example:
        Request:
            PUT /api/attendance/1/4
            {"status": "present"}

        Response (200):
            {"id": 7, "meetingId": 1, "userId": 4, "status": "present", "timestamp": "..."}

        Response (400):
            {"detail": "Invalid attendance status 'late'. Expected 'present' or 'absent'"}
    """
    return set_status(store, meeting_id, user_id, body.status, now)


@router.get("/{meeting_id}/summary", response_model=AttendanceSummary)
async def attendance_summary(meeting_id: EntityId, store: AttendanceStore = Depends(get_store)):
    """Reconciled roster view: every member is exactly one of present, absent or pending."""
    return get_summary(store, meeting_id)


@router.get("/{meeting_id}/window", response_model=WindowStatus)
async def attendance_window_status(
    meeting_id: EntityId,
    store: AttendanceStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    check = check_write_window(get_meeting_or_404(store, meeting_id), now)
    return WindowStatus(
        allowed=check.allowed,
        reason=check.reason,
        opens_at=check.opens_at,
        starts_at=check.starts_at,
        closes_at=check.closes_at,
    )


@router.post("/{meeting_id}/mark-all", response_model=BulkMarkResponse)
@limiter.limit(RATE_LIMITS["attendance_write"])
async def mark_all(
    request: Request,
    meeting_id: EntityId,
    body: BulkMarkRequest,
    marker: User = Depends(require_marker),
    store: AttendanceStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    """Give every pending member the same status; already-marked members are untouched."""
    return BulkMarkResponse(updated=mark_all_pending(store, meeting_id, body.status, now))


@router.post("/{meeting_id}/scan", response_model=QrScanResponse)
@limiter.limit(RATE_LIMITS["qr_scan"])
async def scan(
    request: Request,
    meeting_id: EntityId,
    body: QrScanRequest,
    marker: User = Depends(require_marker),
    store: AttendanceStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    """Mark the member whose badge QR code was scanned as present."""
    user, record = scan_qr_code(store, meeting_id, body.qr_code, now)
    return QrScanResponse(user=user, record=record)
