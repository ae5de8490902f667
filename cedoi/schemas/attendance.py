"""Attendance schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator

from cedoi.core.enums import AttendanceStatus, MemberStatus
from cedoi.core.sanitization import validate_qr_code
from cedoi.schemas.common import CamelModel, EntityId
from cedoi.schemas.user import User


class AttendanceRecord(CamelModel):
    id: EntityId
    meeting_id: EntityId
    user_id: EntityId
    status: AttendanceStatus
    timestamp: datetime


class AttendanceCreate(CamelModel):
    meeting_id: EntityId
    user_id: EntityId
    # Plain string so an unknown status surfaces as a 400 from the service
    status: str


class StatusUpdate(CamelModel):
    status: str


class BulkMarkRequest(CamelModel):
    status: str = AttendanceStatus.PRESENT.value


class BulkMarkResponse(CamelModel):
    updated: int


class QrScanRequest(CamelModel):
    qr_code: str = Field(..., min_length=1, max_length=200)

    @field_validator('qr_code')
    @classmethod
    def validate_qr_code_field(cls, v: str) -> str:
        return validate_qr_code(v)


class QrScanResponse(CamelModel):
    user: User
    record: AttendanceRecord


class WindowStatus(CamelModel):
    allowed: bool
    reason: str
    opens_at: datetime
    starts_at: datetime
    closes_at: datetime


class MemberAttendance(CamelModel):
    user: User
    status: MemberStatus
    record_id: Optional[EntityId] = None
    marked_at: Optional[datetime] = None


class AttendanceSummary(CamelModel):
    """Reconciled attendance for one meeting; every view renders from this."""

    meeting_id: EntityId
    roster_size: int
    present_count: int
    absent_count: int
    pending_count: int
    is_complete: bool
    completion_percentage: int
    attendance_rate: int
    present: List[MemberAttendance] = []
    absent: List[MemberAttendance] = []
    pending: List[MemberAttendance] = []

    @property
    def members(self) -> List[MemberAttendance]:
        return [*self.present, *self.absent, *self.pending]


class StatsResponse(CamelModel):
    total_meetings: int
    average_attendance: int
    present_count: int
    absent_count: int
