"""Pydantic schemas for request/response validation."""
from cedoi.schemas.common import CamelModel, EntityId, SuccessResponse, MessageResponse
from cedoi.schemas.user import User, UserCreate
from cedoi.schemas.meeting import Meeting, MeetingCreate
from cedoi.schemas.attendance import (
    AttendanceRecord,
    AttendanceCreate,
    StatusUpdate,
    BulkMarkRequest,
    BulkMarkResponse,
    QrScanRequest,
    QrScanResponse,
    WindowStatus,
    MemberAttendance,
    AttendanceSummary,
    StatsResponse,
)
from cedoi.schemas.auth import SendOtpRequest, VerifyOtpRequest, AuthResponse
from cedoi.schemas.notification import Notification, NotificationType, MemberReportRow

__all__ = [
    "CamelModel",
    "EntityId",
    "SuccessResponse",
    "MessageResponse",
    "User",
    "UserCreate",
    "Meeting",
    "MeetingCreate",
    "AttendanceRecord",
    "AttendanceCreate",
    "StatusUpdate",
    "BulkMarkRequest",
    "BulkMarkResponse",
    "QrScanRequest",
    "QrScanResponse",
    "WindowStatus",
    "MemberAttendance",
    "AttendanceSummary",
    "StatsResponse",
    "SendOtpRequest",
    "VerifyOtpRequest",
    "AuthResponse",
    "Notification",
    "NotificationType",
    "MemberReportRow",
]
