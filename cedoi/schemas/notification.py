"""Notification and report schemas."""
from datetime import datetime
from enum import Enum
from typing import Optional

from cedoi.core.enums import Role
from cedoi.schemas.common import CamelModel, EntityId


class NotificationType(str, Enum):
    MEETING_REMINDER = "meeting_reminder"
    ATTENDANCE_REQUIRED = "attendance_required"
    ATTENDANCE_UPDATE = "attendance_update"
    MEETING_CREATED = "meeting_created"


class Notification(CamelModel):
    id: str
    type: NotificationType
    title: str
    message: str
    timestamp: datetime
    meeting_id: Optional[EntityId] = None
    action_required: bool = False
    read: bool = False


class MemberReportRow(CamelModel):
    user_id: EntityId
    name: str
    company: str
    role: Role
    present_count: int
    total_meetings: int
    attendance_rate: int
