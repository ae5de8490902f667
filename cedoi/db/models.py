"""ORM models for the durable SQL backend."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text, UniqueConstraint, func

from cedoi.db.base import Base


def new_id() -> str:
    return uuid.uuid4().hex


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(254), unique=True, nullable=False, index=True)
    name = Column(String(120), nullable=True)
    company = Column(String(160), nullable=True)
    role = Column(String(16), nullable=False)
    qr_code = Column(String(200), nullable=True, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class MeetingRow(Base):
    __tablename__ = "meetings"

    id = Column(String(32), primary_key=True, default=new_id)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    venue = Column(String(200), nullable=True)
    agenda = Column(Text, nullable=True)
    created_by = Column(String(32), nullable=False, index=True)  # users.id by convention
    repeat_weekly = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class AttendanceRow(Base):
    __tablename__ = "attendance_records"

    id = Column(String(32), primary_key=True, default=new_id)
    meeting_id = Column(String(32), nullable=False)
    user_id = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False)  # "present" | "absent"; pending is never stored
    timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_attendance_meeting", "meeting_id"),
        Index("idx_attendance_user", "user_id"),
        UniqueConstraint("meeting_id", "user_id", name="uq_attendance_meeting_user"),
    )
