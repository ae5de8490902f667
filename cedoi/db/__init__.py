"""Database package."""
from cedoi.db.base import Base
from cedoi.db.models import UserRow, MeetingRow, AttendanceRow
from cedoi.db.session import make_engine, make_session_factory

__all__ = [
    "Base",
    "UserRow",
    "MeetingRow",
    "AttendanceRow",
    "make_engine",
    "make_session_factory",
]
