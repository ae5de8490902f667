"""Builders shared by the unit and integration tests."""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from cedoi.core.enums import Role
from cedoi.schemas import MeetingCreate, UserCreate

# 18:30 in Madurai
NOW = datetime(2025, 7, 4, 13, 0, tzinfo=timezone.utc)
TZ = ZoneInfo("Asia/Kolkata")


def make_user(store, email, name=None, role=Role.MEMBER, company=None, qr_code=None):
    return store.create_user(
        UserCreate(email=email, name=name, company=company, role=role, qr_code=qr_code)
    )


def make_meeting(store, date: datetime, created_by, venue=None, agenda=None, is_active=True):
    return store.create_meeting(
        MeetingCreate(date=date, venue=venue, agenda=agenda, created_by=created_by, is_active=is_active)
    )
