"""Meeting endpoints."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from cedoi.api.deps import get_now, get_settings, get_store, require_chairman
from cedoi.core.config import Settings
from cedoi.schemas import EntityId, Meeting, MeetingCreate, User
from cedoi.services.attendance import get_meeting_or_404
from cedoi.services.meetings import create_meeting, get_todays_meeting, list_meetings
from cedoi.storage import AttendanceStore

router = APIRouter()


@router.get("", response_model=List[Meeting])
async def list_meetings_endpoint(
    created_by: Optional[EntityId] = Query(None, alias="createdBy"),
    store: AttendanceStore = Depends(get_store),
):
    """All meetings, newest first, optionally only those a chairman created."""
    return list_meetings(store, created_by=created_by)


@router.get("/today", response_model=Optional[Meeting])
async def todays_meeting_endpoint(
    store: AttendanceStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    """
    The active meeting scheduled for today in the forum's timezone, or null.

    When several active meetings fall on the same day the earliest one wins.
    """
    return get_todays_meeting(store, now, settings.tz)


@router.post("", response_model=Meeting)
async def create_meeting_endpoint(
    meeting: MeetingCreate,
    chairman: User = Depends(require_chairman),
    store: AttendanceStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Schedule a meeting (chairman only).

    Example:
        Request:
            POST /api/meetings
            {"date": "2025-07-04T19:00:00+05:30", "theme": "Monthly networking"}

        Response (200):
            {"id": 1, "date": "2025-07-04T13:30:00Z", "venue": "Mariat Hotel, Madurai", ...}
    """
    return create_meeting(store, meeting, chairman, settings.tz, settings.DEFAULT_VENUE)


@router.get("/{meeting_id}", response_model=Meeting)
async def get_meeting_endpoint(meeting_id: EntityId, store: AttendanceStore = Depends(get_store)):
    return get_meeting_or_404(store, meeting_id)
