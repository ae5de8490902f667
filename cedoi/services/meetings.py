"""Meeting business logic."""
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from cedoi.core.enums import can_create_meeting
from cedoi.core.exceptions import PermissionDeniedError
from cedoi.core.logging_config import get_logger
from cedoi.schemas import EntityId, Meeting, MeetingCreate, User
from cedoi.storage import AttendanceStore

logger = get_logger(__name__)


def create_meeting(
    store: AttendanceStore,
    data: MeetingCreate,
    creator: User,
    tz: ZoneInfo,
    default_venue: str,
) -> Meeting:
    """
    Schedule a meeting on behalf of a chairman.

    A naive date is read as forum-local time. A missing venue falls back to
    the forum's usual venue.
    """
    if not can_create_meeting(creator.role):
        raise PermissionDeniedError("Only the chairman can schedule meetings")

    date = data.date if data.date.tzinfo is not None else data.date.replace(tzinfo=tz)
    meeting = store.create_meeting(
        data.model_copy(update={
            "date": date,
            "venue": data.venue or default_venue,
            "created_by": creator.id,
        })
    )
    logger.info("meeting_created", meeting_id=meeting.id, created_by=creator.id, date=meeting.date.isoformat())
    return meeting


def list_meetings(store: AttendanceStore, created_by: Optional[EntityId] = None) -> List[Meeting]:
    if created_by is not None:
        return store.get_meetings_by_user(created_by)
    return store.get_all_meetings()


def get_todays_meeting(store: AttendanceStore, now: datetime, tz: ZoneInfo) -> Optional[Meeting]:
    return store.get_todays_meeting(now, tz)
