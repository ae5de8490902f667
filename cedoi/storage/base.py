"""Persistence adapter interface shared by every storage backend."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from cedoi.core.enums import AttendanceStatus
from cedoi.core.logging_config import get_logger
from cedoi.core.utils import local_day_bounds
from cedoi.schemas import AttendanceRecord, EntityId, Meeting, MeetingCreate, User, UserCreate

logger = get_logger(__name__)


class AttendanceStore(ABC):
    """
    CRUD plus the handful of derived queries the attendance views need.

    Implementations must keep at most one AttendanceRecord per
    (meeting_id, user_id): update_status and create_attendance are upserts.
    Returned models are copies; mutating them never changes stored state.
    """

    backend_name = "abstract"

    # Users

    @abstractmethod
    def get_all_users(self) -> List[User]:
        ...

    @abstractmethod
    def get_user(self, user_id: EntityId) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> User:
        """Create a user; raises ConflictError if the email is taken."""

    @abstractmethod
    def replace_users(self, users: Iterable[UserCreate]) -> List[User]:
        """
        Administrative bulk replace keyed by email.

        Existing emails keep their id, new emails are created, and users that
        are not in the new list are removed together with their attendance.
        """

    # Meetings

    @abstractmethod
    def get_all_meetings(self) -> List[Meeting]:
        """All meetings, newest first."""

    @abstractmethod
    def get_meeting(self, meeting_id: EntityId) -> Optional[Meeting]:
        ...

    @abstractmethod
    def create_meeting(self, data: MeetingCreate) -> Meeting:
        ...

    @abstractmethod
    def get_meetings_by_user(self, user_id: EntityId) -> List[Meeting]:
        """Meetings created by the given chairman, newest first."""

    @abstractmethod
    def get_active_meetings_between(self, start: datetime, end: datetime) -> List[Meeting]:
        """Active meetings with start <= date < end, earliest first."""

    def get_todays_meeting(self, now: datetime, tz: ZoneInfo) -> Optional[Meeting]:
        """
        The active meeting scheduled on the local calendar day containing `now`.

        When several are active that day the earliest scheduled wins; ties on
        date go to the most recently created.
        """
        start, end = local_day_bounds(now, tz)
        candidates = self.get_active_meetings_between(start, end)
        if not candidates:
            return None

        candidates.sort(key=lambda m: m.created_at or start, reverse=True)
        candidates.sort(key=lambda m: m.date)
        chosen = candidates[0]

        if len(candidates) > 1:
            logger.warning(
                "todays_meeting_conflict",
                chosen_meeting_id=chosen.id,
                ignored_meeting_ids=[m.id for m in candidates[1:]],
            )
        return chosen

    # Attendance

    @abstractmethod
    def get_attendance_for_meeting(self, meeting_id: EntityId) -> List[AttendanceRecord]:
        ...

    @abstractmethod
    def get_attendance_for_user(self, user_id: EntityId) -> List[AttendanceRecord]:
        ...

    @abstractmethod
    def update_status(
        self,
        meeting_id: EntityId,
        user_id: EntityId,
        status: AttendanceStatus,
        timestamp: datetime,
    ) -> AttendanceRecord:
        """Upsert the record for (meeting_id, user_id) and return it."""

    def create_attendance(
        self,
        meeting_id: EntityId,
        user_id: EntityId,
        status: AttendanceStatus,
        timestamp: datetime,
    ) -> AttendanceRecord:
        """Create a record; an existing record for the pair is updated instead."""
        return self.update_status(meeting_id, user_id, status, timestamp)

    # Health

    @abstractmethod
    def ping(self) -> bool:
        """Raise StorageError if the backend is unreachable."""
