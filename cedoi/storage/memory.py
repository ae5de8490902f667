"""Process-lifetime storage backend."""
import itertools
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from cedoi.core.enums import AttendanceStatus
from cedoi.core.exceptions import ConflictError
from cedoi.core.utils import to_utc
from cedoi.schemas import AttendanceRecord, EntityId, Meeting, MeetingCreate, User, UserCreate
from cedoi.storage.base import AttendanceStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore(AttendanceStore):
    """
    Dict-backed store with auto-incrementing integer ids.

    Ids arriving as numeric strings (URL path segments, JWT subjects) are
    coerced to int; any other string simply matches nothing.
    """

    backend_name = "memory"

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._lock = threading.RLock()
        self._clock = clock
        self._users: Dict[int, User] = {}
        self._meetings: Dict[int, Meeting] = {}
        self._records: Dict[int, AttendanceRecord] = {}
        # (meeting_id, user_id) -> record id; enforces one record per pair
        self._record_index: Dict[Tuple[int, int], int] = {}
        self._user_ids = itertools.count(1)
        self._meeting_ids = itertools.count(1)
        self._record_ids = itertools.count(1)

    @staticmethod
    def _key(value: EntityId):
        if isinstance(value, str) and value.isdigit():
            return int(value)
        return value

    # Users

    def get_all_users(self) -> List[User]:
        with self._lock:
            return [u.model_copy() for u in self._users.values()]

    def get_user(self, user_id: EntityId) -> Optional[User]:
        with self._lock:
            user = self._users.get(self._key(user_id))
            return user.model_copy() if user else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user.model_copy()
            return None

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            if self.get_user_by_email(data.email):
                raise ConflictError(f"A user with email {data.email} already exists")
            if data.qr_code is not None and any(u.qr_code == data.qr_code for u in self._users.values()):
                raise ConflictError("That QR code is already assigned to another user")

            user = User(id=next(self._user_ids), created_at=self._clock(), **data.model_dump())
            self._users[user.id] = user
            return user.model_copy()

    def replace_users(self, users: Iterable[UserCreate]) -> List[User]:
        with self._lock:
            by_email = {u.email: u for u in self._users.values()}
            incoming = {data.email: data for data in users}

            for email, existing in by_email.items():
                if email not in incoming:
                    self._remove_user(existing.id)

            result = []
            for email, data in incoming.items():
                existing = by_email.get(email)
                if existing is None:
                    result.append(self.create_user(data))
                    continue
                updated = existing.model_copy(update=data.model_dump())
                self._users[existing.id] = updated
                result.append(updated.model_copy())
            return result

    def _remove_user(self, user_id: int) -> None:
        del self._users[user_id]
        for pair in [p for p in self._record_index if p[1] == user_id]:
            del self._records[self._record_index.pop(pair)]

    # Meetings

    def get_all_meetings(self) -> List[Meeting]:
        with self._lock:
            meetings = sorted(self._meetings.values(), key=lambda m: m.date, reverse=True)
            return [m.model_copy() for m in meetings]

    def get_meeting(self, meeting_id: EntityId) -> Optional[Meeting]:
        with self._lock:
            meeting = self._meetings.get(self._key(meeting_id))
            return meeting.model_copy() if meeting else None

    def create_meeting(self, data: MeetingCreate) -> Meeting:
        with self._lock:
            fields = data.model_dump()
            fields["date"] = to_utc(data.date)
            fields["created_by"] = self._key(data.created_by)
            meeting = Meeting(id=next(self._meeting_ids), created_at=self._clock(), **fields)
            self._meetings[meeting.id] = meeting
            return meeting.model_copy()

    def get_meetings_by_user(self, user_id: EntityId) -> List[Meeting]:
        key = self._key(user_id)
        return [m for m in self.get_all_meetings() if m.created_by == key]

    def get_active_meetings_between(self, start: datetime, end: datetime) -> List[Meeting]:
        start, end = to_utc(start), to_utc(end)
        with self._lock:
            meetings = [
                m for m in self._meetings.values()
                if m.is_active and start <= m.date < end
            ]
            return [m.model_copy() for m in sorted(meetings, key=lambda m: m.date)]

    # Attendance

    def get_attendance_for_meeting(self, meeting_id: EntityId) -> List[AttendanceRecord]:
        key = self._key(meeting_id)
        with self._lock:
            return [r.model_copy() for r in self._records.values() if r.meeting_id == key]

    def get_attendance_for_user(self, user_id: EntityId) -> List[AttendanceRecord]:
        key = self._key(user_id)
        with self._lock:
            return [r.model_copy() for r in self._records.values() if r.user_id == key]

    def update_status(
        self,
        meeting_id: EntityId,
        user_id: EntityId,
        status: AttendanceStatus,
        timestamp: datetime,
    ) -> AttendanceRecord:
        pair = (self._key(meeting_id), self._key(user_id))
        with self._lock:
            record_id = self._record_index.get(pair)
            if record_id is not None:
                record = self._records[record_id]
                record.status = AttendanceStatus(status)
                record.timestamp = to_utc(timestamp)
                return record.model_copy()

            record = AttendanceRecord(
                id=next(self._record_ids),
                meeting_id=pair[0],
                user_id=pair[1],
                status=AttendanceStatus(status),
                timestamp=to_utc(timestamp),
            )
            self._records[record.id] = record
            self._record_index[pair] = record.id
            return record.model_copy()

    def ping(self) -> bool:
        return True
