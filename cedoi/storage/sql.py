"""Durable storage backend on SQLAlchemy."""
from contextlib import contextmanager
from datetime import datetime
from typing import Iterable, Iterator, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cedoi.core.constants import MAX_UPSERT_ATTEMPTS
from cedoi.core.enums import AttendanceStatus, Role
from cedoi.core.exceptions import ConflictError, StorageError
from cedoi.core.logging_config import get_logger
from cedoi.core.utils import to_utc
from cedoi.db import AttendanceRow, Base, MeetingRow, UserRow, make_session_factory
from cedoi.schemas import AttendanceRecord, EntityId, Meeting, MeetingCreate, User, UserCreate
from cedoi.storage.base import AttendanceStore

logger = get_logger(__name__)


def _optional_utc(value: Optional[datetime]) -> Optional[datetime]:
    return to_utc(value) if value is not None else None


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        name=row.name,
        company=row.company,
        role=Role(row.role),
        qr_code=row.qr_code,
        created_at=_optional_utc(row.created_at),
    )


def _to_meeting(row: MeetingRow) -> Meeting:
    return Meeting(
        id=row.id,
        date=to_utc(row.date),
        venue=row.venue,
        agenda=row.agenda,
        created_by=row.created_by,
        repeat_weekly=bool(row.repeat_weekly),
        is_active=bool(row.is_active),
        created_at=_optional_utc(row.created_at),
    )


def _to_record(row: AttendanceRow) -> AttendanceRecord:
    return AttendanceRecord(
        id=row.id,
        meeting_id=row.meeting_id,
        user_id=row.user_id,
        status=AttendanceStatus(row.status),
        timestamp=to_utc(row.timestamp),
    )


class SqlStore(AttendanceStore):
    """
    Store backed by any SQLAlchemy database.

    Ids are uuid4 hex strings and creation timestamps are assigned by the
    database. A unique constraint on (meeting_id, user_id) backs the upsert.
    Relations are by convention only; no foreign keys are declared.
    """

    backend_name = "sql"

    def __init__(self, engine: Engine, create_tables: bool = True):
        self.engine = engine
        self._session_factory = make_session_factory(engine)
        if create_tables:
            Base.metadata.create_all(bind=engine)

    @staticmethod
    def _key(value: EntityId) -> str:
        return str(value)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("storage_error", error=str(e), error_type=type(e).__name__)
            raise StorageError("Attendance storage is temporarily unavailable") from e
        finally:
            db.close()

    # Users

    def get_all_users(self) -> List[User]:
        with self._session() as db:
            return [_to_user(row) for row in db.query(UserRow).order_by(UserRow.created_at, UserRow.email)]

    def get_user(self, user_id: EntityId) -> Optional[User]:
        with self._session() as db:
            row = db.get(UserRow, self._key(user_id))
            return _to_user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._session() as db:
            row = db.query(UserRow).filter(UserRow.email == email.strip().lower()).first()
            return _to_user(row) if row else None

    def create_user(self, data: UserCreate) -> User:
        with self._session() as db:
            if data.qr_code is not None and db.query(UserRow).filter(UserRow.qr_code == data.qr_code).first():
                raise ConflictError("That QR code is already assigned to another user")
            row = UserRow(
                email=data.email,
                name=data.name,
                company=data.company,
                role=data.role.value,
                qr_code=data.qr_code,
            )
            db.add(row)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise ConflictError(f"A user with email {data.email} already exists")
            db.refresh(row)
            return _to_user(row)

    def replace_users(self, users: Iterable[UserCreate]) -> List[User]:
        incoming = {data.email: data for data in users}
        with self._session() as db:
            existing = {row.email: row for row in db.query(UserRow)}

            removed_ids = [row.id for email, row in existing.items() if email not in incoming]
            if removed_ids:
                db.query(AttendanceRow).filter(AttendanceRow.user_id.in_(removed_ids)).delete(
                    synchronize_session=False
                )
                db.query(UserRow).filter(UserRow.id.in_(removed_ids)).delete(synchronize_session=False)

            rows = []
            for email, data in incoming.items():
                row = existing.get(email)
                if row is None:
                    row = UserRow(email=email)
                    db.add(row)
                row.name = data.name
                row.company = data.company
                row.role = data.role.value
                row.qr_code = data.qr_code
                rows.append(row)

            db.commit()
            for row in rows:
                db.refresh(row)
            return [_to_user(row) for row in rows]

    # Meetings

    def get_all_meetings(self) -> List[Meeting]:
        with self._session() as db:
            rows = db.query(MeetingRow).order_by(MeetingRow.date.desc(), MeetingRow.created_at.desc())
            return [_to_meeting(row) for row in rows]

    def get_meeting(self, meeting_id: EntityId) -> Optional[Meeting]:
        with self._session() as db:
            row = db.get(MeetingRow, self._key(meeting_id))
            return _to_meeting(row) if row else None

    def create_meeting(self, data: MeetingCreate) -> Meeting:
        with self._session() as db:
            row = MeetingRow(
                date=to_utc(data.date),
                venue=data.venue,
                agenda=data.agenda,
                created_by=self._key(data.created_by),
                repeat_weekly=data.repeat_weekly,
                is_active=data.is_active,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _to_meeting(row)

    def get_meetings_by_user(self, user_id: EntityId) -> List[Meeting]:
        with self._session() as db:
            rows = (
                db.query(MeetingRow)
                .filter(MeetingRow.created_by == self._key(user_id))
                .order_by(MeetingRow.date.desc())
            )
            return [_to_meeting(row) for row in rows]

    def get_active_meetings_between(self, start: datetime, end: datetime) -> List[Meeting]:
        with self._session() as db:
            rows = (
                db.query(MeetingRow)
                .filter(
                    MeetingRow.date >= to_utc(start),
                    MeetingRow.date < to_utc(end),
                    MeetingRow.is_active.is_(True),
                )
                .order_by(MeetingRow.date)
            )
            return [_to_meeting(row) for row in rows]

    # Attendance

    def get_attendance_for_meeting(self, meeting_id: EntityId) -> List[AttendanceRecord]:
        with self._session() as db:
            rows = db.query(AttendanceRow).filter(AttendanceRow.meeting_id == self._key(meeting_id))
            return [_to_record(row) for row in rows]

    def get_attendance_for_user(self, user_id: EntityId) -> List[AttendanceRecord]:
        with self._session() as db:
            rows = db.query(AttendanceRow).filter(AttendanceRow.user_id == self._key(user_id))
            return [_to_record(row) for row in rows]

    def update_status(
        self,
        meeting_id: EntityId,
        user_id: EntityId,
        status: AttendanceStatus,
        timestamp: datetime,
    ) -> AttendanceRecord:
        meeting_key, user_key = self._key(meeting_id), self._key(user_id)
        status_value = AttendanceStatus(status).value

        for attempt in range(1, MAX_UPSERT_ATTEMPTS + 1):
            with self._session() as db:
                row = (
                    db.query(AttendanceRow)
                    .filter(AttendanceRow.meeting_id == meeting_key, AttendanceRow.user_id == user_key)
                    .first()
                )
                if row is not None:
                    row.status = status_value
                    row.timestamp = to_utc(timestamp)
                    db.commit()
                    return _to_record(row)

                row = AttendanceRow(
                    meeting_id=meeting_key,
                    user_id=user_key,
                    status=status_value,
                    timestamp=to_utc(timestamp),
                )
                db.add(row)
                try:
                    db.commit()
                except IntegrityError:
                    # Another writer created the pair first; retry as an update
                    db.rollback()
                    logger.info("attendance_upsert_retry", meeting_id=meeting_key, user_id=user_key, attempt=attempt)
                    continue
                return _to_record(row)

        raise StorageError("Could not record attendance after repeated concurrent writes")

    def ping(self) -> bool:
        with self._session() as db:
            db.execute(text("SELECT 1"))
        return True
