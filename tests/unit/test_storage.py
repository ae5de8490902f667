"""Unit tests for the storage backends."""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Query

from cedoi.core.config import Settings
from cedoi.core.enums import AttendanceStatus, Role
from cedoi.core.exceptions import ConflictError, StorageError
from cedoi.db import Base
from cedoi.schemas import UserCreate
from cedoi.storage import MemoryStore, SqlStore, build_store
from tests.utils import NOW, TZ, make_meeting, make_user


@pytest.mark.unit
class TestUsers:

    def test_create_and_get(self, store):
        user = make_user(store, "Andrew.Ananth@CEDOI.com", "Andrew Ananth", company="Godivatech")

        assert user.email == "andrew.ananth@cedoi.com"
        assert store.get_user(user.id) == user
        assert store.get_user(str(user.id)) == user
        assert store.get_user_by_email(" ANDREW.ANANTH@cedoi.com ") == user

    def test_duplicate_email_conflicts(self, store):
        make_user(store, "imran@cedoi.com", "Imran")
        with pytest.raises(ConflictError):
            make_user(store, "imran@cedoi.com", "Imran again")

    def test_duplicate_qr_code_conflicts(self, store):
        make_user(store, "imran@cedoi.com", "Imran", qr_code="imran_qr_104")
        with pytest.raises(ConflictError):
            make_user(store, "mukesh@cedoi.com", "Mukesh", qr_code="imran_qr_104")

        assert store.get_user_by_email("mukesh@cedoi.com") is None

    def test_users_without_qr_codes_do_not_conflict(self, store):
        make_user(store, "prabu@cedoi.com", "Prabu")
        make_user(store, "radha@cedoi.com", "Radha")
        assert len(store.get_all_users()) == 2

    def test_missing_user(self, store):
        assert store.get_user("424242") is None
        assert store.get_user_by_email("nobody@cedoi.com") is None

    def test_returned_models_are_copies(self, store):
        user = make_user(store, "prabu@cedoi.com", "Prabu")
        user.name = "Changed"
        assert store.get_user(user.id).name == "Prabu"

    def test_replace_users_matches_by_email(self, store, chairman):
        kept = make_user(store, "imran@cedoi.com", "Imran")
        removed = make_user(store, "mukesh@cedoi.com", "Mukesh")
        meeting = make_meeting(store, NOW, chairman.id)
        store.update_status(meeting.id, kept.id, AttendanceStatus.PRESENT, NOW)
        store.update_status(meeting.id, removed.id, AttendanceStatus.ABSENT, NOW)

        result = store.replace_users([
            UserCreate(email="imran@cedoi.com", name="Imran", company="MK Trading"),
            UserCreate(email="jaffer@cedoi.com", name="Jaffer", company="Spice King"),
        ])

        emails = sorted(u.email for u in store.get_all_users())
        assert emails == ["imran@cedoi.com", "jaffer@cedoi.com"]
        assert len(result) == 2
        assert store.get_user(kept.id).company == "MK Trading"
        assert store.get_user(removed.id) is None
        assert [str(r.user_id) for r in store.get_attendance_for_meeting(meeting.id)] == [str(kept.id)]


@pytest.mark.unit
class TestMeetings:

    def test_create_and_get(self, store, chairman):
        meeting = make_meeting(store, NOW, chairman.id, venue="Mariat Hotel, Madurai", agenda="Networking")

        fetched = store.get_meeting(meeting.id)
        assert fetched == meeting
        assert fetched.date == NOW
        assert fetched.is_active is True
        assert fetched.created_at is not None

    def test_all_meetings_newest_first(self, store, chairman):
        older = make_meeting(store, NOW - timedelta(days=7), chairman.id)
        newer = make_meeting(store, NOW, chairman.id)
        assert [m.id for m in store.get_all_meetings()] == [newer.id, older.id]

    def test_meetings_by_user(self, store, chairman, sonai):
        mine = make_meeting(store, NOW, chairman.id)
        make_meeting(store, NOW, sonai.id)
        assert [m.id for m in store.get_meetings_by_user(chairman.id)] == [mine.id]

    def test_todays_meeting_uses_forum_timezone(self, store, chairman):
        # 00:30 on 4 July in Madurai, still 3 July in UTC
        early = make_meeting(store, datetime(2025, 7, 3, 19, 0, tzinfo=timezone.utc), chairman.id)
        # 00:30 on 5 July in Madurai
        make_meeting(store, datetime(2025, 7, 4, 19, 0, tzinfo=timezone.utc), chairman.id)

        assert store.get_todays_meeting(NOW, TZ).id == early.id

    def test_todays_meeting_earliest_active_wins(self, store, chairman):
        make_meeting(store, NOW - timedelta(hours=5), chairman.id, is_active=False)
        earliest = make_meeting(store, NOW - timedelta(hours=3), chairman.id)
        make_meeting(store, NOW + timedelta(minutes=10), chairman.id)

        assert store.get_todays_meeting(NOW, TZ).id == earliest.id

    def test_no_meeting_today(self, store, chairman):
        make_meeting(store, NOW - timedelta(days=2), chairman.id)
        assert store.get_todays_meeting(NOW, TZ) is None


@pytest.mark.unit
def test_todays_meeting_tie_goes_to_most_recently_created():
    ticks = iter(NOW + timedelta(seconds=i) for i in range(100))
    store = MemoryStore(clock=lambda: next(ticks))
    chairman = make_user(store, "chairman@cedoi.com", "Chairman", Role.CHAIRMAN)
    make_meeting(store, NOW, chairman.id)
    second = make_meeting(store, NOW, chairman.id)

    assert store.get_todays_meeting(NOW, TZ).id == second.id


@pytest.mark.unit
class TestAttendanceRecords:

    def test_update_status_is_an_upsert(self, store, meeting, members):
        store.update_status(meeting.id, members[0].id, AttendanceStatus.ABSENT, NOW)
        store.create_attendance(meeting.id, members[0].id, AttendanceStatus.PRESENT, NOW)

        records = store.get_attendance_for_meeting(meeting.id)
        assert len(records) == 1
        assert records[0].status is AttendanceStatus.PRESENT

    def test_attendance_for_user(self, store, chairman, members):
        first = make_meeting(store, NOW, chairman.id)
        second = make_meeting(store, NOW + timedelta(days=7), chairman.id)
        store.update_status(first.id, members[0].id, AttendanceStatus.PRESENT, NOW)
        store.update_status(second.id, members[0].id, AttendanceStatus.ABSENT, NOW)
        store.update_status(first.id, members[1].id, AttendanceStatus.PRESENT, NOW)

        records = store.get_attendance_for_user(members[0].id)
        assert sorted(str(r.meeting_id) for r in records) == sorted([str(first.id), str(second.id)])

    def test_unknown_meeting_has_no_records(self, store):
        assert store.get_attendance_for_meeting("no-such-meeting") == []


@pytest.mark.unit
class TestSqlStore:

    def test_ids_are_strings(self, sql_store):
        user = make_user(sql_store, "imran@cedoi.com", "Imran")
        assert isinstance(user.id, str)

    def test_ping(self, sql_store):
        assert sql_store.ping() is True

    def test_database_errors_become_storage_errors(self, sql_store):
        Base.metadata.drop_all(bind=sql_store.engine)
        with pytest.raises(StorageError):
            sql_store.get_all_users()

    def test_upsert_retries_as_update_after_integrity_error(self, sql_store, monkeypatch):
        chairman = make_user(sql_store, "chairman@cedoi.com", "Chairman", Role.CHAIRMAN)
        member = make_user(sql_store, "imran@cedoi.com", "Imran")
        meeting = make_meeting(sql_store, NOW, chairman.id)
        first = sql_store.update_status(meeting.id, member.id, AttendanceStatus.PRESENT, NOW)

        # The first lookup misses the existing row, as if another writer inserted it concurrently
        original_first = Query.first
        misses = iter([True])

        def racing_first(query):
            if next(misses, False):
                return None
            return original_first(query)

        monkeypatch.setattr(Query, "first", racing_first)
        record = sql_store.update_status(meeting.id, member.id, AttendanceStatus.ABSENT, NOW + timedelta(minutes=1))

        assert record.id == first.id
        assert record.status is AttendanceStatus.ABSENT
        records = sql_store.get_attendance_for_meeting(meeting.id)
        assert len(records) == 1
        assert records[0].status is AttendanceStatus.ABSENT

    def test_upsert_gives_up_after_repeated_collisions(self, sql_store, monkeypatch):
        chairman = make_user(sql_store, "chairman@cedoi.com", "Chairman", Role.CHAIRMAN)
        member = make_user(sql_store, "imran@cedoi.com", "Imran")
        meeting = make_meeting(sql_store, NOW, chairman.id)
        sql_store.update_status(meeting.id, member.id, AttendanceStatus.PRESENT, NOW)

        monkeypatch.setattr(Query, "first", lambda query: None)
        with pytest.raises(StorageError):
            sql_store.update_status(meeting.id, member.id, AttendanceStatus.ABSENT, NOW)

        monkeypatch.undo()
        records = sql_store.get_attendance_for_meeting(meeting.id)
        assert [r.status for r in records] == [AttendanceStatus.PRESENT]


@pytest.mark.unit
class TestBuildStore:

    def test_memory_backend(self):
        assert isinstance(build_store(Settings(STORAGE_BACKEND="memory")), MemoryStore)

    def test_sql_backend(self):
        store = build_store(Settings(STORAGE_BACKEND="sql", DATABASE_URL="sqlite:///:memory:"))
        assert isinstance(store, SqlStore)
        assert store.ping()

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValueError):
            Settings(STORAGE_BACKEND="firebase")
