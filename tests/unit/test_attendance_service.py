"""Unit tests for the attendance service, against both storage backends."""
from datetime import timedelta

import pytest

from cedoi.core.enums import AttendanceStatus, MemberStatus, Role
from cedoi.core.exceptions import InvalidStatusError, NotFoundError, WindowClosedError
from cedoi.services.attendance import (
    get_summary,
    mark_all_pending,
    member_status,
    parse_status,
    resolve_by_qr_code,
    scan_qr_code,
    set_status,
)
from tests.utils import NOW, make_meeting


@pytest.mark.unit
class TestParseStatus:

    @pytest.mark.parametrize("value", ["present", "absent", AttendanceStatus.PRESENT])
    def test_valid(self, value):
        assert parse_status(value) in (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT)

    @pytest.mark.parametrize("value", ["pending", "late", "", None, "PRESENT"])
    def test_invalid(self, value):
        with pytest.raises(InvalidStatusError):
            parse_status(value)


@pytest.mark.unit
class TestSetStatus:
    """Upsert semantics of a single member's status."""

    def test_creates_record(self, store, meeting, members):
        record = set_status(store, meeting.id, members[0].id, "present", NOW)

        assert record.status is AttendanceStatus.PRESENT
        assert str(record.meeting_id) == str(meeting.id)
        assert str(record.user_id) == str(members[0].id)
        assert record.timestamp == NOW

    def test_repeated_calls_keep_one_record(self, store, meeting, members):
        first = set_status(store, meeting.id, members[0].id, "present", NOW)
        second = set_status(store, meeting.id, members[0].id, "present", NOW + timedelta(minutes=1))

        records = store.get_attendance_for_meeting(meeting.id)
        assert len(records) == 1
        assert str(first.id) == str(second.id)
        assert records[0].timestamp == NOW + timedelta(minutes=1)

    def test_changing_status_updates_in_place(self, store, meeting, members):
        set_status(store, meeting.id, members[0].id, "present", NOW)
        set_status(store, meeting.id, members[0].id, "absent", NOW)

        records = store.get_attendance_for_meeting(meeting.id)
        assert len(records) == 1
        assert records[0].status is AttendanceStatus.ABSENT

    def test_invalid_status_writes_nothing(self, store, meeting, members):
        with pytest.raises(InvalidStatusError):
            set_status(store, meeting.id, members[0].id, "late", NOW)
        assert store.get_attendance_for_meeting(meeting.id) == []

    def test_unknown_meeting(self, store, members):
        with pytest.raises(NotFoundError, match="Meeting not found"):
            set_status(store, "999999", members[0].id, "present", NOW)

    def test_unknown_user(self, store, meeting):
        with pytest.raises(NotFoundError, match="User not found"):
            set_status(store, meeting.id, "999999", "present", NOW)

    def test_closed_window_writes_nothing(self, store, chairman, members):
        later = make_meeting(store, NOW + timedelta(days=2), chairman.id)

        with pytest.raises(WindowClosedError, match="Attendance opens in"):
            set_status(store, later.id, members[0].id, "present", NOW)
        assert store.get_attendance_for_meeting(later.id) == []

    def test_example_meeting_through_the_store(self, store, meeting, sonai, members):
        a, b = members[0], members[1]
        set_status(store, meeting.id, a.id, "present", NOW)
        set_status(store, meeting.id, b.id, "absent", NOW)

        summary = get_summary(store, meeting.id)
        # Roster: three members plus the organizer
        assert summary.roster_size == 4
        assert summary.present_count == 1
        assert summary.absent_count == 1
        assert summary.pending_count == 2
        assert summary.completion_percentage == 50
        assert summary.attendance_rate == 25


@pytest.mark.unit
class TestMarkAllPending:

    def test_marks_only_pending_members(self, store, meeting, sonai, members):
        set_status(store, meeting.id, members[0].id, "absent", NOW)

        updated = mark_all_pending(store, meeting.id, "present", NOW)

        assert updated == 3
        summary = get_summary(store, meeting.id)
        assert summary.pending_count == 0
        assert summary.is_complete
        assert member_status(summary, members[0].id) is MemberStatus.ABSENT
        assert member_status(summary, sonai.id) is MemberStatus.PRESENT

    def test_nothing_pending(self, store, meeting, members):
        for member in members:
            set_status(store, meeting.id, member.id, "present", NOW)
        assert mark_all_pending(store, meeting.id, "absent", NOW) == 0

    def test_closed_window_rejects_whole_batch(self, store, chairman, members):
        past = make_meeting(store, NOW - timedelta(days=1), chairman.id)

        with pytest.raises(WindowClosedError):
            mark_all_pending(store, past.id, "present", NOW)
        assert store.get_attendance_for_meeting(past.id) == []

    def test_invalid_status(self, store, meeting, members):
        with pytest.raises(InvalidStatusError):
            mark_all_pending(store, meeting.id, "pending", NOW)


@pytest.mark.unit
class TestQrScan:

    def test_resolve_exact_match(self, store, members):
        assert resolve_by_qr_code("imran_qr_104", members).id == members[1].id

    def test_resolve_is_case_sensitive(self, store, members):
        with pytest.raises(NotFoundError):
            resolve_by_qr_code("IMRAN_QR_104", members)

    def test_scan_marks_only_that_member(self, store, meeting, sonai, members):
        user, record = scan_qr_code(store, meeting.id, "jaffer_qr_110", NOW)

        assert user.id == members[2].id
        assert record.status is AttendanceStatus.PRESENT
        summary = get_summary(store, meeting.id)
        assert summary.present_count == 1
        assert summary.pending_count == summary.roster_size - 1

    def test_unknown_code(self, store, meeting, members):
        with pytest.raises(NotFoundError, match="No member matches"):
            scan_qr_code(store, meeting.id, "nobody_qr_000", NOW)
        assert store.get_attendance_for_meeting(meeting.id) == []

    def test_chairman_code_is_not_on_the_roster(self, store, meeting, chairman):
        assert chairman.role is Role.CHAIRMAN
        with pytest.raises(NotFoundError):
            scan_qr_code(store, meeting.id, "chairman_qr_456", NOW)
