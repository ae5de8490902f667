"""Unit tests for attendance statistics."""
from datetime import timedelta

import pytest

from cedoi.core.enums import AttendanceStatus
from cedoi.services.stats import get_attendance_stats
from tests.utils import NOW, make_meeting


@pytest.fixture
def history(store, chairman, members):
    first = make_meeting(store, NOW - timedelta(days=7), chairman.id)
    second = make_meeting(store, NOW, chairman.id)
    store.update_status(first.id, members[0].id, AttendanceStatus.PRESENT, NOW)
    store.update_status(first.id, members[1].id, AttendanceStatus.ABSENT, NOW)
    store.update_status(second.id, members[0].id, AttendanceStatus.PRESENT, NOW)
    return first, second


@pytest.mark.unit
class TestAttendanceStats:

    def test_empty_store(self, store):
        stats = get_attendance_stats(store)
        assert stats.total_meetings == 0
        assert stats.average_attendance == 0
        assert stats.present_count == 0
        assert stats.absent_count == 0

    def test_forum_wide(self, store, members, history):
        stats = get_attendance_stats(store)
        assert stats.total_meetings == 2
        assert stats.present_count == 2
        assert stats.absent_count == 1
        assert stats.average_attendance == 67

    def test_always_present_member(self, store, members, history):
        stats = get_attendance_stats(store, members[0].id)
        assert stats.total_meetings == 2
        assert stats.average_attendance == 100

    def test_absent_member(self, store, members, history):
        stats = get_attendance_stats(store, members[1].id)
        assert stats.total_meetings == 1
        assert stats.present_count == 0
        assert stats.absent_count == 1
        assert stats.average_attendance == 0

    def test_member_without_records(self, store, members, history):
        stats = get_attendance_stats(store, members[2].id)
        assert stats.total_meetings == 0
        assert stats.average_attendance == 0

    def test_serializes_camel_case(self, store):
        data = get_attendance_stats(store).model_dump(by_alias=True)
        assert set(data) == {"totalMeetings", "averageAttendance", "presentCount", "absentCount"}
