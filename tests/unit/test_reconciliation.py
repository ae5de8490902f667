"""Unit tests for attendance reconciliation."""
from datetime import timedelta

import pytest

from cedoi.core.enums import AttendanceStatus, MemberStatus, Role
from cedoi.schemas import AttendanceRecord, User
from cedoi.services.reconciliation import build_roster, latest_records_by_user, reconcile
from tests.utils import NOW


def user(user_id, name, role=Role.MEMBER):
    return User(id=user_id, email=f"{name.lower()}@cedoi.com", name=name, role=role)


def record(record_id, user_id, status, meeting_id=1, minutes=0):
    return AttendanceRecord(
        id=record_id,
        meeting_id=meeting_id,
        user_id=user_id,
        status=status,
        timestamp=NOW + timedelta(minutes=minutes),
    )


@pytest.mark.unit
class TestBuildRoster:

    def test_chairman_is_not_on_the_roster(self):
        users = [user(1, "Chair", Role.CHAIRMAN), user(2, "Sonai", Role.SONAI), user(3, "Andrew")]
        assert [u.id for u in build_roster(users)] == [2, 3]

    def test_empty(self):
        assert build_roster([]) == []


@pytest.mark.unit
class TestReconcile:
    """Counts, percentages and partitions of a meeting's roster."""

    def test_example_meeting(self):
        """Two of three marked, one present: 67% complete, 33% attendance."""
        a, b, c = user(1, "Andrew"), user(2, "Imran"), user(3, "Sonai", Role.SONAI)
        records = [record(1, a.id, AttendanceStatus.PRESENT), record(2, b.id, AttendanceStatus.ABSENT)]

        summary = reconcile(1, [a, b, c], records)

        assert summary.present_count == 1
        assert summary.absent_count == 1
        assert summary.pending_count == 1
        assert summary.completion_percentage == 67
        assert summary.attendance_rate == 33
        assert summary.is_complete is False

        records.append(record(3, c.id, AttendanceStatus.PRESENT))
        summary = reconcile(1, [a, b, c], records)

        assert summary.pending_count == 0
        assert summary.is_complete is True
        assert summary.completion_percentage == 100
        assert summary.attendance_rate == 67

    def test_unmarked_members_are_pending_not_absent(self):
        roster = [user(1, "Andrew"), user(2, "Imran")]
        summary = reconcile(1, roster, [])

        assert summary.pending_count == 2
        assert summary.absent_count == 0
        assert all(entry.status is MemberStatus.PENDING for entry in summary.pending)
        assert all(entry.record_id is None for entry in summary.pending)

    def test_empty_roster(self):
        summary = reconcile(1, [], [])

        assert summary.roster_size == 0
        assert summary.completion_percentage == 0
        assert summary.attendance_rate == 0
        assert summary.is_complete is False

    def test_records_for_users_outside_the_roster_are_ignored(self):
        roster = [user(1, "Andrew")]
        records = [
            record(1, 1, AttendanceStatus.PRESENT),
            record(2, 99, AttendanceStatus.PRESENT),
            record(3, 98, AttendanceStatus.ABSENT),
        ]
        summary = reconcile(1, roster, records)

        assert summary.roster_size == 1
        assert summary.present_count + summary.absent_count + summary.pending_count == 1
        assert summary.attendance_rate == 100

    def test_every_member_lands_in_exactly_one_partition(self):
        roster = [user(i, f"Member{i}") for i in range(1, 8)]
        records = [
            record(1, 1, AttendanceStatus.PRESENT),
            record(2, 2, AttendanceStatus.ABSENT),
            record(3, 5, AttendanceStatus.PRESENT),
        ]
        summary = reconcile(1, roster, records)

        ids = [entry.user.id for entry in summary.members]
        assert sorted(ids) == list(range(1, 8))
        assert summary.present_count + summary.absent_count + summary.pending_count == summary.roster_size

    def test_latest_record_wins_for_a_user(self):
        roster = [user(1, "Andrew")]
        records = [record(1, 1, AttendanceStatus.ABSENT), record(2, 1, AttendanceStatus.PRESENT, minutes=1)]

        summary = reconcile(1, roster, records)

        assert summary.present_count == 1
        assert summary.absent_count == 0

    def test_ids_match_across_int_and_str(self):
        roster = [user(7, "Andrew")]
        summary = reconcile(1, roster, [record("r1", "7", AttendanceStatus.PRESENT)])
        assert summary.present_count == 1

    def test_marking_never_lowers_completion(self):
        roster = [user(i, f"Member{i}") for i in range(1, 6)]
        records = []
        previous = reconcile(1, roster, records).completion_percentage

        for i, status in enumerate([AttendanceStatus.ABSENT, AttendanceStatus.PRESENT] * 2 + [AttendanceStatus.ABSENT], 1):
            records.append(record(i, i, status))
            current = reconcile(1, roster, records).completion_percentage
            assert current >= previous
            previous = current

        assert previous == 100

    def test_partitions_are_sorted_by_name(self):
        roster = [user(1, "zeta"), user(2, "Alpha"), user(3, "beta")]
        summary = reconcile(1, roster, [])
        assert [entry.user.name for entry in summary.pending] == ["Alpha", "beta", "zeta"]

    def test_percentages_stay_in_bounds(self):
        roster = [user(1, "Andrew")]
        records = [record(i, 1, AttendanceStatus.PRESENT) for i in range(5)]
        summary = reconcile(1, roster, records)

        assert 0 <= summary.completion_percentage <= 100
        assert 0 <= summary.attendance_rate <= 100


@pytest.mark.unit
def test_latest_records_by_user_keys_are_strings():
    by_user = latest_records_by_user([record(1, 3, AttendanceStatus.PRESENT)])
    assert list(by_user) == ["3"]
