"""Closed enumerations for roles and attendance states, with the role predicates."""
from enum import Enum


class Role(str, Enum):
    CHAIRMAN = "chairman"
    SONAI = "sonai"  # organizer
    MEMBER = "member"


class AttendanceStatus(str, Enum):
    """Statuses that may be persisted."""

    PRESENT = "present"
    ABSENT = "absent"


class MemberStatus(str, Enum):
    """Effective status of a roster member; PENDING is computed, never stored."""

    PRESENT = "present"
    ABSENT = "absent"
    PENDING = "pending"


def is_roster_role(role: Role) -> bool:
    """Members and organizers can be marked; chairmen never appear on a roster."""
    return role in (Role.MEMBER, Role.SONAI)


def can_create_meeting(role: Role) -> bool:
    return role is Role.CHAIRMAN


def can_mark_attendance(role: Role) -> bool:
    return role in (Role.CHAIRMAN, Role.SONAI)
