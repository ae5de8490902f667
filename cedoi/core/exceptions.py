"""Domain exceptions.

Every error raised by the services carries the HTTP status it maps to, so the
API layer renders all of them through one exception handler.
"""


class AttendanceError(Exception):
    """Base class for all attendance service errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AttendanceError):
    """Malformed input."""

    status_code = 400


class InvalidStatusError(ValidationError):
    """Attendance status outside {present, absent}."""


class NotFoundError(AttendanceError):
    """Missing meeting, user or QR code match."""

    status_code = 404


class WindowClosedError(AttendanceError):
    """Attendance write attempted outside the meeting's attendance window."""

    status_code = 409


class PermissionDeniedError(AttendanceError):
    status_code = 403


class ConflictError(AttendanceError):
    status_code = 409


class StorageError(AttendanceError):
    """Persistence backend I/O failure. Safe to retry."""

    status_code = 503
