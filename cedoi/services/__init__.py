from .attendance import (
    get_meeting_or_404,
    get_roster,
    get_summary,
    get_user_or_404,
    mark_all_pending,
    member_status,
    parse_status,
    resolve_by_qr_code,
    scan_qr_code,
    set_status,
)
from .auth import OTP_SENT_MESSAGE, OtpManager
from .meetings import create_meeting, get_todays_meeting, list_meetings
from .notifications import generate_notifications, notifications_for_user
from .reconciliation import build_roster, latest_records_by_user, reconcile
from .reports import (
    export_meeting_csv,
    export_member_report_csv,
    member_report,
    render_meeting_html,
    report_filename,
)
from .stats import get_attendance_stats
from .users import create_user, generate_qr_code, get_user_qr_code, list_users
from .window import WindowCheck, check_write_window, ensure_write_allowed, is_write_allowed

__all__ = [
    # attendance
    "get_meeting_or_404",
    "get_roster",
    "get_summary",
    "get_user_or_404",
    "mark_all_pending",
    "member_status",
    "parse_status",
    "resolve_by_qr_code",
    "scan_qr_code",
    "set_status",
    # auth
    "OTP_SENT_MESSAGE",
    "OtpManager",
    # meetings
    "create_meeting",
    "get_todays_meeting",
    "list_meetings",
    # notifications
    "generate_notifications",
    "notifications_for_user",
    # reconciliation
    "build_roster",
    "latest_records_by_user",
    "reconcile",
    # reports
    "export_meeting_csv",
    "export_member_report_csv",
    "member_report",
    "render_meeting_html",
    "report_filename",
    # stats
    "get_attendance_stats",
    # users
    "create_user",
    "generate_qr_code",
    "get_user_qr_code",
    "list_users",
    # window
    "WindowCheck",
    "check_write_window",
    "ensure_write_allowed",
    "is_write_allowed",
]
