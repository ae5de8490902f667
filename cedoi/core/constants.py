"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Venue
# Every forum meeting is held here unless a chairman sets another venue
DEFAULT_VENUE = "Mariat Hotel, Madurai"

# Attendance Window
# Writes are accepted from 30 minutes before the meeting until 2 hours after it starts
WINDOW_OPENS_BEFORE_MINUTES = 30
WINDOW_CLOSES_AFTER_MINUTES = 120

# Notifications
REMINDER_LEAD_MINUTES = 60  # "Upcoming meeting" reminder horizon
URGENT_LEAD_MINUTES = 5  # "Starting now" alert horizon
NEW_MEETING_LOOKBACK_HOURS = 24
LOW_ATTENDANCE_THRESHOLD_PERCENT = 50
LOW_ATTENDANCE_MIN_ROSTER = 5

# Member report periods (days); None means all meetings
REPORT_PERIODS = {
    "week": 7,
    "month": 30,
    "quarter": 90,
    "all": None,
}

# Session Configuration
SESSION_COOKIE_NAME = "session_token"
# Token expiration time in minutes (12 hours, one forum day)
ACCESS_TOKEN_EXPIRE_MINUTES = 720

# OTP Configuration
OTP_LENGTH = 6
OTP_EXPIRE_MINUTES = 10

# Upsert retries when two writers race on the same (meeting, user) pair
MAX_UPSERT_ATTEMPTS = 3
