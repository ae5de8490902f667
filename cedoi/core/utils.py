"""General utility functions."""
import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple
from zoneinfo import ZoneInfo


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if no timezone
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_timezone(dt: datetime, tz: ZoneInfo) -> datetime:
    """Convert datetime to specified timezone."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def local_day_bounds(now: datetime, tz: ZoneInfo) -> Tuple[datetime, datetime]:
    """
    Return [start of today, start of tomorrow) in UTC for the calendar day
    containing `now` in timezone `tz`.
    """
    local_now = to_timezone(now, tz)
    start_local = datetime(local_now.year, local_now.month, local_now.day, tzinfo=tz)
    # Aware arithmetic is wall-clock arithmetic, so this is the next local midnight
    end_local = start_local + timedelta(days=1)
    return to_utc(start_local), to_utc(end_local)


def percent(numerator: int, denominator: int) -> int:
    """
    Whole-number percentage, rounded half up and clamped to [0, 100].

    Returns 0 when the denominator is zero.
    """
    if denominator <= 0:
        return 0
    value = (Decimal(numerator) * 100 / Decimal(denominator)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return max(0, min(100, int(value)))


def minutes_until(delta: timedelta) -> int:
    """Whole minutes remaining, rounded up so an open interval never reads as 0."""
    return max(0, math.ceil(delta.total_seconds() / 60))


def minutes_since(delta: timedelta) -> int:
    """Whole minutes elapsed, rounded down."""
    return max(0, math.floor(delta.total_seconds() / 60))


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
