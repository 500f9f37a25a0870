"""
Date/time helpers.

Every timestamp the backend writes is UTC. Dashboard periods are calendar
days in UTC, expressed as half-open [start, end) intervals so they can be
compared directly against `created_at` columns.
"""

from datetime import date, datetime, time, timedelta, timezone


def utc_now() -> datetime:
    """Current time as a tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def trailing_window(days: int, *, now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    The last `days` calendar days, today included.

    trailing_window(7) on a Friday covers the previous Saturday 00:00 up to
    Saturday 00:00 after today.
    """
    today = (now or utc_now()).date()
    start, _ = day_bounds(today - timedelta(days=days - 1))
    _, end = day_bounds(today)
    return start, end
