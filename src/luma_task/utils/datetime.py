"""Datetime helpers.

Due dates are local wall-clock times. Everything the task model stores is
timezone-aware; naive values are interpreted in the local timezone.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

import parsedatetime


def now_local() -> datetime:
    """Return the current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure datetime is timezone-aware, assuming local time if naive.

    Args:
        dt: Datetime to check/convert, or None

    Returns:
        Timezone-aware datetime, or None if input was None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.astimezone()
    return dt


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """Convert datetime to an ISO string with offset, or None."""
    if dt is None:
        return None
    return ensure_aware(dt).isoformat()


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp written by :func:`to_iso_string`.

    Returns None for missing or malformed values.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    try:
        return ensure_aware(datetime.fromisoformat(value))
    except (TypeError, ValueError):
        return None


def day_bounds(day: date, reference: Optional[datetime] = None):
    """Start and end (exclusive) of ``day`` in the timezone of ``reference``."""
    reference = reference or now_local()
    start = datetime.combine(day, time.min, tzinfo=reference.tzinfo)
    return start, start + timedelta(days=1)


def parse_date_option(value: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Parse an explicit date given on the command line.

    Accepts ISO dates and anything parsedatetime understands
    ("next friday", "2026-11-03 14:00"). Returns None if nothing was
    recognised.
    """
    if not value or not value.strip():
        return None
    now = now or now_local()

    try:
        return ensure_aware(datetime.fromisoformat(value.strip()))
    except ValueError:
        pass

    calendar = parsedatetime.Calendar()
    time_struct, status = calendar.parse(value, sourceTime=now.replace(tzinfo=None).timetuple())
    if status == 0:
        return None
    return datetime(*time_struct[:6]).replace(tzinfo=now.tzinfo)
