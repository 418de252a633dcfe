"""Merge a resolved date and a resolved clock time into one due timestamp."""

from datetime import datetime, timedelta
from typing import Optional

DEFAULT_HOUR = 9
DEFAULT_MINUTE = 0


def apply_time(date: datetime, hour: int, minute: int) -> datetime:
    """Set the clock time on ``date``, dropping seconds."""
    return date.replace(hour=hour, minute=minute, second=0, microsecond=0)


def compose_datetime(
    date: Optional[datetime],
    hour: Optional[int],
    minute: Optional[int],
    now: datetime,
    default_hour: int = DEFAULT_HOUR,
    default_minute: int = DEFAULT_MINUTE,
) -> Optional[datetime]:
    """Combine date and time according to the due-date policy.

    - date and time: the time is set on the date
    - date only: the default time (09:00) is set on the date
    - time only: the time today, or tomorrow if that moment has passed
    - neither: no due date
    """
    if date is not None:
        if hour is None:
            return apply_time(date, default_hour, default_minute)
        return apply_time(date, hour, minute or 0)

    if hour is None:
        return None

    candidate = apply_time(now, hour, minute or 0)
    if candidate < now:
        candidate += timedelta(days=1)
    return candidate
