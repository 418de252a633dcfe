"""
Scheduling for recurring tasks.

Given the due date of the occurrence just completed, work out when the next
one is due. The clock time of the due date is carried over unchanged.
"""

from datetime import datetime, timedelta

from .parsers.dates import add_months, next_weekday, sunday_based_weekday
from .parsers.recurrence import Recurrence, RecurrenceType, Unit


def _next_weekly_occurrence(from_date: datetime, recurrence: Recurrence) -> datetime:
    """Calculate next weekly occurrence"""
    if not recurrence.days_of_week:
        return from_date + timedelta(weeks=1)

    current = sunday_based_weekday(from_date)
    days_ahead = min((day - current) % 7 or 7 for day in recurrence.days_of_week)
    return from_date + timedelta(days=days_ahead)


def _next_interval_occurrence(from_date: datetime, recurrence: Recurrence) -> datetime:
    """Calculate next every-N occurrence"""
    if recurrence.unit == Unit.DAY:
        return from_date + timedelta(days=recurrence.interval)
    if recurrence.unit == Unit.WEEK:
        return from_date + timedelta(weeks=recurrence.interval)
    return add_months(from_date, recurrence.interval)


def next_occurrence(from_date: datetime, recurrence: Recurrence) -> datetime:
    """Calculate the next due date after ``from_date``"""
    if recurrence.type == RecurrenceType.DAILY:
        return from_date + timedelta(days=1)
    elif recurrence.type == RecurrenceType.WEEKLY:
        return _next_weekly_occurrence(from_date, recurrence)
    elif recurrence.type == RecurrenceType.BIWEEKLY:
        return from_date + timedelta(weeks=2)
    elif recurrence.type == RecurrenceType.MONTHLY:
        return add_months(from_date, 1)
    elif recurrence.type == RecurrenceType.YEARLY:
        return add_months(from_date, 12)
    elif recurrence.type == RecurrenceType.INTERVAL:
        return _next_interval_occurrence(from_date, recurrence)
    return next_weekday(from_date, recurrence.weekday)
