"""Date resolution: relative phrases, weekday names and explicit dates.

Every resolver takes the working text plus a fixed ``now`` and returns
``(date_or_None, remaining_text)``. Resolved dates keep ``now``'s clock
time and timezone; the composer sets the final time of day.
"""

import logging
import re
from calendar import monthrange
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from .normalize import consume, consume_span
from .vocabulary import WEEKDAY_NAMES, WEEKDAY_SHORT

logger = logging.getLogger(__name__)

DateResult = Tuple[Optional[datetime], str]


def add_months(date: datetime, months: int) -> datetime:
    """Add months to a date, clamping the day to the target month's length."""
    month = date.month - 1 + months
    year = date.year + month // 12
    month = month % 12 + 1
    day = min(date.day, monthrange(year, month)[1])
    return date.replace(year=year, month=month, day=day)


def sunday_based_weekday(date: datetime) -> int:
    """Weekday index with 0=Sunday, as used by recurrence rules."""
    return (date.weekday() + 1) % 7


def next_weekday(now: datetime, weekday: int) -> datetime:
    """Next occurrence of ``weekday`` (0=Sunday) strictly after today."""
    days_ahead = (weekday - sunday_based_weekday(now)) % 7
    if days_ahead == 0:
        days_ahead = 7
    return now + timedelta(days=days_ahead)


# Relative phrases, checked in order. Each maps to an offset from now.
RELATIVE_RULES: List[Tuple["re.Pattern[str]", Callable[[datetime], datetime]]] = [
    (re.compile(r"\b(?:heute|today)\b", re.IGNORECASE), lambda now: now),
    (re.compile(r"\b(?:morgen|tomorrow)\b", re.IGNORECASE), lambda now: now + timedelta(days=1)),
    (re.compile(r"\bübermorgen\b", re.IGNORECASE), lambda now: now + timedelta(days=2)),
    (re.compile(r"\b(?:nächste woche|next week)\b", re.IGNORECASE), lambda now: now + timedelta(weeks=1)),
]

IN_N_UNITS_PATTERN = re.compile(
    r"\bin\s+(\d+)\s+(tage?n?|wochen?|monate?n?|days?|weeks?|months?)\b",
    re.IGNORECASE,
)


def _offset(now: datetime, amount: int, unit: str) -> datetime:
    unit = unit.lower()
    if unit.startswith(("tag", "day")):
        return now + timedelta(days=amount)
    if unit.startswith(("woch", "week")):
        return now + timedelta(weeks=amount)
    return add_months(now, amount)


def parse_relative_date(text: str, now: datetime) -> DateResult:
    """Resolve today/tomorrow/day-after-tomorrow/next-week/"in N units"."""
    for pattern, resolve in RELATIVE_RULES:
        if pattern.search(text):
            logger.debug(f"Relative date {pattern.pattern!r} matched")
            return resolve(now), consume(text, pattern)

    match = IN_N_UNITS_PATTERN.search(text)
    if match:
        try:
            date = _offset(now, int(match.group(1)), match.group(2))
        except (OverflowError, ValueError):
            logger.debug(f"Ignoring out-of-range offset {match.group(0)!r}")
            return None, text
        logger.debug(f"Relative offset {match.group(0)!r} matched")
        return date, consume(text, IN_N_UNITS_PATTERN)

    return None, text


# "10 am montag": an "am" right after a number is a clock suffix, not a prefix.
_DATE_PREFIX = r"(?<!\d\s)(?:am|on|next|nächsten?|nächster)"


def _weekday_pattern(names: Tuple[str, ...], short: str) -> "re.Pattern[str]":
    full = "|".join(names)
    return re.compile(
        rf"\b(?:{_DATE_PREFIX}\s+)?(?:{full})\b|\b{_DATE_PREFIX}\s+{short}\b",
        re.IGNORECASE,
    )


# Sunday..Saturday; the first day in this order that appears wins.
WEEKDAY_PATTERNS: Tuple["re.Pattern[str]", ...] = tuple(
    _weekday_pattern(names, short) for names, short in zip(WEEKDAY_NAMES, WEEKDAY_SHORT)
)


def parse_weekday_date(text: str, now: datetime) -> DateResult:
    """Resolve a weekday name to its next occurrence after today."""
    for weekday, pattern in enumerate(WEEKDAY_PATTERNS):
        if pattern.search(text):
            logger.debug(f"Weekday {weekday} matched")
            return next_weekday(now, weekday), consume(text, pattern)
    return None, text


GERMAN_DATE_PATTERN = re.compile(
    r"\b(?:am\s+)?(\d{1,2})\.(\d{1,2})\.(\d{4}|\d{2})?(?!\d)", re.IGNORECASE
)
ISO_DATE_PATTERN = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")


def _build_date(now: datetime, year: int, month: int, day: int) -> Optional[datetime]:
    try:
        return now.replace(year=year, month=month, day=day)
    except ValueError:
        return None


def parse_explicit_date(text: str, now: datetime) -> DateResult:
    """Resolve ``DD.MM.``, ``DD.MM.YYYY`` or ISO ``YYYY-MM-DD`` dates.

    Impossible calendar dates are skipped and left in the text. A date
    without a year that already lies in the past is moved to next year.
    """
    for match in ISO_DATE_PATTERN.finditer(text):
        year, month, day = (int(g) for g in match.groups())
        date = _build_date(now, year, month, day)
        if date is not None:
            return date, consume_span(text, match.start(), match.end())

    for match in GERMAN_DATE_PATTERN.finditer(text):
        day, month = int(match.group(1)), int(match.group(2))
        year_text = match.group(3)
        if year_text:
            year = int(year_text)
            if year < 100:
                year += 2000
            date = _build_date(now, year, month, day)
        else:
            date = _build_date(now, now.year, month, day)
            if date is not None and date.date() < now.date():
                date = _build_date(now, now.year + 1, month, day)
        if date is None:
            logger.debug(f"Ignoring impossible date {match.group(0)!r}")
            continue
        return date, consume_span(text, match.start(), match.end())

    return None, text


DATE_RESOLVERS = (parse_relative_date, parse_weekday_date, parse_explicit_date)


def resolve_date(text: str, now: datetime) -> DateResult:
    """Run the date passes in order; only the first hit produces a date."""
    for resolver in DATE_RESOLVERS:
        date, remaining = resolver(text, now)
        if date is not None:
            return date, remaining
    return None, text
