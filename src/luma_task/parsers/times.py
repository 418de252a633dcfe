"""Clock time extraction.

Checked in order, first hit wins: ``HH:MM``/``HH.MM``, ``H uhr``/``H am``/
``H pm``, ``um H``, then day-part keywords mapped to fixed hours.
"""

import logging
import re
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from .normalize import consume, consume_span
from .vocabulary import DAY_PARTS

logger = logging.getLogger(__name__)

TimeResult = Tuple[Optional[int], Optional[int], str]

# A dotted pair followed by another dot is a date fragment ("12.13."), not a time.
CLOCK_PATTERN = re.compile(
    r"\b(\d{1,2})(?::(\d{2})|\.(\d{2})(?!\.))(?:\s*uhr)?\b", re.IGNORECASE
)
SUFFIX_PATTERN = re.compile(
    r"\b(\d{1,2})\s*(?:(uhr)(?:\s+(\d{2})\b)?|(a\.m\.|p\.m\.|am|pm)(?!\w))",
    re.IGNORECASE,
)
UM_PATTERN = re.compile(r"\bum\s+(\d{1,2})\b(?![:.]\d)", re.IGNORECASE)


def _valid(hour: int, minute: int) -> bool:
    return 0 <= hour <= 23 and 0 <= minute <= 59


def _apply_period(hour: int, period: str) -> Optional[int]:
    if not 1 <= hour <= 12:
        return None
    if "p" in period and hour < 12:
        return hour + 12
    if "a" in period and hour == 12:
        return 0
    return hour


@lru_cache(maxsize=8)
def _day_part_patterns(day_parts: Tuple[Tuple[str, int], ...]):
    return [(re.compile(rf"\b(?:{words})\b", re.IGNORECASE), hour) for words, hour in day_parts]


def parse_time(text: str, day_parts: Optional[Sequence[Tuple[str, int]]] = None) -> TimeResult:
    """Extract ``(hour, minute, remaining_text)`` from the working text."""
    for match in CLOCK_PATTERN.finditer(text):
        hour, minute = int(match.group(1)), int(match.group(2) or match.group(3))
        if _valid(hour, minute):
            logger.debug(f"Clock time {hour:02d}:{minute:02d} matched")
            return hour, minute, consume_span(text, match.start(), match.end())

    for match in SUFFIX_PATTERN.finditer(text):
        hour = int(match.group(1))
        if match.group(2):
            minute = int(match.group(3) or 0)
            if not _valid(hour, minute):
                continue
        else:
            hour = _apply_period(hour, match.group(4).lower())
            minute = 0
            if hour is None:
                continue
        logger.debug(f"Suffixed time {hour:02d}:{minute:02d} matched")
        return hour, minute, consume_span(text, match.start(), match.end())

    for match in UM_PATTERN.finditer(text):
        hour = int(match.group(1))
        if _valid(hour, 0):
            return hour, 0, consume_span(text, match.start(), match.end())

    for pattern, hour in _day_part_patterns(tuple(day_parts or DAY_PARTS)):
        if pattern.search(text):
            logger.debug(f"Day part {pattern.pattern!r} -> {hour}:00")
            return hour, 0, consume(text, pattern)

    return None, None, text
