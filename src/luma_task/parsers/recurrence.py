"""Recurrence extraction for free-form task input.

Rules are checked in a fixed order and the first one that matches wins:
daily, monthly, yearly, every-N interval, biweekly, named weekday(s),
generic weekly. The matched phrase is consumed from the working text.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from .normalize import consume
from .vocabulary import WEEKDAY_NAMES, WEEKDAY_PLURALS

logger = logging.getLogger(__name__)


class RecurrenceType(Enum):
    """Kinds of repetition a task can carry."""
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    INTERVAL = "interval"
    WEEKDAY = "weekday"


class Unit(Enum):
    """Unit of an every-N interval."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


GERMAN_WEEKDAYS = ("Sonntag", "Montag", "Dienstag", "Mittwoch",
                   "Donnerstag", "Freitag", "Samstag")

_UNIT_LABELS = {
    Unit.DAY: ("Tag", "Tage"),
    Unit.WEEK: ("Woche", "Wochen"),
    Unit.MONTH: ("Monat", "Monate"),
}


@dataclass(frozen=True)
class Recurrence:
    """A repetition rule. Weekday indices run 0=Sunday .. 6=Saturday."""

    type: RecurrenceType
    interval: Optional[int] = None
    unit: Optional[Unit] = None
    weekday: Optional[int] = None
    days_of_week: FrozenSet[int] = field(default_factory=frozenset)

    @classmethod
    def daily(cls) -> "Recurrence":
        return cls(RecurrenceType.DAILY)

    @classmethod
    def weekly(cls, days_of_week: Iterable[int] = ()) -> "Recurrence":
        return cls(RecurrenceType.WEEKLY, days_of_week=frozenset(days_of_week))

    @classmethod
    def biweekly(cls) -> "Recurrence":
        return cls(RecurrenceType.BIWEEKLY)

    @classmethod
    def monthly(cls) -> "Recurrence":
        return cls(RecurrenceType.MONTHLY)

    @classmethod
    def yearly(cls) -> "Recurrence":
        return cls(RecurrenceType.YEARLY)

    @classmethod
    def every(cls, amount: int, unit: Unit) -> "Recurrence":
        if amount < 1:
            raise ValueError(f"Interval must be positive, got {amount}")
        return cls(RecurrenceType.INTERVAL, interval=amount, unit=unit)

    @classmethod
    def on_weekday(cls, weekday: int) -> "Recurrence":
        if not 0 <= weekday <= 6:
            raise ValueError(f"Weekday must be in 0..6, got {weekday}")
        return cls(RecurrenceType.WEEKDAY, weekday=weekday)

    def describe(self) -> str:
        """Short German label, as shown next to a task."""
        if self.type == RecurrenceType.DAILY:
            return "Täglich"
        if self.type == RecurrenceType.WEEKLY:
            if self.days_of_week:
                days = ", ".join(GERMAN_WEEKDAYS[d] for d in sorted(self.days_of_week))
                return f"Wöchentlich ({days})"
            return "Wöchentlich"
        if self.type == RecurrenceType.BIWEEKLY:
            return "Alle 2 Wochen"
        if self.type == RecurrenceType.MONTHLY:
            return "Monatlich"
        if self.type == RecurrenceType.YEARLY:
            return "Jährlich"
        if self.type == RecurrenceType.INTERVAL:
            singular, plural = _UNIT_LABELS[self.unit]
            if self.interval == 1:
                return f"Jede(n) {singular}"
            return f"Alle {self.interval} {plural}"
        return f"Jeden {GERMAN_WEEKDAYS[self.weekday]}"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value}
        if self.interval is not None:
            data["interval"] = self.interval
        if self.unit is not None:
            data["unit"] = self.unit.value
        if self.weekday is not None:
            data["weekday"] = self.weekday
        if self.days_of_week:
            data["days_of_week"] = sorted(self.days_of_week)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recurrence":
        unit = data.get("unit")
        return cls(
            type=RecurrenceType(data["type"]),
            interval=data.get("interval"),
            unit=Unit(unit) if unit else None,
            weekday=data.get("weekday"),
            days_of_week=frozenset(data.get("days_of_week", [])),
        )


def _keyword_pattern(*phrases: str) -> "re.Pattern[str]":
    return re.compile(r"\b(?:" + "|".join(phrases) + r")\b", re.IGNORECASE)


DAILY_PATTERN = _keyword_pattern("jeden tag", "täglich", "every day", "daily")
MONTHLY_PATTERN = _keyword_pattern("jeden monat", "monatlich", "every month", "monthly")
YEARLY_PATTERN = _keyword_pattern("jährlich", "yearly", "every year", "annually", "jedes jahr")
INTERVAL_PATTERN = re.compile(
    r"\b(?:alle?|every)\s+(\d+)\s*(tage?n?|wochen?|monate?n?|days?|weeks?|months?)\b",
    re.IGNORECASE,
)
BIWEEKLY_PATTERN = _keyword_pattern(
    "zweiwöchentlich", "biweekly", "every other week", "every second week",
    "jede zweite woche", "alle zwei wochen",
)
WEEKLY_PATTERN = _keyword_pattern("jede woche", "wöchentlich", "every week", "weekly")

_DAY_INDEX = {name: idx for idx, names in enumerate(WEEKDAY_NAMES) for name in names}
_PLURAL_INDEX = {name: idx for idx, names in enumerate(WEEKDAY_PLURALS) for name in names}


def _alternation(names: Iterable[str]) -> str:
    return "(?:" + "|".join(sorted(names, key=len, reverse=True)) + r")\b"


_DAY = _alternation(_DAY_INDEX)
_PLURAL = _alternation(_PLURAL_INDEX)
_PREFIX = r"(?:jeden|jede|every|alle)"
_JOIN = r"\s*(?:,|und|and|&)\s*"

NAMED_WEEKDAY_PATTERN = re.compile(
    rf"\b{_PREFIX}\s+{_DAY}(?:{_JOIN}(?:{_PREFIX}\s+)?{_DAY})*", re.IGNORECASE
)
PLURAL_WEEKDAY_PATTERN = re.compile(
    rf"\b{_PLURAL}(?:{_JOIN}{_PLURAL})*", re.IGNORECASE
)
_DAY_TOKEN = re.compile(rf"\b{_DAY}", re.IGNORECASE)
_PLURAL_TOKEN = re.compile(rf"\b{_PLURAL}", re.IGNORECASE)


def _unit_from_word(word: str) -> Unit:
    word = word.lower()
    if word.startswith(("tag", "day")):
        return Unit.DAY
    if word.startswith(("woch", "week")):
        return Unit.WEEK
    return Unit.MONTH


def _named_weekdays(text: str) -> Tuple[Optional[Recurrence], Optional["re.Pattern[str]"]]:
    for pattern, token, index in (
        (NAMED_WEEKDAY_PATTERN, _DAY_TOKEN, _DAY_INDEX),
        (PLURAL_WEEKDAY_PATTERN, _PLURAL_TOKEN, _PLURAL_INDEX),
    ):
        match = pattern.search(text)
        if not match:
            continue
        days = []
        for name in token.findall(match.group(0)):
            day = index[name.lower()]
            if day not in days:
                days.append(day)
        if len(days) == 1:
            return Recurrence.on_weekday(days[0]), pattern
        return Recurrence.weekly(days), pattern
    return None, None


def parse_recurrence(text: str) -> Tuple[Optional[Recurrence], str]:
    """Detect a recurrence phrase and return it with the remaining text."""
    for pattern, factory in (
        (DAILY_PATTERN, Recurrence.daily),
        (MONTHLY_PATTERN, Recurrence.monthly),
        (YEARLY_PATTERN, Recurrence.yearly),
    ):
        if pattern.search(text):
            recurrence = factory()
            logger.debug(f"Recurrence {recurrence.type.value} matched in {text!r}")
            return recurrence, consume(text, pattern)

    match = INTERVAL_PATTERN.search(text)
    if match and int(match.group(1)) > 0:
        recurrence = Recurrence.every(int(match.group(1)), _unit_from_word(match.group(2)))
        logger.debug(f"Interval recurrence {recurrence.interval} {recurrence.unit.value} matched")
        return recurrence, consume(text, INTERVAL_PATTERN)

    if BIWEEKLY_PATTERN.search(text):
        return Recurrence.biweekly(), consume(text, BIWEEKLY_PATTERN)

    recurrence, pattern = _named_weekdays(text)
    if recurrence:
        logger.debug(f"Weekday recurrence {recurrence.to_dict()} matched")
        return recurrence, consume(text, pattern)

    if WEEKLY_PATTERN.search(text):
        return Recurrence.weekly(), consume(text, WEEKLY_PATTERN)

    return None, text
