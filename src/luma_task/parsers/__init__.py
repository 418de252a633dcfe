"""Natural language parsing of task input."""

from .compose import apply_time, compose_datetime
from .dates import (
    next_weekday,
    parse_explicit_date,
    parse_relative_date,
    parse_weekday_date,
    resolve_date,
)
from .normalize import consume, normalize, normalize_for_comparison, remove_umlauts
from .pipeline import ParsedTask, TaskParser, parse_task
from .recurrence import Recurrence, RecurrenceType, Unit, parse_recurrence
from .tags import extract_tags, extract_tags_and_icon, get_icon
from .times import parse_time
from .title import FALLBACK_TITLE, clean_title
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

__all__ = [
    "ParsedTask",
    "TaskParser",
    "parse_task",
    "Recurrence",
    "RecurrenceType",
    "Unit",
    "parse_recurrence",
    "parse_relative_date",
    "parse_weekday_date",
    "parse_explicit_date",
    "resolve_date",
    "next_weekday",
    "parse_time",
    "compose_datetime",
    "apply_time",
    "extract_tags",
    "get_icon",
    "extract_tags_and_icon",
    "clean_title",
    "FALLBACK_TITLE",
    "normalize",
    "normalize_for_comparison",
    "remove_umlauts",
    "consume",
    "Vocabulary",
    "DEFAULT_VOCABULARY",
]
