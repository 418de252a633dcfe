"""Natural language task input parser.

Turns a sentence such as ``"Zahnarzt morgen 14:30"`` into a title plus
structured metadata. Stages share one working string that shrinks as each
stage consumes what it recognised:

    normalize -> recurrence -> date -> time -> compose

Tags and the icon are read from the untouched input, and whatever text is
left at the end becomes the title.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

from ..utils.datetime import now_local
from .compose import DEFAULT_HOUR, DEFAULT_MINUTE, compose_datetime
from .dates import resolve_date
from .normalize import normalize
from .recurrence import Recurrence, parse_recurrence
from .tags import extract_tags_and_icon
from .times import parse_time
from .title import FALLBACK_TITLE, clean_title
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedTask:
    """Structured result of parsing one line of task input.

    ``time`` is the recognised clock time as ``"HH:MM"``, or None.
    """

    title: str
    date: Optional[datetime] = None
    recurrence: Optional[Recurrence] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)
    icon: Optional[str] = None
    time: Optional[str] = None


class TaskParser:
    """Parser bound to one vocabulary and one set of default values."""

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        default_hour: int = DEFAULT_HOUR,
        default_minute: int = DEFAULT_MINUTE,
        fallback_title: str = FALLBACK_TITLE,
    ):
        self.vocabulary = vocabulary
        self.default_hour = default_hour
        self.default_minute = default_minute
        self.fallback_title = fallback_title

    @classmethod
    def from_config(cls, config) -> "TaskParser":
        """Build a parser from a :class:`~luma_task.config.ConfigModel`."""
        vocabulary = DEFAULT_VOCABULARY.extended(
            tags=config.extra_tag_keywords, icons=config.extra_icon_keywords
        )
        return cls(
            vocabulary=vocabulary,
            default_hour=config.default_due_hour,
            default_minute=config.default_due_minute,
            fallback_title=config.fallback_title,
        )

    def parse(self, text: str, now: Optional[datetime] = None) -> ParsedTask:
        """Parse ``text`` relative to ``now`` (sampled once if omitted)."""
        if now is None:
            now = now_local()

        working = normalize(text)
        recurrence, working = parse_recurrence(working)
        date, working = resolve_date(working, now)
        hour, minute, working = parse_time(working, self.vocabulary.day_parts)
        due = compose_datetime(
            date, hour, minute, now,
            default_hour=self.default_hour, default_minute=self.default_minute,
        )
        tags, icon = extract_tags_and_icon(text, self.vocabulary)
        title = clean_title(working, self.fallback_title)

        time_label = f"{hour:02d}:{minute:02d}" if hour is not None else None
        logger.debug(f"Parsed {text!r} -> title={title!r} due={due} recurrence={recurrence}")
        return ParsedTask(
            title=title,
            date=due,
            recurrence=recurrence,
            tags=tags,
            icon=icon,
            time=time_label,
        )


_default_parser = TaskParser()


def parse_task(text: str, now: Optional[datetime] = None) -> ParsedTask:
    """Parse ``text`` with the default German/English vocabulary."""
    return _default_parser.parse(text, now)
