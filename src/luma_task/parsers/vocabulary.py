"""Keyword tables used by the task input parser.

All tables are read-only. Callers that need extra keywords build a new
:class:`Vocabulary` with :meth:`Vocabulary.extended` instead of touching
the module-level defaults.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


# Connector words that are left dangling once a date/time phrase is removed.
CONNECTORS: Tuple[str, ...] = (
    "am", "um", "im", "in", "zum", "zur", "beim", "für", "mit",
    "ab", "bis", "on", "at", "ins",
)

# 0=Sunday .. 6=Saturday. Iteration order is significant.
WEEKDAY_NAMES: Tuple[Tuple[str, ...], ...] = (
    ("sonntag", "sunday", "sun"),
    ("montag", "monday", "mon"),
    ("dienstag", "tuesday", "tues", "tue"),
    ("mittwoch", "wednesday", "wed"),
    ("donnerstag", "thursday", "thurs", "thur", "thu"),
    ("freitag", "friday", "fri"),
    ("samstag", "saturday", "sat"),
)

# German two-letter forms; only honoured behind a connector.
WEEKDAY_SHORT: Tuple[str, ...] = ("so", "mo", "di", "mi", "do", "fr", "sa")

# Adverbial plural forms ("montags", "mondays") imply recurrence.
WEEKDAY_PLURALS: Tuple[Tuple[str, ...], ...] = (
    ("sonntags", "sundays"),
    ("montags", "mondays"),
    ("dienstags", "tuesdays"),
    ("mittwochs", "wednesdays"),
    ("donnerstags", "thursdays"),
    ("freitags", "fridays"),
    ("samstags", "saturdays"),
)

# Day-part keyword pattern -> hour, checked in order.
DAY_PARTS: Tuple[Tuple[str, int], ...] = (
    (r"morgens?|morning|früh|early|vormittags?|frühstück|breakfast", 8),
    (r"mittags?|noon|lunch|mittagessen", 12),
    (r"nachmittags?|afternoon", 15),
    (r"abends?|evening|tonight|dinner|abendessen", 19),
    (r"nachts?|night|midnight", 23),
)

TAG_KEYWORDS: Mapping[str, str] = MappingProxyType({
    "frühstück": "Frühstück", "breakfast": "Frühstück",
    "mittag": "Mittagessen", "lunch": "Mittagessen",
    "abendessen": "Abendessen", "dinner": "Abendessen",
    "gym": "Fitness", "fitness": "Fitness", "sport": "Fitness", "training": "Fitness",
    "termin": "Termin", "appointment": "Termin", "meeting": "Termin",
    "arbeit": "Arbeit", "work": "Arbeit",
    "hausaufgaben": "Lernen", "lernen": "Lernen", "study": "Lernen",
    "einkaufen": "Einkauf", "shopping": "Einkauf",
})

ICON_KEYWORDS: Mapping[str, str] = MappingProxyType({
    "gym": "🏋️", "sport": "🏃", "yoga": "🧘", "kochen": "🍳", "essen": "🍴",
    "einkaufen": "🛒", "arbeit": "💼", "meeting": "📅", "anruf": "📞",
    "lesen": "📚", "code": "💻", "putzen": "🧹", "schlafen": "😴",
    "arzt": "🏥", "geld": "💰", "auto": "🚗", "party": "🎉", "idee": "💡",
})


@dataclass(frozen=True)
class Vocabulary:
    """Immutable bundle of the keyword tables a parser works with."""

    tags: Mapping[str, str] = field(default_factory=lambda: TAG_KEYWORDS)
    icons: Mapping[str, str] = field(default_factory=lambda: ICON_KEYWORDS)
    day_parts: Tuple[Tuple[str, int], ...] = DAY_PARTS

    def extended(self, tags: Optional[Dict[str, str]] = None,
                 icons: Optional[Dict[str, str]] = None) -> "Vocabulary":
        """Return a copy with additional keywords appended after the defaults."""
        merged_tags = dict(self.tags)
        for key, label in (tags or {}).items():
            merged_tags[key.lower()] = label
        merged_icons = dict(self.icons)
        for key, icon in (icons or {}).items():
            merged_icons[key.lower()] = icon
        return Vocabulary(
            tags=MappingProxyType(merged_tags),
            icons=MappingProxyType(merged_icons),
            day_parts=self.day_parts,
        )


DEFAULT_VOCABULARY = Vocabulary()
