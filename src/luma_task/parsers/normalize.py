"""Text normalization and the ``consume`` primitive shared by all extractors."""

import re
from typing import Pattern, Union

from .vocabulary import CONNECTORS


UMLAUT_MAP = {
    "ä": "ae", "ö": "oe", "ü": "ue",
    "Ä": "AE", "Ö": "OE", "Ü": "UE",
    "ß": "ss",
}

_WHITESPACE = re.compile(r"\s+")
_CONNECTOR_GROUP = "(?:" + "|".join(CONNECTORS) + ")"
_LEADING_CONNECTOR = re.compile(rf"^{_CONNECTOR_GROUP}(?:\s+|$)", re.IGNORECASE)
_TRAILING_CONNECTOR = re.compile(rf"(?:^|\s+){_CONNECTOR_GROUP}$", re.IGNORECASE)
# "10 am" is an English clock time; its "am" is not a dangling connector.
_CLOCK_AM = re.compile(r"\d\s*am$", re.IGNORECASE)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def normalize(text: str) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    return collapse_whitespace(text.lower())


def remove_umlauts(text: str) -> str:
    """Replace German umlauts and sharp s with their ASCII spellings."""
    return "".join(UMLAUT_MAP.get(char, char) for char in text)


def normalize_for_comparison(text: str) -> str:
    """Normalize and fold umlauts, for accent-agnostic comparisons only."""
    return remove_umlauts(normalize(text))


def strip_trailing_connectors(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        if _CLOCK_AM.search(text):
            break
        text = _TRAILING_CONNECTOR.sub("", text).rstrip()
    return text


def strip_leading_connectors(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        text = _LEADING_CONNECTOR.sub("", text).lstrip()
    return text


def strip_connectors(text: str) -> str:
    """Remove dangling connector words from both ends of ``text``."""
    text = collapse_whitespace(text)
    return strip_leading_connectors(strip_trailing_connectors(text))


def consume(text: str, pattern: Union[str, Pattern[str]]) -> str:
    """Remove the first match of ``pattern`` from ``text``.

    A connector word directly in front of the removed span is dropped along
    with it ("geschenk für morgen kaufen" -> "geschenk kaufen"), then any
    connector left dangling at either end of the text is stripped. A plain
    string pattern is matched literally. If nothing matches, ``text`` is
    returned unchanged.
    """
    if isinstance(pattern, str):
        pattern = re.compile(re.escape(pattern), re.IGNORECASE)

    match = pattern.search(text)
    if not match:
        return text
    return consume_span(text, match.start(), match.end())


def consume_span(text: str, start: int, end: int) -> str:
    """Remove ``text[start:end]``, tidying connectors like :func:`consume`."""
    before = strip_trailing_connectors(text[:start].rstrip())
    after = text[end:].lstrip()
    return strip_connectors(f"{before} {after}")
