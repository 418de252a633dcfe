"""Turn the leftover working text into a presentable title."""

import re

from .normalize import strip_connectors

FALLBACK_TITLE = "Aufgabe"

_EDGE_PUNCTUATION = re.compile(r"^[,.\- ]+|[,.\- ]+$")


def clean_title(text: str, fallback: str = FALLBACK_TITLE) -> str:
    """Strip edge punctuation and connectors, capitalize the first letter.

    Never returns an empty string; ``fallback`` is used instead.
    """
    title = text.strip()
    previous = None
    while previous != title:
        previous = title
        title = _EDGE_PUNCTUATION.sub("", title)
        title = strip_connectors(title)

    if not title:
        return fallback
    return title[0].upper() + title[1:]
