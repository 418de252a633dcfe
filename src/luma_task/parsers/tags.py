"""Category tags and a representative icon, read from the original input."""

from typing import FrozenSet, Optional, Tuple

from .vocabulary import DEFAULT_VOCABULARY, Vocabulary


def extract_tags(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> FrozenSet[str]:
    """Every tag whose keyword occurs anywhere in ``text``."""
    lower = text.lower()
    return frozenset(tag for keyword, tag in vocabulary.tags.items() if keyword in lower)


def get_icon(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Optional[str]:
    """Icon of the first keyword, in table order, that occurs in ``text``."""
    lower = text.lower()
    for keyword, icon in vocabulary.icons.items():
        if keyword in lower:
            return icon
    return None


def extract_tags_and_icon(
    text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY
) -> Tuple[FrozenSet[str], Optional[str]]:
    return extract_tags(text, vocabulary), get_icon(text, vocabulary)
