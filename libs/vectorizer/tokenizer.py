"""Text normalization for TF-IDF vectorization."""

import re
from typing import List

# Anything that is not a Latin or Cyrillic letter, an ASCII digit, or whitespace.
_SEPARATOR_PATTERN = re.compile(r"[^a-zA-Zа-яА-Я0-9\s]+")

MIN_TOKEN_LENGTH = 2


def tokenize(text: str) -> List[str]:
    """Split ``text`` into lower-cased tokens of at least two characters.

    Runs of punctuation and other unsupported characters collapse to a single
    space before splitting on whitespace.
    """
    if not text:
        return []
    cleaned = _SEPARATOR_PATTERN.sub(" ", text.lower())
    return [token for token in cleaned.split() if len(token) >= MIN_TOKEN_LENGTH]
