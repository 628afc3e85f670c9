"""Answer normalization and edit distance for comparison."""

from __future__ import annotations

import re
import unicodedata


def fold_diacritics(text: str) -> str:
    """Drop combining marks: 'Brasília' -> 'Brasilia'."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: str, fold: bool = False, collapse: bool = False) -> str:
    """Normalize text for comparison: strip and lowercase.

    Inner whitespace runs are squeezed to one space only when ``collapse`` is set.
    """
    text = text.strip()
    if collapse:
        text = re.sub(r"\s+", " ", text)
    if fold:
        text = fold_diacritics(text)
    return text.lower()


def levenshtein(a: str, b: str) -> int:
    """Unit-cost edit distance between two strings."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ch_a in enumerate(a, start=1):
        current = [i]
        for j, ch_b in enumerate(b, start=1):
            cost = 0 if ch_a == ch_b else 1
            current.append(min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """1 - distance / longest length; two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(a, b) / longest
