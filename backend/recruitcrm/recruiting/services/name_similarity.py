"""Name similarity used by the name + company matching rule."""

import re

from rapidfuzz.distance import Levenshtein

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Lowercase, trim and collapse internal whitespace runs to one space."""
    return _WHITESPACE.sub(" ", name.lower().strip())


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance over Unicode code points."""
    return Levenshtein.distance(a, b)


def name_similarity(name1: str, name2: str) -> float:
    """Similarity in [0, 1] between two person names.

    Identical normalized names (including two empty names) score 1.0,
    otherwise ``(max_len - distance) / max_len``.
    """
    n1 = normalize_name(name1)
    n2 = normalize_name(name2)

    if n1 == n2:
        return 1.0

    max_length = max(len(n1), len(n2))
    return (max_length - levenshtein_distance(n1, n2)) / max_length
