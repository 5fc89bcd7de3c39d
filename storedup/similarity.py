"""Name similarity scoring."""

from __future__ import annotations

from typing import Optional

from rapidfuzz import fuzz
from rapidfuzz.distance import Levenshtein

from storedup.normalize import normalize_name, normalize_to_alphanumeric
from storedup.rules import NormalizationRules


def calculate_similarity(
    a: str, b: str, rules: Optional[NormalizationRules] = None
) -> float:
    """Score how alike two store names are, from 0.0 to 1.0.

    Names are compared by their normalized keys. The score is the higher of
    the normalized Levenshtein similarity and the Indel ratio, both of which
    are symmetric. When a name has no key (it was only generic suffixes) both
    names are compared by their plain alphanumeric form instead, so two
    unrelated suffix-only names never look identical.
    """
    key_a = normalize_name(a, rules)
    key_b = normalize_name(b, rules)

    if not key_a or not key_b:
        key_a = normalize_to_alphanumeric(a)
        key_b = normalize_to_alphanumeric(b)
        if not key_a and not key_b:
            return 1.0 if a and a.lower() == b.lower() else 0.0
        if not key_a or not key_b:
            return 0.0

    if key_a == key_b:
        return 1.0

    levenshtein = Levenshtein.normalized_similarity(key_a, key_b)
    indel = fuzz.ratio(key_a, key_b) / 100.0
    return max(levenshtein, indel)
