"""Phonetic and text similarity utilities for lyrics alignment.

The phonetic skeleton is a coarse, vowel-stripped, digraph-reduced form of a
word. It only biases fuzzy matching during alignment and is never used to
decide whether a sung word was correct.
"""

import re
from typing import Tuple

from rapidfuzz.distance import Levenshtein

from .text_utils import normalize_token

# Applied in order; later rules see the output of earlier ones.
_PHONETIC_RULES: Tuple[Tuple[str, str], ...] = (
    ("ph", "f"),
    ("ght", "t"),
    ("ck", "k"),
    ("cq", "k"),
    ("qu", "k"),
    ("x", "ks"),
    ("kn", "n"),
    ("wr", "r"),
    ("wh", "w"),
)
_VOWEL_REGEX = re.compile("[aeiouy]")
_REPEAT_REGEX = re.compile(r"(.)\1+")


def phonetic_normalize(token: str) -> str:
    """Reduce a token to its consonant skeleton.

    >>> phonetic_normalize("Knight")
    'nt'
    """
    value = normalize_token(token)
    if not value:
        return ""
    for pattern, replacement in _PHONETIC_RULES:
        value = value.replace(pattern, replacement)
    value = _VOWEL_REGEX.sub("", value)
    return _REPEAT_REGEX.sub(r"\1", value)


def levenshtein_similarity(a: str, b: str) -> float:
    """``1 - distance / max(len)`` clamped to [0, 1]; 0 if either side is empty."""
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    distance = Levenshtein.distance(a, b)
    return max(0.0, min(1.0, 1.0 - distance / max(len(a), len(b))))


def token_similarity(a: str, b: str) -> float:
    """Similarity of two raw tokens measured on their phonetic skeletons."""
    if not a or not b:
        return 0.0
    return levenshtein_similarity(phonetic_normalize(a), phonetic_normalize(b))
