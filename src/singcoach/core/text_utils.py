"""
Text utilities for normalizing lyric and transcription tokens.

Normalized tokens are the correctness key for word alignment: two words are
the same word exactly when their normalized forms are equal.
"""

import re

_APOSTROPHES = re.compile(r"[’']")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")
_SENTENCE_END = re.compile(r"[.!?]$")


def normalize_token(token: str) -> str:
    """Lower-case a token, drop apostrophes and strip non-alphanumerics.

    >>> normalize_token("Don't!")
    'dont'
    """
    if not token:
        return ""
    token = token.lower()
    token = _APOSTROPHES.sub("", token)
    return _NON_ALNUM.sub("", token)


def safe_display_token(token: str) -> str:
    """Collapse internal whitespace for display without altering the word."""
    return _WHITESPACE.sub(" ", token).strip()


def ends_sentence(token: str) -> bool:
    """True when the raw token ends in sentence punctuation (., ! or ?)."""
    return bool(_SENTENCE_END.search(token))
