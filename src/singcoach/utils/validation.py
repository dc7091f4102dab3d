"""Validation of attempt inputs before they reach the scoring core.

The scoring core assumes non-negative, temporally monotonic inputs and never
raises. Structurally invalid attempts are rejected here instead.
"""

import logging
from typing import Optional, Sequence

from ..core.models import ReferenceLine, WordToken
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_word_tokens(tokens: Sequence[WordToken], label: str = "words") -> Sequence[WordToken]:
    """Reject negative times, inverted spans and out-of-order word starts."""
    prev_start: Optional[float] = None
    for position, token in enumerate(tokens):
        if token.start < 0 or token.end < 0:
            raise ValidationError(f"{label}[{position}] ({token.word!r}) has a negative timestamp")
        if token.end < token.start:
            raise ValidationError(f"{label}[{position}] ({token.word!r}) ends before it starts")
        if prev_start is not None and token.start < prev_start:
            raise ValidationError(
                f"{label}[{position}] ({token.word!r}) starts before the previous word"
            )
        prev_start = token.start
    return tokens


def validate_reference_lines(lines: Sequence[ReferenceLine]) -> Sequence[ReferenceLine]:
    for line in lines:
        if line.start < 0 or line.end < line.start:
            raise ValidationError(f"Reference line {line.index} has an invalid span")
    return lines


def validate_duration(value: Optional[float], label: str) -> Optional[float]:
    """Durations may be unknown (None) but never negative."""
    if value is not None and value < 0:
        raise ValidationError(f"{label} cannot be negative")
    return value


def validate_verse_window(verse_start_sec: float, verse_end_sec: float) -> float:
    """Validate the verse window and return its duration."""
    if verse_start_sec < 0:
        raise ValidationError("Verse start cannot be negative")
    if verse_end_sec < verse_start_sec:
        raise ValidationError("Verse end must not precede verse start")
    return verse_end_sec - verse_start_sec


def validate_attempt(attempt):
    """Validate a parsed ``AttemptInput`` and return it unchanged."""
    validate_word_tokens(attempt.reference_words, "referenceWords")
    validate_word_tokens(attempt.user_words, "userWords")
    if attempt.reference_lines:
        validate_reference_lines(attempt.reference_lines)
    validate_verse_window(attempt.verse_start_sec, attempt.verse_end_sec)
    validate_duration(attempt.performance.reference_duration_sec, "Reference duration")
    validate_duration(attempt.performance.recording_duration_sec, "Recording duration")
    logger.debug(
        "Validated attempt: %d reference words, %d user words",
        len(attempt.reference_words),
        len(attempt.user_words),
    )
    return attempt
