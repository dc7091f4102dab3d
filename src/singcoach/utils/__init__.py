"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    validate_attempt,
    validate_duration,
    validate_reference_lines,
    validate_verse_window,
    validate_word_tokens,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_attempt",
    "validate_duration",
    "validate_reference_lines",
    "validate_verse_window",
    "validate_word_tokens",
]
