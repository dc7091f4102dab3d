"""Transcription segment flattening into timed word tokens."""

from .segments import (
    TranscriptSegment,
    TranscriptWord,
    build_reference_lines,
    flatten_words,
)

__all__ = [
    "TranscriptSegment",
    "TranscriptWord",
    "build_reference_lines",
    "flatten_words",
]
