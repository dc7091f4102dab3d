"""Alignment and performance scoring core."""

from .models import (
    AlignmentStatus,
    AlignmentWordResult,
    ConfidenceLabel,
    PracticeMode,
    ReferenceLine,
    WordToken,
)

__all__ = [
    "AlignmentStatus",
    "AlignmentWordResult",
    "ConfidenceLabel",
    "PracticeMode",
    "ReferenceLine",
    "WordToken",
]
