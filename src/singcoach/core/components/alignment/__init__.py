"""Word alignment component."""

from .alignment_models import AlignmentMetrics, AlignmentOptions, AlignmentResult
from .word_aligner import align_words, confidence_label

__all__ = [
    "AlignmentMetrics",
    "AlignmentOptions",
    "AlignmentResult",
    "align_words",
    "confidence_label",
]
