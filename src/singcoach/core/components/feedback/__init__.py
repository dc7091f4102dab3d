"""Segment and coaching feedback component."""

from .feedback_builder import build_detailed_feedback
from .feedback_models import (
    DetailedFeedback,
    DrillType,
    FeedbackSubscores,
    NextDrill,
    SegmentFeedback,
    Substitution,
)

__all__ = [
    "build_detailed_feedback",
    "DetailedFeedback",
    "DrillType",
    "FeedbackSubscores",
    "NextDrill",
    "SegmentFeedback",
    "Substitution",
]
