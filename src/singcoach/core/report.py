"""Combine word feedback and performance scoring into one attempt report."""

from dataclasses import dataclass, field, replace
from typing import List, Optional

from ..utils.logging import get_logger
from .components.feedback import DetailedFeedback, build_detailed_feedback
from .components.performance import (
    PerformanceAnalysisInput,
    PerformanceAnalysisResult,
    analyze_performance,
)
from .components.performance.analyzer import envelope_step_sec
from .models import ReferenceLine, WordToken
from .offset import OffsetEstimate, OffsetEstimator, estimate_offset

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttemptInput:
    """Everything upstream collaborators supply for one sung attempt."""

    reference_words: List[WordToken]
    user_words: List[WordToken]
    verse_start_sec: float
    verse_end_sec: float
    reference_lines: Optional[List[ReferenceLine]] = None
    performance: PerformanceAnalysisInput = field(
        default_factory=PerformanceAnalysisInput
    )
    offset: Optional[OffsetEstimate] = None


@dataclass(frozen=True)
class AttemptReport:
    feedback: DetailedFeedback
    performance: PerformanceAnalysisResult
    offset: OffsetEstimate


def score_attempt(
    attempt: AttemptInput, estimator: Optional[OffsetEstimator] = None
) -> AttemptReport:
    """Score one attempt end to end.

    An offset supplied with the attempt wins over ``estimator``. Without
    either, the offset already on the performance signals is kept. The
    feedback word-accuracy subscore is passed to the performance scorer as
    its word score so both halves of the report agree.
    """
    performance_input = attempt.performance
    offset = attempt.offset
    given_ms = performance_input.estimated_offset_ms
    if offset is None and estimator is None and given_ms is not None:
        offset = OffsetEstimate(offset_ms=given_ms)
    elif offset is None:
        offset = estimate_offset(
            estimator,
            performance_input.reference_envelope,
            performance_input.recording_envelope,
            envelope_step_sec(performance_input),
        )

    feedback = build_detailed_feedback(
        attempt.reference_words,
        attempt.user_words,
        verse_start_sec=attempt.verse_start_sec,
        verse_end_sec=attempt.verse_end_sec,
        reference_lines=attempt.reference_lines,
        estimated_offset_ms=offset.offset_ms,
    )
    performance = analyze_performance(
        replace(
            performance_input,
            estimated_offset_ms=offset.offset_ms,
            word_score=feedback.subscores.word_accuracy,
        )
    )
    logger.info(
        "Attempt scored: overall=%d words=%d%% drill=%s",
        performance.overall,
        feedback.word_accuracy_pct,
        feedback.next_drill.type.value,
    )
    return AttemptReport(feedback=feedback, performance=performance, offset=offset)
