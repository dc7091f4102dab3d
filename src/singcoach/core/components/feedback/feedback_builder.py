"""Build the detailed word/segment/drill report for one sung attempt."""

from typing import List, Optional, Sequence, Tuple

from ....config import COVERAGE_MIN_RATIO, COVERAGE_TAIL_SEC, SEGMENT_END_TOLERANCE_SEC
from ....utils.logging import get_logger
from ...models import AlignmentStatus, ConfidenceLabel, ReferenceLine, WordToken
from ...scoring_utils import mean
from ...text_utils import normalize_token, safe_display_token
from ..alignment import AlignmentOptions, align_words, confidence_label
from .coaching import (
    build_coach_tips,
    build_segment_issues,
    build_subscores,
    select_next_drill,
)
from .feedback_models import DetailedFeedback, SegmentFeedback, Substitution
from .segments import (
    build_segments_from_lines,
    build_segments_from_words,
    collect_segment_results,
    merge_short_segments,
    timing_mean_abs_ms,
    weighted_accuracy_pct,
)

logger = get_logger(__name__)

INCOMPLETE_TAKE_MESSAGE = "You stopped early - record the full verse to score it."
LOW_CONFIDENCE_WARNING = "Low transcription confidence; word penalties softened."


def _apply_coverage_guard(
    reference_words: Sequence[WordToken],
    reference_lines: Optional[Sequence[ReferenceLine]],
    user_words: Sequence[WordToken],
    verse_duration: float,
) -> Tuple[List[WordToken], Optional[List[ReferenceLine]], Optional[str]]:
    """Drop reference material the singer never reached when the take stopped early."""
    last_user_end = user_words[-1].end if user_words else 0.0
    if verse_duration <= 0:
        return (
            list(reference_words),
            list(reference_lines) if reference_lines is not None else None,
            None,
        )

    coverage = last_user_end / verse_duration
    if coverage >= COVERAGE_MIN_RATIO:
        return (
            list(reference_words),
            list(reference_lines) if reference_lines is not None else None,
            None,
        )

    coverage_end = min(verse_duration, last_user_end + COVERAGE_TAIL_SEC)
    cutoff = coverage_end + SEGMENT_END_TOLERANCE_SEC
    words = [w for w in reference_words if w.start <= cutoff]
    lines = (
        [line for line in reference_lines if line.start <= cutoff]
        if reference_lines is not None
        else None
    )
    logger.debug(
        "Take covers %.0f%% of the verse; scoring %d of %d reference words",
        coverage * 100,
        len(words),
        len(reference_words),
    )
    return words, lines, INCOMPLETE_TAKE_MESSAGE


def _score_segments(
    segments: Sequence[SegmentFeedback],
    reference_words: Sequence[WordToken],
    per_word,
) -> List[SegmentFeedback]:
    results_by_ref = {w.ref_index: w for w in per_word}
    scored: List[SegmentFeedback] = []
    for segment in segments:
        aligned = collect_segment_results(segment, reference_words, results_by_ref)
        segment_timing = timing_mean_abs_ms(aligned)
        scored.append(
            SegmentFeedback(
                segment_index=segment.segment_index,
                text=segment.text,
                start=segment.start,
                end=segment.end,
                word_accuracy_pct=weighted_accuracy_pct(aligned),
                timing_mean_abs_ms=segment_timing,
                main_issues=build_segment_issues(aligned, segment_timing),
            )
        )
    return scored


def build_detailed_feedback(
    reference_words: Sequence[WordToken],
    user_words: Sequence[WordToken],
    verse_start_sec: float,
    verse_end_sec: float,
    reference_lines: Optional[Sequence[ReferenceLine]] = None,
    estimated_offset_ms: Optional[float] = None,
) -> DetailedFeedback:
    """Align an attempt to its reference verse and build the coaching report.

    Args:
        reference_words: Timed reference words, relative to the verse start
        user_words: Timed words transcribed from the recording
        verse_start_sec: Verse start in the reference track
        verse_end_sec: Verse end in the reference track
        reference_lines: Optional lyric lines; one segment per line when given
        estimated_offset_ms: Recording lag from the offset estimator, if any

    Returns:
        DetailedFeedback with per-word results, scored segments, tips and a drill
    """
    verse_duration = max(0.0, verse_end_sec - verse_start_sec)
    user_duration = (
        max(0.0, user_words[-1].end - user_words[0].start) if user_words else 0.0
    )

    ref_words, ref_lines, message = _apply_coverage_guard(
        reference_words, reference_lines, user_words, verse_duration
    )

    offset_sec = estimated_offset_ms / 1000 if estimated_offset_ms is not None else 0.0
    alignment = align_words(
        ref_words,
        user_words,
        AlignmentOptions(
            reference_offset_sec=0.0,
            user_offset_sec=offset_sec,
            reference_duration_sec=verse_duration,
            user_duration_sec=user_duration,
        ),
    )

    if ref_lines:
        raw_segments = build_segments_from_lines(ref_lines, ref_words)
    else:
        raw_segments = build_segments_from_words(ref_words)
    segments = _score_segments(
        merge_short_segments(raw_segments), ref_words, alignment.per_word
    )

    metrics = alignment.metrics
    pace_ratio = metrics.pace_ratio or 1.0
    timing_mean = metrics.timing_mean_abs_ms
    if alignment.per_word:
        word_accuracy_pct = weighted_accuracy_pct(alignment.per_word)
    else:
        word_accuracy_pct = metrics.word_accuracy_pct

    coach_tips = build_coach_tips(
        word_accuracy_pct,
        timing_mean,
        pace_ratio,
        metrics.missed_words,
        estimated_offset_ms,
    )
    next_drill = select_next_drill(segments, timing_mean, pace_ratio)

    substitutions = [
        Substitution(
            ref_word=safe_display_token(w.ref_word),
            user_word=safe_display_token(w.user_word),
            confidence=w.confidence,
            confidence_label=w.confidence_label,
        )
        for w in alignment.per_word
        if w.status == AlignmentStatus.INCORRECT and w.user_word
    ]

    average_confidence = mean(
        w.confidence for w in alignment.per_word if w.confidence is not None
    )
    report_label = confidence_label(average_confidence)
    warnings: List[str] = []
    if report_label == ConfidenceLabel.LOW:
        warnings.append(LOW_CONFIDENCE_WARNING)

    logger.debug(
        "Feedback: accuracy=%d%% timing=%dms pace=%.2f segments=%d drill=%s",
        word_accuracy_pct,
        timing_mean,
        pace_ratio,
        len(segments),
        next_drill.type.value,
    )

    return DetailedFeedback(
        word_accuracy_pct=word_accuracy_pct,
        timing_mean_abs_ms=timing_mean,
        pace_ratio=pace_ratio,
        per_word=alignment.per_word,
        segments=segments,
        coach_tips=coach_tips,
        next_drill=next_drill,
        subscores=build_subscores(word_accuracy_pct, timing_mean, pace_ratio),
        missed_words=[t for t in map(normalize_token, metrics.missed_words) if t],
        extra_words=[t for t in map(normalize_token, metrics.extra_words) if t],
        substitutions=substitutions,
        confidence_label=report_label,
        estimated_offset_ms=estimated_offset_ms,
        message=message,
        warnings=warnings,
    )
