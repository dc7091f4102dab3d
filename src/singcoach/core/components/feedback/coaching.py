"""Coaching tips, segment issue notes and drill selection."""

from typing import List, Optional, Sequence

from ....config import (
    ACCURACY_TIP_THRESHOLD,
    DRAGGING_PACE_RATIO,
    OFFSET_NOTE_MIN_MS,
    REPEAT_SEGMENT_COUNT,
    RUSHING_PACE_RATIO,
    TIMING_WARNING_MS,
    WEAK_SEGMENT_ACCURACY,
)
from ...models import AlignmentStatus, AlignmentWordResult
from ...scoring_utils import clamp_score, round_half_away
from ...text_utils import safe_display_token
from .feedback_models import FeedbackSubscores, NextDrill, SegmentFeedback

MAX_ISSUE_WORDS = 4
MAX_TIP_WORDS = 5


def build_segment_issues(
    segment_words: Sequence[AlignmentWordResult], timing_mean_abs_ms: int
) -> List[str]:
    """Fixed-priority issue notes: missed words, then incorrect words, then timing."""
    issues: List[str] = []
    missed = [
        safe_display_token(w.ref_word)
        for w in segment_words
        if w.status == AlignmentStatus.MISSED
    ]
    incorrect = [
        safe_display_token(w.ref_word)
        for w in segment_words
        if w.status == AlignmentStatus.INCORRECT
    ]
    if missed:
        issues.append(f"Missed {', '.join(missed[:MAX_ISSUE_WORDS])}.")
    if incorrect and len(issues) < 2:
        issues.append(f"Incorrect words: {', '.join(incorrect[:MAX_ISSUE_WORDS])}.")
    if timing_mean_abs_ms > TIMING_WARNING_MS:
        issues.append(f"Timing off by ~{timing_mean_abs_ms}ms.")
    if not issues:
        issues.append("Nice line. Keep the timing consistent.")
    return issues


def build_coach_tips(
    word_accuracy_pct: int,
    timing_mean_abs_ms: int,
    pace_ratio: float,
    missed_words: Sequence[str],
    estimated_offset_ms: Optional[float] = None,
) -> List[str]:
    """Every applicable tip, in order; a generic positive tip if none apply."""
    tips: List[str] = []

    if word_accuracy_pct < ACCURACY_TIP_THRESHOLD:
        missed = ", ".join(missed_words[:MAX_TIP_WORDS])
        if missed:
            tips.append(f"Focus on the missed words: {missed}.")
        else:
            tips.append("Focus on lyric accuracy - keep the words tight.")

    if timing_mean_abs_ms > TIMING_WARNING_MS:
        offset_note = ""
        if estimated_offset_ms is not None and abs(estimated_offset_ms) > OFFSET_NOTE_MIN_MS:
            offset_note = (
                f" (offset corrected by {round_half_away(estimated_offset_ms)}ms)"
            )
        tips.append(
            f"Timing is off by about {timing_mean_abs_ms}ms{offset_note}. "
            "Lock into the reference cue."
        )

    if pace_ratio > RUSHING_PACE_RATIO:
        tips.append("You're rushing this verse. Slow down slightly and match the phrasing.")
    if pace_ratio < DRAGGING_PACE_RATIO:
        tips.append("You're dragging a bit. Push forward to match the reference pace.")

    if not tips:
        tips.append("Nice take - aim for even tighter timing on the next pass.")
    return tips


def find_worst_segment(segments: Sequence[SegmentFeedback]) -> Optional[SegmentFeedback]:
    """Lowest-accuracy segment; the earliest one wins ties."""
    worst: Optional[SegmentFeedback] = None
    for segment in segments:
        if worst is None or segment.word_accuracy_pct < worst.word_accuracy_pct:
            worst = segment
    return worst


def select_next_drill(
    segments: Sequence[SegmentFeedback], timing_mean_abs_ms: int, pace_ratio: float
) -> NextDrill:
    worst = find_worst_segment(segments)
    if worst is not None and worst.word_accuracy_pct < WEAK_SEGMENT_ACCURACY:
        return NextDrill.repeat_segment(worst.segment_index, REPEAT_SEGMENT_COUNT)
    if timing_mean_abs_ms > TIMING_WARNING_MS:
        return NextDrill.timing_lock()
    if pace_ratio > RUSHING_PACE_RATIO:
        return NextDrill.slow_down()
    return NextDrill.accuracy_clean()


def score_timing(timing_mean_abs_ms: float) -> int:
    return clamp_score(100 - timing_mean_abs_ms / 5)


def score_pace(pace_ratio: float) -> int:
    return clamp_score(100 - abs(1 - pace_ratio) * 200)


def build_subscores(
    word_accuracy_pct: float, timing_mean_abs_ms: float, pace_ratio: float
) -> FeedbackSubscores:
    return FeedbackSubscores(
        word_accuracy=clamp_score(word_accuracy_pct),
        timing=score_timing(timing_mean_abs_ms),
        pace=score_pace(pace_ratio),
    )
