"""Segmentation of the reference timeline and per-segment scoring."""

from dataclasses import replace
from typing import Dict, List, Sequence

from ....config import (
    DEFAULT_SEGMENT_WORDS,
    LOW_CONFIDENCE_CREDIT,
    LOW_CONFIDENCE_INCORRECT,
    MIN_SEGMENT_SEC,
    PAUSE_GAP_SEC,
    SEGMENT_END_TOLERANCE_SEC,
)
from ...models import AlignmentStatus, AlignmentWordResult, ReferenceLine, WordToken
from ...scoring_utils import mean, round_half_away
from ...text_utils import ends_sentence
from .feedback_models import SegmentFeedback


def merge_short_segments(
    segments: Sequence[SegmentFeedback], min_duration: float = MIN_SEGMENT_SEC
) -> List[SegmentFeedback]:
    """Absorb segments shorter than ``min_duration`` into their predecessor.

    Merging only ever goes backward. The first segment is kept even when short.
    """
    merged: List[SegmentFeedback] = []
    for segment in segments:
        if merged and segment.duration < min_duration:
            prev = merged[-1]
            merged[-1] = replace(
                prev,
                text=f"{prev.text} {segment.text}".strip(),
                end=max(prev.end, segment.end),
            )
            continue
        merged.append(segment)
    return merged


def build_segments_from_lines(
    reference_lines: Sequence[ReferenceLine], reference_words: Sequence[WordToken]
) -> List[SegmentFeedback]:
    """One segment per lyric line, spanned by the line's own words when it has any."""
    segments: List[SegmentFeedback] = []
    for line in reference_lines:
        words = [w for w in reference_words if w.line_index == line.index]
        text = (line.text or "").strip() or " ".join(w.word for w in words)
        start = words[0].start if words else line.start
        end = words[-1].end if words else line.end
        segments.append(
            SegmentFeedback(segment_index=line.index, text=text, start=start, end=end)
        )
    return segments


def build_segments_from_words(
    reference_words: Sequence[WordToken],
    max_words: int = DEFAULT_SEGMENT_WORDS,
    pause_gap: float = PAUSE_GAP_SEC,
) -> List[SegmentFeedback]:
    """Greedily bucket consecutive words into segments.

    A bucket is flushed before a word that follows a pause longer than
    ``pause_gap``, and after a word that fills the bucket or ends a sentence.
    """
    if not reference_words:
        return []

    segments: List[SegmentFeedback] = []
    bucket: List[WordToken] = []

    def flush() -> None:
        if not bucket:
            return
        segments.append(
            SegmentFeedback(
                segment_index=len(segments),
                text=" ".join(w.word for w in bucket),
                start=bucket[0].start,
                end=bucket[-1].end,
            )
        )
        bucket.clear()

    bucket.append(reference_words[0])
    for word in reference_words[1:]:
        gap = word.start - bucket[-1].end
        if gap > pause_gap:
            flush()
            bucket.append(word)
            continue
        bucket.append(word)
        if len(bucket) >= max_words or ends_sentence(word.word):
            flush()
    flush()
    return segments


def weighted_correct(results: Sequence[AlignmentWordResult]) -> float:
    """Full credit for correct words, partial credit for low-confidence "incorrect" ones."""
    total = 0.0
    for word in results:
        if word.is_correct:
            total += 1.0
        elif (
            word.status == AlignmentStatus.INCORRECT
            and word.confidence is not None
            and word.confidence < LOW_CONFIDENCE_INCORRECT
        ):
            total += LOW_CONFIDENCE_CREDIT
    return total


def weighted_accuracy_pct(results: Sequence[AlignmentWordResult]) -> int:
    if not results:
        return 0
    return round_half_away(weighted_correct(results) / len(results) * 100)


def timing_mean_abs_ms(results: Sequence[AlignmentWordResult]) -> int:
    """Mean absolute delay over correct words; incorrect/missed timing is not meaningful."""
    deltas = [
        abs(w.delta_ms) for w in results if w.is_correct and w.delta_ms is not None
    ]
    if not deltas:
        return 0
    return round_half_away(mean(deltas))


def words_in_segment(
    segment: SegmentFeedback, reference_words: Sequence[WordToken]
) -> List[WordToken]:
    return [
        w
        for w in reference_words
        if w.start >= segment.start and w.end <= segment.end + SEGMENT_END_TOLERANCE_SEC
    ]


def collect_segment_results(
    segment: SegmentFeedback,
    reference_words: Sequence[WordToken],
    results_by_ref: Dict[int, AlignmentWordResult],
) -> List[AlignmentWordResult]:
    aligned: List[AlignmentWordResult] = []
    for word in words_in_segment(segment, reference_words):
        result = results_by_ref.get(word.index)
        if result is not None:
            aligned.append(result)
    return aligned
