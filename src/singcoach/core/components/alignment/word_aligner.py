"""Edit-distance alignment of reference words against a user transcription."""

from typing import List, Optional, Sequence

from ....config import (
    HIGH_CONFIDENCE,
    MEDIUM_CONFIDENCE,
    PHONETIC_MATCH_COST,
    PHONETIC_MATCH_THRESHOLD,
)
from ....utils.logging import get_logger
from ...models import (
    AlignmentStatus,
    AlignmentWordResult,
    ConfidenceLabel,
    WordToken,
)
from ...phonetic_utils import token_similarity
from ...scoring_utils import mean, round_half_away
from ...text_utils import normalize_token
from .alignment_models import AlignmentMetrics, AlignmentOptions, AlignmentResult

logger = get_logger(__name__)

_MATCH = "match"
_DELETE = "delete"
_INSERT = "insert"


def confidence_label(value: Optional[float]) -> ConfidenceLabel:
    """Bucket a confidence value; a missing value counts as Low."""
    if value is None:
        return ConfidenceLabel.LOW
    if value >= HIGH_CONFIDENCE:
        return ConfidenceLabel.HIGH
    if value >= MEDIUM_CONFIDENCE:
        return ConfidenceLabel.MEDIUM
    return ConfidenceLabel.LOW


def _substitution_cost(ref_norm: str, user_norm: str) -> float:
    if ref_norm == user_norm:
        return 0.0
    if token_similarity(ref_norm, user_norm) >= PHONETIC_MATCH_THRESHOLD:
        return PHONETIC_MATCH_COST
    return 1.0


def _align_ops(ref_norms: Sequence[str], user_norms: Sequence[str]) -> List[str]:
    """Weighted edit-distance path from (0, 0) to (n, m).

    Ties prefer match, then delete, then insert, so near-miss words stay on
    their reference slot instead of splitting into a miss plus an extra.
    """
    n, m = len(ref_norms), len(user_norms)
    dp = [[0.0] * (m + 1) for _ in range(n + 1)]
    back = [[_MATCH] * (m + 1) for _ in range(n + 1)]

    for i in range(1, n + 1):
        dp[i][0] = float(i)
        back[i][0] = _DELETE
    for j in range(1, m + 1):
        dp[0][j] = float(j)
        back[0][j] = _INSERT

    for i in range(1, n + 1):
        ref_norm = ref_norms[i - 1]
        for j in range(1, m + 1):
            match_cost = dp[i - 1][j - 1] + _substitution_cost(ref_norm, user_norms[j - 1])
            delete_cost = dp[i - 1][j] + 1
            insert_cost = dp[i][j - 1] + 1

            best_cost, op = match_cost, _MATCH
            if delete_cost < best_cost:
                best_cost, op = delete_cost, _DELETE
            if insert_cost < best_cost:
                best_cost, op = insert_cost, _INSERT
            dp[i][j] = best_cost
            back[i][j] = op

    ops: List[str] = []
    i, j = n, m
    while i > 0 or j > 0:
        op = back[i][j]
        ops.append(op)
        if op == _MATCH:
            i -= 1
            j -= 1
        elif op == _DELETE:
            i -= 1
        else:
            j -= 1
    ops.reverse()
    return ops


def _classify_timing(delta_ms: int, threshold_ms: float) -> AlignmentStatus:
    if delta_ms < -threshold_ms:
        return AlignmentStatus.CORRECT_EARLY
    if delta_ms > threshold_ms:
        return AlignmentStatus.CORRECT_LATE
    return AlignmentStatus.CORRECT


def _pace_ratio(options: AlignmentOptions) -> float:
    ref_duration = options.reference_duration_sec
    user_duration = options.user_duration_sec
    if ref_duration is None or user_duration is None:
        return 1.0
    if ref_duration <= 0 or user_duration <= 0:
        return 1.0
    return user_duration / ref_duration


def align_words(
    reference: Sequence[WordToken],
    user: Sequence[WordToken],
    options: Optional[AlignmentOptions] = None,
) -> AlignmentResult:
    """Align a reference word sequence to a user word sequence.

    Produces exactly one ``AlignmentWordResult`` per reference token. User
    tokens that do not attach to a reference slot are returned as ``extras``
    and never scored. Empty inputs are valid: an empty reference yields only
    extras, an empty user sequence yields all reference words ``missed``.
    """
    options = options or AlignmentOptions()
    ref_norms = [normalize_token(t.word) for t in reference]
    user_norms = [normalize_token(t.word) for t in user]
    ops = _align_ops(ref_norms, user_norms)

    ref_offset = options.reference_offset_sec
    user_offset = options.user_offset_sec

    per_word: List[AlignmentWordResult] = []
    extras: List[WordToken] = []
    missed_words: List[str] = []
    extra_words: List[str] = []
    matched_deltas: List[int] = []

    ref_pos = 0
    user_pos = 0
    for op in ops:
        if op == _MATCH:
            ref_token = reference[ref_pos]
            user_token = user[user_pos]
            ref_norm = ref_norms[ref_pos]
            user_norm = user_norms[user_pos]
            is_correct = bool(ref_norm) and ref_norm == user_norm
            confidence = 1.0 if is_correct else token_similarity(ref_norm, user_norm)

            ref_start = ref_token.start - ref_offset
            user_start = user_token.start - user_offset
            delta_ms = round_half_away((user_start - ref_start) * 1000)

            if is_correct:
                status = _classify_timing(delta_ms, options.early_late_threshold_ms)
                matched_deltas.append(abs(delta_ms))
            else:
                status = AlignmentStatus.INCORRECT
                missed_words.append(ref_token.word)

            per_word.append(
                AlignmentWordResult(
                    ref_index=ref_token.index,
                    ref_word=ref_token.word,
                    ref_start=ref_start,
                    ref_end=ref_token.end - ref_offset,
                    status=status,
                    user_word=user_token.word,
                    user_start=user_start,
                    user_end=user_token.end - user_offset,
                    delta_ms=delta_ms,
                    confidence=confidence,
                    confidence_label=confidence_label(confidence),
                )
            )
            ref_pos += 1
            user_pos += 1
        elif op == _DELETE:
            ref_token = reference[ref_pos]
            per_word.append(
                AlignmentWordResult(
                    ref_index=ref_token.index,
                    ref_word=ref_token.word,
                    ref_start=ref_token.start - ref_offset,
                    ref_end=ref_token.end - ref_offset,
                    status=AlignmentStatus.MISSED,
                    confidence=0.0,
                    confidence_label=ConfidenceLabel.LOW,
                )
            )
            missed_words.append(ref_token.word)
            ref_pos += 1
        else:
            extra = user[user_pos]
            extras.append(extra)
            extra_words.append(extra.word)
            user_pos += 1

    correct_count = sum(1 for w in per_word if w.is_correct)
    word_accuracy_pct = (
        round_half_away(correct_count / len(per_word) * 100) if per_word else 0
    )
    timing_mean_abs_ms = round_half_away(mean(matched_deltas)) if matched_deltas else 0
    average_confidence = mean(
        w.confidence for w in per_word if w.confidence is not None
    )

    logger.debug(
        "Aligned %d reference / %d user words: %d correct, %d extras",
        len(reference),
        len(user),
        correct_count,
        len(extras),
    )

    return AlignmentResult(
        per_word=per_word,
        extras=extras,
        metrics=AlignmentMetrics(
            word_accuracy_pct=word_accuracy_pct,
            timing_mean_abs_ms=timing_mean_abs_ms,
            pace_ratio=_pace_ratio(options),
            missed_words=missed_words,
            extra_words=extra_words,
        ),
        confidence_label=confidence_label(average_confidence),
    )
