"""Practice-mode weight profiles and the overall score blend."""

from typing import Dict, Optional, Union

from ...models import PracticeMode
from ...scoring_utils import round_half_away
from .performance_models import PerformanceScores, PerformanceWeights

DEFAULT_WEIGHTS = PerformanceWeights(pitch=0.4, timing=0.25, stability=0.2, words=0.15)

PRACTICE_WEIGHTS: Dict[PracticeMode, PerformanceWeights] = {
    PracticeMode.FULL: DEFAULT_WEIGHTS,
    PracticeMode.WORDS: PerformanceWeights(pitch=0.1, timing=0.15, stability=0.05, words=0.7),
    PracticeMode.TIMING: PerformanceWeights(pitch=0.1, timing=0.7, stability=0.05, words=0.15),
    PracticeMode.PITCH: PerformanceWeights(pitch=0.7, timing=0.1, stability=0.2, words=0.0),
}


def resolve_weights(mode: Optional[Union[PracticeMode, str]] = None) -> PerformanceWeights:
    """Weight profile for a practice mode; unknown or missing modes use the configured default."""
    return PRACTICE_WEIGHTS[PracticeMode.from_value(mode)]


def compute_overall_score(scores: PerformanceScores, weights: PerformanceWeights) -> int:
    normalized = weights.normalized()
    word_score = scores.words if scores.words is not None else 0.0
    overall = (
        scores.pitch * normalized.pitch
        + scores.timing * normalized.timing
        + scores.stability * normalized.stability
        + word_score * normalized.words
    )
    return round_half_away(overall)
