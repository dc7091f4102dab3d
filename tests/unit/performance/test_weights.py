import pytest

from singcoach.core.components.performance import (
    PRACTICE_WEIGHTS,
    PerformanceScores,
    compute_overall_score,
    resolve_weights,
)
from singcoach.core.models import PracticeMode


def test_words_mode_is_dominated_by_words():
    scores = PerformanceScores(pitch=100, timing=0, stability=0, words=100)
    assert compute_overall_score(scores, resolve_weights("words")) > 70


def test_pitch_mode_is_dominated_by_pitch_and_stability():
    scores = PerformanceScores(pitch=100, timing=0, stability=100, words=0)
    assert compute_overall_score(scores, resolve_weights(PracticeMode.PITCH)) > 60


def test_missing_words_contributes_zero():
    scores = PerformanceScores(pitch=100, timing=100, stability=100, words=None)
    assert compute_overall_score(scores, resolve_weights("full")) == 85


def test_unknown_mode_falls_back_to_full():
    assert resolve_weights("karaoke") == PRACTICE_WEIGHTS[PracticeMode.FULL]
    assert resolve_weights(None) == PRACTICE_WEIGHTS[PracticeMode.FULL]


@pytest.mark.parametrize("mode", list(PracticeMode))
def test_every_mode_has_normalized_weights(mode):
    weights = resolve_weights(mode).normalized()
    total = weights.pitch + weights.timing + weights.stability + weights.words
    assert total == pytest.approx(1.0)


def test_unnormalized_weights_are_rescaled():
    scores = PerformanceScores(pitch=80, timing=80, stability=80, words=80)
    doubled = resolve_weights("full").__class__(pitch=2, timing=2, stability=2, words=2)
    assert compute_overall_score(scores, doubled) == 80
