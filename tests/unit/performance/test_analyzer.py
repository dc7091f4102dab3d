import pytest

from singcoach import config
from singcoach.core.components.performance import (
    PITCH_ACCURACY_LABEL,
    TONE_MATCH_LABEL,
    PerformanceAnalysisInput,
    PitchSample,
    analyze_performance,
)
from singcoach.core.components.performance.analyzer import (
    LOW_SIGNAL_TIP,
    duration_score,
    envelope_step_sec,
    offset_bins,
)
from singcoach.core.models import PracticeMode

LINEAR = [0.1 + 0.01 * i for i in range(20)]


def _signals(**overrides):
    values = dict(
        reference_duration_sec=10.0,
        recording_duration_sec=10.0,
        reference_envelope=list(LINEAR),
        recording_envelope=list(LINEAR),
    )
    values.update(overrides)
    return PerformanceAnalysisInput(**values)


def test_matching_take_scores_high(voiced_contour):
    result = analyze_performance(
        _signals(reference_contour=voiced_contour, recording_contour=voiced_contour)
    )

    assert result.label == PITCH_ACCURACY_LABEL
    assert result.pitch == 100
    assert result.timing == 100
    assert result.stability == 100
    assert result.overall == 85
    assert result.words is None
    assert result.alignment.timing_correlation == pytest.approx(1.0)
    assert result.tips == ["Great take. Try a fresh pass for even tighter timing."]


def test_pitch_scored_from_cents(voiced_contour, contour_factory):
    sharp = contour_factory(220.0 * 2 ** (10 / 1200))
    result = analyze_performance(
        _signals(reference_contour=voiced_contour, recording_contour=sharp)
    )
    assert result.pitch == 80


def test_semitone_off_gets_pitch_tip(voiced_contour, contour_factory):
    result = analyze_performance(
        _signals(
            reference_contour=voiced_contour,
            recording_contour=contour_factory(220.0 * 2 ** (1 / 12)),
        )
    )
    assert result.pitch == 0
    assert any(tip.startswith("Pitch accuracy needs tightening") for tip in result.tips)


def test_out_of_band_frames_are_unvoiced(voiced_contour, contour_factory):
    result = analyze_performance(
        _signals(reference_contour=voiced_contour, recording_contour=contour_factory(2000.0))
    )
    # No voiced pair survives sanitization, so pitch is neutral
    assert result.pitch == 55


def test_mostly_unvoiced_reference_uses_tone_match(voiced_contour):
    reference = [
        PitchSample(time=i * 0.05, frequency=220.0 if i < 2 else 0.0) for i in range(20)
    ]
    result = analyze_performance(
        _signals(reference_contour=reference, recording_contour=voiced_contour)
    )
    assert result.label == TONE_MATCH_LABEL
    assert result.pitch == 100


def test_missing_contours_are_neutral():
    result = analyze_performance(_signals())
    assert result.label == PITCH_ACCURACY_LABEL
    assert result.pitch == 55
    assert result.stability == 75


def test_no_signals_at_all():
    result = analyze_performance(PerformanceAnalysisInput())
    assert (result.pitch, result.timing, result.stability) == (55, 60, 55)
    assert result.overall == 48
    assert result.alignment.timing_correlation == 0.0


def test_negative_correlation_falls_back_to_duration_score():
    result = analyze_performance(
        _signals(
            recording_duration_sec=12.0,
            recording_envelope=list(reversed(LINEAR)),
        )
    )
    assert result.timing == 76
    assert result.alignment.timing_correlation == 0.0


def test_flat_reference_envelope_uses_duration_score():
    result = analyze_performance(
        _signals(
            reference_envelope=[0.1] * 3,
            recording_envelope=[0.03, 0.84, 0.43],
        )
    )
    assert result.alignment.timing_correlation == 0.0
    assert result.timing == 100


def test_low_signal_forces_pitch_and_timing_to_zero(voiced_contour):
    result = analyze_performance(
        _signals(
            reference_contour=voiced_contour,
            recording_contour=voiced_contour,
            recording_envelope=[0.001] * 20,
        )
    )
    assert result.pitch == 0
    assert result.timing == 0
    assert result.tips == [LOW_SIGNAL_TIP]


def test_offset_realigns_envelopes():
    reference = [0.0] * 20
    reference[5] = 1.0
    recording = [0.0] * 20
    recording[7] = 1.0
    base = dict(
        reference_duration_sec=1.0,
        recording_duration_sec=1.0,
        reference_envelope=reference,
        recording_envelope=recording,
    )

    unaligned = analyze_performance(PerformanceAnalysisInput(**base))
    aligned = analyze_performance(PerformanceAnalysisInput(estimated_offset_ms=100, **base))

    assert unaligned.alignment.timing_correlation == 0.0
    assert aligned.alignment.timing_correlation == pytest.approx(1.0)


def test_short_recording_tip():
    result = analyze_performance(_signals(recording_duration_sec=2.0))
    assert result.tips[0] == "Recording is very short. Try a longer take for better scoring."


def test_word_score_is_blended_and_reported(voiced_contour):
    signals = _signals(
        reference_contour=voiced_contour,
        recording_contour=voiced_contour,
        practice_mode=PracticeMode.WORDS,
        word_score=0.0,
    )
    result = analyze_performance(signals)
    assert result.words == 0.0
    assert result.overall == 30


def test_configured_default_mode_weights_overall(monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_PRACTICE_MODE", "words")
    result = analyze_performance(PerformanceAnalysisInput(word_score=100))
    assert result.overall == 87


def test_helpers():
    assert envelope_step_sec(PerformanceAnalysisInput()) == 0.05
    assert envelope_step_sec(_signals()) == 0.5
    assert offset_bins(None, 0.05) == 0
    assert offset_bins(125, 0.05) == 3
    assert offset_bins(-125, 0.05) == -3
    assert duration_score(None, 10.0) == 60
    assert duration_score(10.0, 10.0) == 100
    assert duration_score(1.0, 5.0) == 0
