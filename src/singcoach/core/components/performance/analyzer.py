"""Pitch, timing and stability scoring of a recording against its reference."""

from typing import List, Optional

from ....config import (
    DEFAULT_ENVELOPE_STEP_SEC,
    LOW_SIGNAL_ENERGY,
    MIN_VOICED_RATIO,
    NEUTRAL_PITCH_SCORE,
    NEUTRAL_TIMING_SCORE,
    SHORT_RECORDING_SEC,
    TIP_SCORE_THRESHOLD,
)
from ....utils.logging import get_logger
from ...models import PracticeMode
from ...scoring_utils import clamp, clamp_score, round_half_away
from .performance_models import (
    PITCH_ACCURACY_LABEL,
    TONE_MATCH_LABEL,
    PerformanceAlignment,
    PerformanceAnalysisInput,
    PerformanceAnalysisResult,
    PerformanceScores,
)
from .signal import (
    average_absolute_cents_diff,
    average_energy,
    energy_correlation,
    pitch_stability_score,
    sanitize_contour,
    shift_envelope,
    voiced_ratio,
)
from .weights import compute_overall_score, resolve_weights

logger = get_logger(__name__)

LOW_SIGNAL_TIP = (
    "Low input level detected. Try moving closer to the mic or increasing input gain."
)


def _known_positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def envelope_step_sec(data: PerformanceAnalysisInput) -> float:
    """Seconds per envelope bin, from whichever envelope/duration pair is known."""
    if data.reference_envelope and _known_positive(data.reference_duration_sec):
        return data.reference_duration_sec / len(data.reference_envelope)
    if data.recording_envelope and _known_positive(data.recording_duration_sec):
        return data.recording_duration_sec / len(data.recording_envelope)
    return DEFAULT_ENVELOPE_STEP_SEC


def offset_bins(estimated_offset_ms: Optional[float], step_sec: float) -> int:
    if estimated_offset_ms is None or step_sec <= 0:
        return 0
    return round_half_away(estimated_offset_ms / (step_sec * 1000))


def duration_score(
    reference_duration_sec: Optional[float], recording_duration_sec: Optional[float]
) -> int:
    """Score how closely the take length matches the reference length."""
    if not (
        _known_positive(reference_duration_sec) and _known_positive(recording_duration_sec)
    ):
        return NEUTRAL_TIMING_SCORE
    ratio_off = abs(recording_duration_sec - reference_duration_sec) / max(
        0.1, reference_duration_sec
    )
    return clamp_score(100 - min(100.0, ratio_off * 120))


def build_performance_tips(
    pitch: int,
    timing: int,
    stability: int,
    label: str,
    too_short: bool,
    low_signal: bool,
) -> List[str]:
    if low_signal:
        return [LOW_SIGNAL_TIP]

    tips: List[str] = []
    if too_short:
        tips.append("Recording is very short. Try a longer take for better scoring.")
    if pitch < TIP_SCORE_THRESHOLD:
        if label == TONE_MATCH_LABEL:
            tips.append(
                "Tone match is off. Focus on resonance and dynamics to match the reference."
            )
        else:
            tips.append(
                "Pitch accuracy needs tightening. Match the reference tone early in each line."
            )
    if timing < TIP_SCORE_THRESHOLD:
        tips.append("Timing is loose. Enter phrases right on the reference cue.")
    if stability < TIP_SCORE_THRESHOLD:
        tips.append("Stability could improve. Hold sustained notes steady.")
    if not tips:
        tips.append("Great take. Try a fresh pass for even tighter timing.")
    return tips


def analyze_performance(data: PerformanceAnalysisInput) -> PerformanceAnalysisResult:
    """Score a recording's pitch, timing and stability and blend an overall score.

    Missing signals fall back to neutral scores. A near-silent recording is
    treated as unscorable: pitch and timing are forced to 0 and the only tip
    is a low input level warning.
    """
    reference_contour = sanitize_contour(data.reference_contour)
    recording_contour = sanitize_contour(data.recording_contour)
    reference_envelope = list(data.reference_envelope)

    step_sec = envelope_step_sec(data)
    shift = offset_bins(data.estimated_offset_ms, step_sec)
    # A positive offset means the recording lags, so move it earlier.
    recording_envelope = shift_envelope(data.recording_envelope, -shift)

    avg_energy = average_energy(recording_envelope)
    low_signal = 0 < avg_energy < LOW_SIGNAL_ENERGY
    too_short = (
        data.recording_duration_sec is not None
        and data.recording_duration_sec < SHORT_RECORDING_SEC
    )

    raw_correlation = energy_correlation(reference_envelope, recording_envelope)
    correlation = clamp(raw_correlation, 0.0, 1.0)

    label = PITCH_ACCURACY_LABEL
    pitch = NEUTRAL_PITCH_SCORE
    if reference_contour and recording_contour:
        if voiced_ratio(reference_contour) < MIN_VOICED_RATIO:
            label = TONE_MATCH_LABEL
            pitch = clamp_score(correlation * 100)
        else:
            avg_cents = average_absolute_cents_diff(reference_contour, recording_contour)
            if avg_cents is not None:
                pitch = clamp_score(100 - min(100.0, avg_cents * 2))

    fallback_timing = duration_score(
        data.reference_duration_sec, data.recording_duration_sec
    )
    if raw_correlation > 0:
        timing = clamp_score(min(100.0, correlation * 85 + fallback_timing * 0.15))
    else:
        timing = fallback_timing

    if recording_contour and not low_signal:
        stability = pitch_stability_score(recording_contour)
    else:
        stability = int(clamp(round_half_away(55 + correlation * 20), 40, 90))

    if low_signal:
        logger.debug("Average recording energy %.5f is below the scoring floor", avg_energy)
        pitch = 0
        timing = 0

    mode = PracticeMode.from_value(data.practice_mode)
    overall = compute_overall_score(
        PerformanceScores(
            pitch=pitch, timing=timing, stability=stability, words=data.word_score
        ),
        resolve_weights(mode),
    )

    logger.debug(
        "Performance (%s): overall=%d pitch=%d timing=%d stability=%d corr=%.3f shift=%d",
        mode.value,
        overall,
        pitch,
        timing,
        stability,
        raw_correlation,
        shift,
    )

    return PerformanceAnalysisResult(
        overall=overall,
        pitch=pitch,
        timing=timing,
        stability=stability,
        words=data.word_score,
        label=label,
        tips=build_performance_tips(
            pitch, timing, stability, label, too_short, low_signal
        ),
        alignment=PerformanceAlignment(timing_correlation=correlation),
    )
