"""Pitch contour and energy envelope helpers for performance scoring."""

from typing import List, Optional, Sequence

import numpy as np

from ....config import (
    MAX_PITCH_HZ,
    MIN_PITCH_HZ,
    MIN_STABILITY_SAMPLES,
    NEUTRAL_STABILITY_SCORE,
)
from ...scoring_utils import clamp_score
from .performance_models import PitchSample


def sanitize_contour(samples: Sequence[PitchSample]) -> List[PitchSample]:
    """Zero out frames outside the vocal band so octave errors read as unvoiced."""
    return [
        s
        if MIN_PITCH_HZ <= s.frequency <= MAX_PITCH_HZ
        else PitchSample(time=s.time, frequency=0.0)
        for s in samples
    ]


def _frequencies(samples: Sequence[PitchSample]) -> np.ndarray:
    return np.array([s.frequency for s in samples], dtype=float)


def voiced_ratio(samples: Sequence[PitchSample]) -> float:
    if not samples:
        return 0.0
    return float(np.count_nonzero(_frequencies(samples) > 0)) / len(samples)


def cents_off(reference: float, actual: float) -> float:
    if reference <= 0 or actual <= 0:
        return 0.0
    return float(1200 * np.log2(actual / reference))


def average_absolute_cents_diff(
    reference: Sequence[PitchSample], actual: Sequence[PitchSample]
) -> Optional[float]:
    """Mean |cents| over index-aligned frames where both contours are voiced.

    Returns None when no such frame exists.
    """
    length = min(len(reference), len(actual))
    if length == 0:
        return None
    ref = _frequencies(reference[:length])
    act = _frequencies(actual[:length])
    voiced = (ref > 0) & (act > 0)
    if not np.any(voiced):
        return None
    cents = 1200 * np.log2(act[voiced] / ref[voiced])
    return float(np.mean(np.abs(cents)))


def pitch_stability_score(samples: Sequence[PitchSample]) -> int:
    """Penalize spread of voiced pitch, expressed in cents around the mean.

    Fewer than ``MIN_STABILITY_SAMPLES`` voiced frames is not enough signal and
    scores neutral.
    """
    freqs = _frequencies(samples)
    voiced = freqs[freqs > 0]
    if voiced.size < MIN_STABILITY_SAMPLES:
        return NEUTRAL_STABILITY_SCORE
    mean = float(np.mean(voiced))
    std = float(np.std(voiced))
    cents_std = 1200 * np.log2((mean + std) / mean) if mean > 0 else 0.0
    return clamp_score(100 - cents_std * 4)


def energy_correlation(a: Sequence[float], b: Sequence[float]) -> float:
    """Pearson correlation over the common prefix; 0 if either side is empty or flat.

    The raw value may be negative.
    """
    length = min(len(a), len(b))
    if length == 0:
        return 0.0
    x = np.asarray(a[:length], dtype=float)
    y = np.asarray(b[:length], dtype=float)
    # Mean subtraction leaves rounding noise on constant inputs
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        return 0.0
    dx = x - x.mean()
    dy = y - y.mean()
    denom_x = float(np.dot(dx, dx))
    denom_y = float(np.dot(dy, dy))
    if denom_x == 0 or denom_y == 0:
        return 0.0
    return float(np.dot(dx, dy) / np.sqrt(denom_x * denom_y))


def average_energy(envelope: Sequence[float]) -> float:
    if len(envelope) == 0:
        return 0.0
    return float(np.mean(np.asarray(envelope, dtype=float)))


def shift_envelope(envelope: Sequence[float], offset_bins: int) -> List[float]:
    """Move every bin ``offset_bins`` later; bins shifted out of range are dropped."""
    values = list(envelope)
    if offset_bins == 0:
        return values
    result = [0.0] * len(values)
    for i, value in enumerate(values):
        j = i + offset_bins
        if 0 <= j < len(values):
            result[j] = value
    return result
