"""Numeric helpers shared by the scoring components.

All rounding in the scoring pipeline goes through ``round_half_away`` so that
results do not depend on Python's banker's rounding.
"""

import math
from typing import Iterable


def round_half_away(value: float) -> int:
    """Round to the nearest integer, with halves rounded away from zero."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_score(value: float) -> int:
    """Round and clamp a score onto the 0-100 scale."""
    return int(clamp(round_half_away(value), 0, 100))


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, or 0.0 for an empty iterable."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)
