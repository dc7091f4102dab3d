"""Interface to the recording offset estimator.

Estimating the lag between the reference track and a recording is done by an
external routine (cross-correlation or onset matching). This module only fixes
the shape of its result and how callers plug one in.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from ..utils.logging import get_logger

logger = get_logger(__name__)


class OffsetMethod(str, Enum):
    XCORR = "xcorr"
    ONSET = "onset"
    NONE = "none"


@dataclass(frozen=True)
class OffsetEstimate:
    """Signed lag of the recording start relative to the reference start.

    A positive ``offset_ms`` means the singer came in late. ``method`` is
    informational only.
    """

    offset_ms: float = 0.0
    method: OffsetMethod = OffsetMethod.NONE
    correlation: Optional[float] = None


# (reference_envelope, recording_envelope, step_sec) -> OffsetEstimate
OffsetEstimator = Callable[[Sequence[float], Sequence[float], float], OffsetEstimate]


def no_offset() -> OffsetEstimate:
    return OffsetEstimate()


def estimate_offset(
    estimator: Optional[OffsetEstimator],
    reference_envelope: Sequence[float],
    recording_envelope: Sequence[float],
    step_sec: float,
) -> OffsetEstimate:
    """Run a pluggable estimator, treating a missing estimator or empty signal as no offset."""
    if estimator is None or not reference_envelope or not recording_envelope:
        return no_offset()
    estimate = estimator(reference_envelope, recording_envelope, step_sec)
    logger.debug(
        "Estimated offset %.1fms via %s", estimate.offset_ms, estimate.method.value
    )
    return estimate
