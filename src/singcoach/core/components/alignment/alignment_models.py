"""Data models for word alignment."""

from dataclasses import dataclass, field
from typing import List, Optional

from ....config import EARLY_LATE_THRESHOLD_MS
from ...models import AlignmentWordResult, ConfidenceLabel, WordToken


@dataclass(frozen=True)
class AlignmentOptions:
    """Offsets and durations applied while aligning one attempt."""

    reference_offset_sec: float = 0.0
    user_offset_sec: float = 0.0  # usually the estimated recording lag
    early_late_threshold_ms: float = EARLY_LATE_THRESHOLD_MS
    reference_duration_sec: Optional[float] = None
    user_duration_sec: Optional[float] = None


@dataclass(frozen=True)
class AlignmentMetrics:
    """Aggregate metrics over all reference words."""

    word_accuracy_pct: int
    timing_mean_abs_ms: int  # correct-status words only
    pace_ratio: float  # user duration / reference duration
    missed_words: List[str] = field(default_factory=list)
    extra_words: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AlignmentResult:
    """Per-word results, unattached user tokens and aggregate metrics."""

    per_word: List[AlignmentWordResult]
    extras: List[WordToken]
    metrics: AlignmentMetrics
    confidence_label: ConfidenceLabel = ConfidenceLabel.LOW

    @property
    def matched_count(self) -> int:
        return sum(1 for w in self.per_word if w.user_word is not None)
