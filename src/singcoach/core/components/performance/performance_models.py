"""Data models for pitch/timing/stability performance analysis."""

from dataclasses import dataclass, field
from typing import List, Optional

from ...models import PracticeMode

PITCH_ACCURACY_LABEL = "Pitch Accuracy"
TONE_MATCH_LABEL = "Tone Match"


@dataclass(frozen=True)
class PitchSample:
    """One pitch-tracker frame; a frequency of 0 marks an unvoiced frame."""

    time: float
    frequency: float


@dataclass(frozen=True)
class PerformanceWeights:
    """Relative weight of each sub-score in the overall blend."""

    pitch: float
    timing: float
    stability: float
    words: float

    def normalized(self) -> "PerformanceWeights":
        total = self.pitch + self.timing + self.stability + self.words
        if not total:
            total = 1.0
        return PerformanceWeights(
            pitch=self.pitch / total,
            timing=self.timing / total,
            stability=self.stability / total,
            words=self.words / total,
        )


@dataclass(frozen=True)
class PerformanceScores:
    pitch: float
    timing: float
    stability: float
    words: Optional[float] = None  # missing contributes 0, it is never skipped


@dataclass(frozen=True)
class PerformanceAnalysisInput:
    """Signals extracted upstream from the reference track and the recording."""

    reference_duration_sec: Optional[float] = None
    recording_duration_sec: Optional[float] = None
    reference_contour: List[PitchSample] = field(default_factory=list)
    recording_contour: List[PitchSample] = field(default_factory=list)
    reference_envelope: List[float] = field(default_factory=list)
    recording_envelope: List[float] = field(default_factory=list)
    estimated_offset_ms: Optional[float] = None
    practice_mode: PracticeMode = field(default_factory=PracticeMode.default)
    word_score: Optional[float] = None


@dataclass(frozen=True)
class PerformanceAlignment:
    timing_correlation: float  # clamped to [0, 1]


@dataclass(frozen=True)
class PerformanceAnalysisResult:
    """Headline multi-metric score for one attempt; scores are on a 0-100 scale."""

    overall: int
    pitch: int
    timing: int
    stability: int
    label: str
    tips: List[str]
    alignment: PerformanceAlignment
    words: Optional[float] = None
