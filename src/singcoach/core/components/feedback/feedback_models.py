"""Data models for segment-level feedback and coaching."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ...models import AlignmentWordResult, ConfidenceLabel


@dataclass(frozen=True)
class SegmentFeedback:
    """Scored span of the reference timeline (a lyric line or a pause-bounded chunk)."""

    segment_index: int
    text: str
    start: float
    end: float
    word_accuracy_pct: int = 0
    timing_mean_abs_ms: int = 0
    main_issues: List[str] = field(default_factory=list)

    @property
    def duration(self) -> float:
        return self.end - self.start


class DrillType(str, Enum):
    REPEAT_SEGMENT = "repeat_segment"
    SLOW_DOWN = "slow_down"
    TIMING_LOCK = "timing_lock"
    ACCURACY_CLEAN = "accuracy_clean"


@dataclass(frozen=True)
class NextDrill:
    """The single practice drill recommended for the next attempt.

    Only ``repeat_segment`` drills carry a target segment and repeat count;
    use the constructors below rather than building variants by hand.
    """

    type: DrillType
    note: str
    target_segment_index: Optional[int] = None
    repeat_count: Optional[int] = None

    @classmethod
    def repeat_segment(cls, target_segment_index: int, repeat_count: int) -> "NextDrill":
        return cls(
            type=DrillType.REPEAT_SEGMENT,
            note=(
                f"Repeat the weakest line ({target_segment_index + 1}) "
                f"{_spell_count(repeat_count)} times for clarity."
            ),
            target_segment_index=target_segment_index,
            repeat_count=repeat_count,
        )

    @classmethod
    def timing_lock(cls) -> "NextDrill":
        return cls(
            type=DrillType.TIMING_LOCK,
            note="Clap the beat, then sing the line to lock timing.",
        )

    @classmethod
    def slow_down(cls) -> "NextDrill":
        return cls(
            type=DrillType.SLOW_DOWN,
            note="Slow the verse slightly and land the word starts on the beat.",
        )

    @classmethod
    def accuracy_clean(cls) -> "NextDrill":
        return cls(
            type=DrillType.ACCURACY_CLEAN,
            note="Repeat the verse focusing on clean word delivery.",
        )


_COUNT_WORDS = {1: "one", 2: "two", 3: "three", 4: "four", 5: "five"}


def _spell_count(count: int) -> str:
    return _COUNT_WORDS.get(count, str(count))


@dataclass(frozen=True)
class Substitution:
    """A reference word the singer replaced with a different word."""

    ref_word: str
    user_word: str
    confidence: Optional[float] = None
    confidence_label: Optional[ConfidenceLabel] = None


@dataclass(frozen=True)
class FeedbackSubscores:
    word_accuracy: int
    timing: int
    pace: int


@dataclass(frozen=True)
class DetailedFeedback:
    """Word, segment and drill report for one attempt."""

    word_accuracy_pct: int
    timing_mean_abs_ms: int
    pace_ratio: float
    per_word: List[AlignmentWordResult]
    segments: List[SegmentFeedback]
    coach_tips: List[str]
    next_drill: NextDrill
    subscores: FeedbackSubscores
    missed_words: List[str] = field(default_factory=list)
    extra_words: List[str] = field(default_factory=list)
    substitutions: List[Substitution] = field(default_factory=list)
    confidence_label: ConfidenceLabel = ConfidenceLabel.LOW
    estimated_offset_ms: Optional[float] = None
    message: Optional[str] = None  # set when the take stopped early
    warnings: List[str] = field(default_factory=list)
