"""Data models shared by the alignment, feedback and performance components."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .. import config


class AlignmentStatus(str, Enum):
    """Outcome of aligning one reference word."""

    CORRECT = "correct"
    CORRECT_EARLY = "correct_early"
    CORRECT_LATE = "correct_late"
    INCORRECT = "incorrect"
    MISSED = "missed"
    EXTRA_IGNORED = "extra_ignored"

    @property
    def is_correct(self) -> bool:
        return self in (
            AlignmentStatus.CORRECT,
            AlignmentStatus.CORRECT_EARLY,
            AlignmentStatus.CORRECT_LATE,
        )


class ConfidenceLabel(str, Enum):
    """Bucketed confidence for a word or a whole report."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class PracticeMode(str, Enum):
    """Weighting profile used to blend performance sub-scores."""

    FULL = "full"
    WORDS = "words"
    TIMING = "timing"
    PITCH = "pitch"

    @classmethod
    def default(cls) -> "PracticeMode":
        return cls(config.DEFAULT_PRACTICE_MODE)

    @classmethod
    def from_value(cls, value) -> "PracticeMode":
        """Map a raw mode to a PracticeMode; missing or unknown values use the default."""
        if isinstance(value, PracticeMode):
            return value
        if value is None or value == "":
            return cls.default()
        mode = value.strip().lower() if isinstance(value, str) else value
        if mode in config.PRACTICE_MODES:
            return cls(mode)

        from ..utils.logging import get_logger

        get_logger(__name__).warning(
            "Unknown practice mode %r, falling back to %r",
            value,
            config.DEFAULT_PRACTICE_MODE,
        )
        return cls.default()


@dataclass(frozen=True)
class WordToken:
    """A single timed word from a reference transcript or a user transcription.

    ``start``/``end`` are seconds relative to the start of that audio's own
    timeline. ``index`` is the position within its own sequence and is used as
    the identity key when joining alignment results back to segments.
    """

    word: str
    start: float
    end: float
    index: int
    line_index: Optional[int] = None

    @property
    def duration(self) -> float:
        return max(self.end - self.start, 0.0)


@dataclass(frozen=True)
class ReferenceLine:
    """A lyric line of the reference transcript with its declared span."""

    index: int
    text: str
    start: float
    end: float


@dataclass(frozen=True)
class AlignmentWordResult:
    """Alignment outcome for exactly one reference word."""

    ref_index: int
    ref_word: str
    ref_start: float
    ref_end: float
    status: AlignmentStatus
    user_word: Optional[str] = None
    user_start: Optional[float] = None
    user_end: Optional[float] = None
    delta_ms: Optional[int] = None
    confidence: Optional[float] = None
    confidence_label: Optional[ConfidenceLabel] = None

    @property
    def is_correct(self) -> bool:
        return self.status.is_correct
