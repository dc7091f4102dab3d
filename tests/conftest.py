"""Test configuration and fixtures.

Provides reusable fixtures for:
- Timed reference and user word sequences
- Lyric lines for line-based segmentation
- Pitch contours and energy envelopes
- Attempt JSON files for CLI and serialization tests
"""

import json
import logging
from typing import Callable, List, Optional, Sequence

import pytest

from singcoach.core.models import ReferenceLine, WordToken
from singcoach.core.components.performance import PitchSample

VERSE = "the quick brown fox jumps over the lazy dog."


def make_words(
    text: str,
    start: float = 0.0,
    step: float = 0.5,
    length: float = 0.4,
    line_indices: Optional[Sequence[int]] = None,
) -> List[WordToken]:
    """Evenly spaced words: word i spans [start + i*step, start + i*step + length]."""
    tokens = []
    for i, word in enumerate(text.split()):
        tokens.append(
            WordToken(
                word=word,
                start=start + i * step,
                end=start + i * step + length,
                index=i,
                line_index=line_indices[i] if line_indices is not None else None,
            )
        )
    return tokens


def shift_words(words: Sequence[WordToken], seconds: float) -> List[WordToken]:
    return [
        WordToken(
            word=w.word,
            start=w.start + seconds,
            end=w.end + seconds,
            index=w.index,
            line_index=w.line_index,
        )
        for w in words
    ]


def drop_words(words: Sequence[WordToken], *drop: str) -> List[WordToken]:
    """Remove words by text and re-index what remains."""
    kept = [w for w in words if w.word not in drop]
    return [
        WordToken(word=w.word, start=w.start, end=w.end, index=i, line_index=w.line_index)
        for i, w in enumerate(kept)
    ]


def constant_contour(frequency: float, count: int = 20, step: float = 0.05) -> List[PitchSample]:
    return [PitchSample(time=i * step, frequency=frequency) for i in range(count)]


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers bound to per-test streams once a test finishes."""
    yield
    logger = logging.getLogger("singcoach")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Word Fixtures
# =============================================================================


@pytest.fixture
def words_factory() -> Callable[..., List[WordToken]]:
    return make_words


@pytest.fixture
def shift():
    return shift_words


@pytest.fixture
def drop():
    return drop_words


@pytest.fixture
def reference_words() -> List[WordToken]:
    """Nine words, 0.5s apart, spanning 0.0-4.4s."""
    return make_words(VERSE)


@pytest.fixture
def user_words(reference_words) -> List[WordToken]:
    """A perfect take: same words, same timings."""
    return list(reference_words)


@pytest.fixture
def lined_reference_words() -> List[WordToken]:
    return make_words(VERSE, line_indices=[0, 0, 0, 0, 1, 1, 2, 2, 2])


@pytest.fixture
def reference_lines() -> List[ReferenceLine]:
    return [
        ReferenceLine(index=0, text="the quick brown fox", start=0.0, end=1.9),
        ReferenceLine(index=1, text="jumps over", start=2.0, end=2.9),
        ReferenceLine(index=2, text="the lazy dog.", start=3.0, end=4.4),
    ]


# =============================================================================
# Signal Fixtures
# =============================================================================


@pytest.fixture
def ramp_envelope() -> List[float]:
    """A non-flat envelope of 20 bins well above the low-signal floor."""
    return [0.1 + 0.02 * (i % 7) for i in range(20)]


@pytest.fixture
def contour_factory():
    return constant_contour


@pytest.fixture
def voiced_contour() -> List[PitchSample]:
    return constant_contour(220.0)


# =============================================================================
# File Fixtures
# =============================================================================


def word_dicts(words: Sequence[WordToken]) -> List[dict]:
    return [{"word": w.word, "start": w.start, "end": w.end} for w in words]


@pytest.fixture
def attempt_data(reference_words, ramp_envelope, voiced_contour) -> dict:
    return {
        "referenceWords": word_dicts(reference_words),
        "userWords": word_dicts(reference_words),
        "verseStartSec": 0.0,
        "verseEndSec": 4.5,
        "performance": {
            "referenceDurationSec": 1.0,
            "recordingDurationSec": 1.0,
            "referenceContour": [
                {"time": s.time, "frequency": s.frequency} for s in voiced_contour
            ],
            "recordingContour": [
                {"time": s.time, "frequency": s.frequency} for s in voiced_contour
            ],
            "referenceEnvelope": ramp_envelope,
            "recordingEnvelope": ramp_envelope,
            "practiceMode": "full",
        },
    }


@pytest.fixture
def attempt_file(tmp_path, attempt_data):
    path = tmp_path / "attempt.json"
    path.write_text(json.dumps(attempt_data), encoding="utf-8")
    return path
