"""Turn transcription segments into ``WordToken`` sequences and lyric lines.

Transcription output is a list of segments (roughly one sung line each),
optionally carrying per-word timings. Segments without word timings get their
words spread evenly over the segment span.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from ....utils.logging import get_logger
from ...models import ReferenceLine, WordToken

logger = get_logger(__name__)

MIN_SEGMENT_SPAN_SEC = 0.01


@dataclass(frozen=True)
class TranscriptWord:
    word: str
    start: float
    end: float


@dataclass(frozen=True)
class TranscriptSegment:
    """One transcribed segment with its span and optional word timings."""

    start: float
    end: float
    text: str = ""
    words: List[TranscriptWord] = field(default_factory=list)


def _distribute_words(segment: TranscriptSegment) -> List[TranscriptWord]:
    tokens = (segment.text or "").split()
    if not tokens:
        return []
    duration = max(MIN_SEGMENT_SPAN_SEC, segment.end - segment.start)
    step = duration / len(tokens)
    return [
        TranscriptWord(
            word=token,
            start=segment.start + step * i,
            end=segment.start + step * (i + 1),
        )
        for i, token in enumerate(tokens)
    ]


def flatten_words(segments: Sequence[TranscriptSegment]) -> List[WordToken]:
    """Flatten segments into one indexed word sequence.

    Each token's ``line_index`` is the index of the segment it came from.
    Empty words are dropped and do not consume an index.
    """
    tokens: List[WordToken] = []
    for segment_index, segment in enumerate(segments):
        if segment.words:
            words = [w for w in segment.words if w.word]
        else:
            words = _distribute_words(segment)
        for word in words:
            tokens.append(
                WordToken(
                    word=word.word,
                    start=word.start,
                    end=word.end,
                    index=len(tokens),
                    line_index=segment_index,
                )
            )
    logger.debug("Flattened %d segments into %d words", len(segments), len(tokens))
    return tokens


def build_reference_lines(segments: Sequence[TranscriptSegment]) -> List[ReferenceLine]:
    """One ``ReferenceLine`` per segment, indexed to match ``flatten_words``."""
    lines: List[ReferenceLine] = []
    for index, segment in enumerate(segments):
        text = (segment.text or "").strip()
        if not text and segment.words:
            text = " ".join(w.word.strip() for w in segment.words if w.word)
        lines.append(
            ReferenceLine(index=index, text=text, start=segment.start, end=segment.end)
        )
    return lines
