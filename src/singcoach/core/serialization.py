"""JSON serialization for attempt inputs and scoring reports.

Keys use camelCase to match what the UI and persistence layers store.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..exceptions import InputFormatError
from .components.feedback import DetailedFeedback, NextDrill, SegmentFeedback
from .components.lyrics import (
    TranscriptSegment,
    TranscriptWord,
    build_reference_lines,
    flatten_words,
)
from .components.performance import (
    PerformanceAnalysisInput,
    PerformanceAnalysisResult,
    PitchSample,
)
from .models import AlignmentWordResult, PracticeMode, ReferenceLine, WordToken
from .offset import OffsetEstimate, OffsetMethod
from .report import AttemptInput, AttemptReport


def _require(data: Dict[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise InputFormatError(f"Missing required field: {key}")
    return data[key]


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InputFormatError(f"Field {key} must be a number, got {value!r}")
    return float(value)


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputFormatError(f"Field {key} must be an integer, got {value!r}")
    return value


def _optional_float(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    return _as_float(value, key)


def _as_list(value: Any, key: str) -> list:
    if not isinstance(value, list):
        raise InputFormatError(f"Field {key} must be a list")
    return value


def _as_dict(value: Any, key: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise InputFormatError(f"Field {key} must be an object")
    return value


# =============================================================================
# Inputs
# =============================================================================


def words_from_json(data: List[dict], key: str = "words") -> List[WordToken]:
    """Parse timed words; a missing ``index`` defaults to the list position.

    Indices identify words when results are joined back to segments, so they
    must be unique within the list.
    """
    tokens: List[WordToken] = []
    seen = set()
    for position, item in enumerate(_as_list(data, key)):
        item = _as_dict(item, key)
        word = _require(item, "word")
        if not isinstance(word, str):
            raise InputFormatError(f"Field {key}[{position}].word must be a string")
        index = _as_int(item.get("index", position), f"{key}[{position}].index")
        if index in seen:
            raise InputFormatError(f"Duplicate index {index} in {key}")
        seen.add(index)
        line_index = item.get("lineIndex")
        tokens.append(
            WordToken(
                word=word,
                start=_as_float(_require(item, "start"), "start"),
                end=_as_float(_require(item, "end"), "end"),
                index=index,
                line_index=(
                    _as_int(line_index, f"{key}[{position}].lineIndex")
                    if line_index is not None
                    else None
                ),
            )
        )
    return tokens


def lines_from_json(data: List[dict]) -> List[ReferenceLine]:
    lines: List[ReferenceLine] = []
    for position, item in enumerate(_as_list(data, "referenceLines")):
        item = _as_dict(item, "referenceLines")
        lines.append(
            ReferenceLine(
                index=_as_int(item.get("index", position), "referenceLines.index"),
                text=str(item.get("text", "")),
                start=_as_float(_require(item, "start"), "start"),
                end=_as_float(_require(item, "end"), "end"),
            )
        )
    return lines


def transcript_segments_from_json(data: List[dict], key: str) -> List[TranscriptSegment]:
    segments: List[TranscriptSegment] = []
    for item in _as_list(data, key):
        item = _as_dict(item, key)
        words = [
            TranscriptWord(
                word=str(w.get("word", "")),
                start=_as_float(_require(w, "start"), "start"),
                end=_as_float(_require(w, "end"), "end"),
            )
            for w in (_as_dict(raw, "words") for raw in _as_list(item.get("words", []), "words"))
        ]
        segments.append(
            TranscriptSegment(
                start=_as_float(_require(item, "start"), "start"),
                end=_as_float(_require(item, "end"), "end"),
                text=str(item.get("text", "")),
                words=words,
            )
        )
    return segments


def _contour_from_json(data: Any, key: str) -> List[PitchSample]:
    return [
        PitchSample(
            time=_as_float(_require(s, "time"), "time"),
            frequency=_as_float(_require(s, "frequency"), "frequency"),
        )
        for s in (_as_dict(item, key) for item in _as_list(data, key))
    ]


def _envelope_from_json(data: Any, key: str) -> List[float]:
    return [_as_float(v, key) for v in _as_list(data, key)]


def performance_input_from_json(data: Dict[str, Any]) -> PerformanceAnalysisInput:
    data = _as_dict(data, "performance")
    return PerformanceAnalysisInput(
        reference_duration_sec=_optional_float(data, "referenceDurationSec"),
        recording_duration_sec=_optional_float(data, "recordingDurationSec"),
        reference_contour=_contour_from_json(
            data.get("referenceContour", []), "referenceContour"
        ),
        recording_contour=_contour_from_json(
            data.get("recordingContour", []), "recordingContour"
        ),
        reference_envelope=_envelope_from_json(
            data.get("referenceEnvelope", []), "referenceEnvelope"
        ),
        recording_envelope=_envelope_from_json(
            data.get("recordingEnvelope", []), "recordingEnvelope"
        ),
        estimated_offset_ms=_optional_float(data, "estimatedOffsetMs"),
        practice_mode=PracticeMode.from_value(data.get("practiceMode")),
        word_score=_optional_float(data, "wordScore"),
    )


def offset_from_json(data: Optional[Dict[str, Any]]) -> Optional[OffsetEstimate]:
    if data is None:
        return None
    data = _as_dict(data, "offset")
    try:
        method = OffsetMethod(data.get("method", OffsetMethod.NONE.value))
    except ValueError:
        raise InputFormatError(f"Unknown offset method: {data.get('method')!r}")
    return OffsetEstimate(
        offset_ms=_as_float(data.get("offsetMs", 0.0), "offsetMs"),
        method=method,
        correlation=_optional_float(data, "correlation"),
    )


def attempt_from_json(data: Dict[str, Any]) -> AttemptInput:
    """Parse an attempt.

    Reference and user words come either as flat timed word lists
    (``referenceWords``/``userWords``) or as transcription segments
    (``referenceSegments``/``userSegments``). Reference segments also define
    the lyric lines unless ``referenceLines`` is given.
    """
    data = _as_dict(data, "attempt")
    reference_lines: Optional[List[ReferenceLine]] = None

    if "referenceSegments" in data:
        segments = transcript_segments_from_json(
            data["referenceSegments"], "referenceSegments"
        )
        reference_words = flatten_words(segments)
        reference_lines = build_reference_lines(segments)
    else:
        reference_words = words_from_json(
            _require(data, "referenceWords"), "referenceWords"
        )

    if "userSegments" in data:
        user_words = flatten_words(
            transcript_segments_from_json(data["userSegments"], "userSegments")
        )
    else:
        user_words = words_from_json(_require(data, "userWords"), "userWords")

    if data.get("referenceLines") is not None:
        reference_lines = lines_from_json(data["referenceLines"])

    offset = offset_from_json(data.get("offset"))
    if offset is None and data.get("estimatedOffsetMs") is not None:
        offset = OffsetEstimate(
            offset_ms=_as_float(data["estimatedOffsetMs"], "estimatedOffsetMs")
        )

    return AttemptInput(
        reference_words=reference_words,
        user_words=user_words,
        verse_start_sec=_as_float(data.get("verseStartSec", 0.0), "verseStartSec"),
        verse_end_sec=_as_float(_require(data, "verseEndSec"), "verseEndSec"),
        reference_lines=reference_lines,
        performance=performance_input_from_json(data.get("performance", {})),
        offset=offset,
    )


# =============================================================================
# Outputs
# =============================================================================


def word_result_to_json(result: AlignmentWordResult) -> dict:
    data = {
        "refIndex": result.ref_index,
        "refWord": result.ref_word,
        "refStart": result.ref_start,
        "refEnd": result.ref_end,
        "status": result.status.value,
    }
    if result.user_word is not None:
        data.update(
            {
                "userWord": result.user_word,
                "userStart": result.user_start,
                "userEnd": result.user_end,
                "deltaMs": result.delta_ms,
            }
        )
    if result.confidence is not None:
        data["confidence"] = result.confidence
    if result.confidence_label is not None:
        data["confidenceLabel"] = result.confidence_label.value
    return data


def segment_to_json(segment: SegmentFeedback) -> dict:
    return {
        "segmentIndex": segment.segment_index,
        "text": segment.text,
        "start": segment.start,
        "end": segment.end,
        "wordAccuracyPct": segment.word_accuracy_pct,
        "timingMeanAbsMs": segment.timing_mean_abs_ms,
        "mainIssues": list(segment.main_issues),
    }


def drill_to_json(drill: NextDrill) -> dict:
    data = {"type": drill.type.value, "note": drill.note}
    if drill.target_segment_index is not None:
        data["targetSegmentIndex"] = drill.target_segment_index
        data["repeatCount"] = drill.repeat_count
    return data


def feedback_to_json(feedback: DetailedFeedback) -> dict:
    data = {
        "wordAccuracyPct": feedback.word_accuracy_pct,
        "timingMeanAbsMs": feedback.timing_mean_abs_ms,
        "paceRatio": feedback.pace_ratio,
        "missedWords": list(feedback.missed_words),
        "extraWords": list(feedback.extra_words),
        "perWord": [word_result_to_json(w) for w in feedback.per_word],
        "segments": [segment_to_json(s) for s in feedback.segments],
        "coachTips": list(feedback.coach_tips),
        "nextDrill": drill_to_json(feedback.next_drill),
        "subscores": {
            "wordAccuracy": feedback.subscores.word_accuracy,
            "timing": feedback.subscores.timing,
            "pace": feedback.subscores.pace,
        },
        "substitutions": [
            {
                "refWord": s.ref_word,
                "userWord": s.user_word,
                "confidence": s.confidence,
                "confidenceLabel": s.confidence_label.value
                if s.confidence_label
                else None,
            }
            for s in feedback.substitutions
        ],
        "confidenceLabel": feedback.confidence_label.value,
        "estimatedOffsetMs": feedback.estimated_offset_ms,
    }
    if feedback.message is not None:
        data["message"] = feedback.message
    if feedback.warnings:
        data["warnings"] = list(feedback.warnings)
    return data


def performance_to_json(result: PerformanceAnalysisResult) -> dict:
    data = {
        "overall": result.overall,
        "pitch": result.pitch,
        "timing": result.timing,
        "stability": result.stability,
        "label": result.label,
        "tips": list(result.tips),
        "alignment": {"timingCorrelation": result.alignment.timing_correlation},
    }
    if result.words is not None:
        data["words"] = result.words
    return data


def offset_to_json(offset: OffsetEstimate) -> dict:
    data = {"offsetMs": offset.offset_ms, "method": offset.method.value}
    if offset.correlation is not None:
        data["correlation"] = offset.correlation
    return data


def report_to_json(report: AttemptReport) -> dict:
    return {
        "feedback": feedback_to_json(report.feedback),
        "performance": performance_to_json(report.performance),
        "offset": offset_to_json(report.offset),
    }


def load_json_file(filepath: str) -> Dict[str, Any]:
    """Read a JSON object from disk, wrapping decode errors as InputFormatError."""
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InputFormatError(f"Invalid JSON in {filepath}: {e}") from e
    return _as_dict(data, Path(filepath).name)


def dump_json(data: dict, filepath: Optional[str] = None) -> str:
    """Serialize to indented JSON, also writing it to ``filepath`` when given."""
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if filepath:
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    return text
