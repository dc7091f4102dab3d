"""Pitch, timing and stability performance scoring component."""

from .analyzer import analyze_performance
from .performance_models import (
    PITCH_ACCURACY_LABEL,
    TONE_MATCH_LABEL,
    PerformanceAlignment,
    PerformanceAnalysisInput,
    PerformanceAnalysisResult,
    PerformanceScores,
    PerformanceWeights,
    PitchSample,
)
from .weights import PRACTICE_WEIGHTS, compute_overall_score, resolve_weights

__all__ = [
    "analyze_performance",
    "compute_overall_score",
    "resolve_weights",
    "PRACTICE_WEIGHTS",
    "PITCH_ACCURACY_LABEL",
    "TONE_MATCH_LABEL",
    "PerformanceAlignment",
    "PerformanceAnalysisInput",
    "PerformanceAnalysisResult",
    "PerformanceScores",
    "PerformanceWeights",
    "PitchSample",
]
