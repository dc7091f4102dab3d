"""Configuration settings for SingCoach."""

import os

from .exceptions import ConfigError

# Word alignment (can be overridden via environment variables)
EARLY_LATE_THRESHOLD_MS = int(os.getenv("SINGCOACH_EARLY_LATE_MS", "200"))
PHONETIC_MATCH_THRESHOLD = 0.7
PHONETIC_MATCH_COST = 0.5

# Confidence buckets
HIGH_CONFIDENCE = 0.78
MEDIUM_CONFIDENCE = 0.5

# Segment feedback
TIMING_WARNING_MS = int(os.getenv("SINGCOACH_TIMING_WARNING_MS", "250"))
DEFAULT_SEGMENT_WORDS = 10
MIN_SEGMENT_SEC = 0.6
PAUSE_GAP_SEC = 0.9
SEGMENT_END_TOLERANCE_SEC = 0.01
LOW_CONFIDENCE_INCORRECT = 0.45  # "incorrect" below this is likely transcription noise
LOW_CONFIDENCE_CREDIT = 0.5
WEAK_SEGMENT_ACCURACY = 70
ACCURACY_TIP_THRESHOLD = 75
RUSHING_PACE_RATIO = 1.12
DRAGGING_PACE_RATIO = 0.88
OFFSET_NOTE_MIN_MS = 40
REPEAT_SEGMENT_COUNT = 3

# Early-stop coverage guard
COVERAGE_MIN_RATIO = 0.6
COVERAGE_TAIL_SEC = 0.5

# Performance analysis
MIN_PITCH_HZ = 50.0
MAX_PITCH_HZ = 1100.0
MIN_VOICED_RATIO = 0.3
MIN_STABILITY_SAMPLES = 5
LOW_SIGNAL_ENERGY = 0.002
DEFAULT_ENVELOPE_STEP_SEC = 0.05
SHORT_RECORDING_SEC = 3.0
TIP_SCORE_THRESHOLD = 75

# Neutral defaults when a signal is missing
NEUTRAL_PITCH_SCORE = 55
NEUTRAL_TIMING_SCORE = 60
NEUTRAL_STABILITY_SCORE = 50

PRACTICE_MODES = ("full", "words", "timing", "pitch")
DEFAULT_PRACTICE_MODE = os.getenv("SINGCOACH_PRACTICE_MODE", "full").strip().lower()


def validate_config() -> None:
    """Validate configuration values."""
    if EARLY_LATE_THRESHOLD_MS <= 0:
        raise ConfigError("Early/late threshold must be positive")

    if TIMING_WARNING_MS <= 0:
        raise ConfigError("Timing warning threshold must be positive")

    if not (0.0 <= MEDIUM_CONFIDENCE <= HIGH_CONFIDENCE <= 1.0):
        raise ConfigError("Invalid confidence thresholds")

    if not (0.0 < MIN_PITCH_HZ < MAX_PITCH_HZ):
        raise ConfigError("Invalid pitch band")

    if MIN_SEGMENT_SEC <= 0 or PAUSE_GAP_SEC <= 0 or DEFAULT_SEGMENT_WORDS <= 0:
        raise ConfigError("Invalid segmentation settings")

    if DEFAULT_PRACTICE_MODE not in PRACTICE_MODES:
        raise ConfigError(f"Unknown default practice mode: {DEFAULT_PRACTICE_MODE}")

# Validate config on import
validate_config()
