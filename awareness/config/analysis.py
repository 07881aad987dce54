"""
Analysis Configuration for the Awareness Engine.

Thresholds, window sizes and progression tables used by the pattern
engine and the progression calculator. Everything here is a constant:
the engine never mutates these values at runtime.

Level Architecture:
- 1: Observer (watching reality without reactive judgment)
- 2: Detector (recognizing unconscious patterns and loops)
- 3: Shifter (breaking old programming)
- 4: Aligner (tuning into higher frequencies)
- 5: Creator (conscious reality architect)
"""

from __future__ import annotations

from typing import Any

# Ordered mood vocabulary (index = ordinal mood value)
EMOTION_VOCABULARY: tuple[str, ...] = ("low", "neutral", "elevated", "high", "peak")

# Ordinal used for tags outside the vocabulary
DEFAULT_MOOD_VALUE = 2

# =============================================================================
# Pattern Engine
# =============================================================================

# Below this many records the engine returns the default result
MIN_RECORDS_FOR_ANALYSIS = 5
DEFAULT_INSIGHT = "Keep tracking daily to unlock pattern insights"

CYCLE_LENGTH = 3
CYCLE_SEPARATOR = " → "
MAX_CYCLES = 5
MAX_CYCLE_CONFIDENCE = 95.0

TREND_WINDOW = 7
TREND_THRESHOLD_PERCENT = 10.0

MIN_THOUGHT_SAMPLES = 3
CORRELATION_DAMPING = 10.0
CORRELATION_THRESHOLD = 0.3
MAX_THOUGHT_PATTERNS = 5

# Readiness score components
CONSISTENCY_RECORDS = 7
CONSISTENCY_POINTS = 40.0
COMPLETENESS_POINTS = 30.0
VARIETY_POINTS = 30.0
VARIETY_POINTS_PER_TAG = 3
EARLY_READINESS_PER_RECORD = 14

# A record counts as complete with this much data
COMPLETE_MIN_CATEGORIES = 3
COMPLETE_MIN_THOUGHTS = 2
COMPLETE_MIN_JOURNAL_CHARS = 20

RECENT_MOOD_WINDOW = 3
ELEVATED_MOOD_THRESHOLD = 3.0

# =============================================================================
# Progression
# =============================================================================

MIN_LEVEL = 1
MAX_LEVEL = 5

LEVEL_TITLES: dict[int, str] = {
    1: "Observer",
    2: "Detector",
    3: "Shifter",
    4: "Aligner",
    5: "Creator",
}

# (threshold, badge) pairs, evaluated independently
ENTRY_ACHIEVEMENTS: tuple[tuple[int, str], ...] = (
    (7, "Observer Foundation"),
    (21, "Pattern Seeker"),
    (50, "Reality Tracker"),
    (100, "Consciousness Master"),
)
PATTERN_ACHIEVEMENTS: tuple[tuple[int, str], ...] = (
    (3, "Pattern Detector"),
    (10, "Loop Breaker"),
)
COHERENCE_ACHIEVEMENTS: tuple[tuple[int, str], ...] = (
    (7, "Frequency Aligner"),
    (21, "Timeline Shifter"),
)

# Coherence day: (category avg, thought avg) minimum pairs, any one suffices
COHERENCE_THRESHOLDS: tuple[tuple[float, float], ...] = ((6.0, 6.0), (7.0, 7.0))

# Keyed by target level. Level 5 has no entry and reuses level 4.
LEVEL_REQUIREMENTS: dict[int, dict[str, Any]] = {
    1: {
        "entries": 7,
        "patterns": 0,
        "coherence": 0,
        "tasks": ["Complete 7 daily awareness entries", "Track all required life categories"],
    },
    2: {
        "entries": 21,
        "patterns": 3,
        "coherence": 0,
        "tasks": ["Identify 3 recurring patterns", "Maintain consistent tracking"],
    },
    3: {
        "entries": 50,
        "patterns": 10,
        "coherence": 7,
        "tasks": ["Break old patterns", "Achieve 7 coherent days"],
    },
    4: {
        "entries": 100,
        "patterns": 15,
        "coherence": 21,
        "tasks": ["Master frequency alignment", "Sustain 21 coherent days"],
    },
}
FALLBACK_REQUIREMENTS_LEVEL = 4


def get_level_title(level: int) -> str:
    """
    Get the display title for a level.

    Args:
        level: Level number (1-5)

    Returns:
        Title such as "Observer", or "Level N" for unknown levels

    Example:
        >>> get_level_title(2)
        "Detector"
    """
    return LEVEL_TITLES.get(level, f"Level {level}")


def get_level_requirements(target_level: int) -> dict[str, Any]:
    """Get the requirements table entry for a target level (falls back to level 4)."""
    return LEVEL_REQUIREMENTS.get(target_level, LEVEL_REQUIREMENTS[FALLBACK_REQUIREMENTS_LEVEL])
