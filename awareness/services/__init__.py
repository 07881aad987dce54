"""
Services for the Awareness Engine.

Services:
    - Pattern detection: cycles, trends, thought/mood association,
      readiness score and insights (pure functions)
    - Progression: coherence days, achievements, next-level requirements
    - ConsciousnessCoach: generated guidance with template fallback
"""

from .coach import (
    CoachingGuidance,
    ConsciousnessCoach,
    GuidanceSource,
    fallback_guidance,
    fallback_level_insights,
)
from .pattern_detection import (
    analyze_category_trends,
    analyze_patterns,
    analyze_thought_patterns,
    calculate_readiness_score,
    detect_emotional_cycles,
    generate_insights,
    validate_records,
)
from .progression import (
    calculate_achievements,
    calculate_coherence_days,
    calculate_level_progress,
    check_level_advance,
    get_next_level_requirements,
)

__all__ = [
    # Pattern detection
    "analyze_patterns",
    "detect_emotional_cycles",
    "analyze_category_trends",
    "analyze_thought_patterns",
    "calculate_readiness_score",
    "generate_insights",
    "validate_records",
    # Progression
    "calculate_level_progress",
    "calculate_coherence_days",
    "calculate_achievements",
    "get_next_level_requirements",
    "check_level_advance",
    # Coach
    "ConsciousnessCoach",
    "CoachingGuidance",
    "GuidanceSource",
    "fallback_guidance",
    "fallback_level_insights",
]
