"""
Models package for the Awareness Engine.

This package exports the record and result value types.

Usage:
    from awareness.models import DailyRecord, EmotionTag, mood_value
    from awareness.models import PatternResult, LevelProgress
"""

from awareness.models.patterns import (
    CategoryTrend,
    EmotionalCycle,
    LevelProgress,
    NextLevelRequirements,
    PatternResult,
    ThoughtImpact,
    ThoughtPattern,
    TrendDirection,
)
from awareness.models.records import DailyRecord, EmotionTag, UserConfig, mood_value

__all__ = [
    "DailyRecord",
    "EmotionTag",
    "UserConfig",
    "mood_value",
    "EmotionalCycle",
    "CategoryTrend",
    "ThoughtPattern",
    "TrendDirection",
    "ThoughtImpact",
    "PatternResult",
    "NextLevelRequirements",
    "LevelProgress",
]
