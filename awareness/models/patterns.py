"""
Derived result types for the Awareness Engine.

PatternResult and LevelProgress are recomputed on every request and
never persisted by the engine. to_dict() produces the camelCase payload
served to clients and fed to the coach.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from awareness.config.analysis import DEFAULT_INSIGHT


class TrendDirection(StrEnum):
    """Direction of change in a category between two windows."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class ThoughtImpact(StrEnum):
    """How a thought's score moves with mood."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class EmotionalCycle:
    """A repeating 3-step sequence of emotion tags."""

    pattern: str                 # e.g. "low → neutral → elevated"
    frequency: int               # occurrences, overlapping windows included
    last_occurrence: str         # ISO date of the last occurrence start
    confidence: float            # 0 - 95

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "pattern": self.pattern,
            "frequency": self.frequency,
            "lastOccurrence": self.last_occurrence,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class CategoryTrend:
    """Recent-vs-older comparison for one life category."""

    category: str
    trend: TrendDirection
    change: int                  # percent, rounded

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "category": self.category,
            "trend": self.trend.value,
            "change": self.change,
        }


@dataclass(frozen=True)
class ThoughtPattern:
    """Co-movement of one thought's score with mood."""

    thought: str
    correlation: float
    impact: ThoughtImpact

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "thought": self.thought,
            "correlation": self.correlation,
            "impact": self.impact.value,
        }


@dataclass(frozen=True)
class PatternResult:
    """Combined output of the four analyzers."""

    emotional_cycles: list[EmotionalCycle] = field(default_factory=list)
    category_trends: list[CategoryTrend] = field(default_factory=list)
    thought_patterns: list[ThoughtPattern] = field(default_factory=list)
    readiness_score: int = 0
    insights: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> PatternResult:
        """Default result for users without enough data yet."""
        return cls(insights=[DEFAULT_INSIGHT])

    @property
    def patterns_identified(self) -> int:
        """Cycles plus category trends."""
        return len(self.emotional_cycles) + len(self.category_trends)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "emotionalCycles": [c.to_dict() for c in self.emotional_cycles],
            "categoryTrends": [t.to_dict() for t in self.category_trends],
            "thoughtPatterns": [p.to_dict() for p in self.thought_patterns],
            "readinessScore": self.readiness_score,
            "insights": list(self.insights),
        }


@dataclass(frozen=True)
class NextLevelRequirements:
    """What remains before the next level can be reached."""

    entries_needed: int = 0
    patterns_needed: int = 0
    coherence_needed: int = 0
    specific_tasks: list[str] = field(default_factory=list)

    @property
    def is_met(self) -> bool:
        """True when no entries, patterns or coherence days are missing."""
        return (
            self.entries_needed == 0
            and self.patterns_needed == 0
            and self.coherence_needed == 0
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "entriesNeeded": self.entries_needed,
            "patternsNeeded": self.patterns_needed,
            "coherenceNeeded": self.coherence_needed,
            "specificTasks": list(self.specific_tasks),
        }


@dataclass(frozen=True)
class LevelProgress:
    """Progression snapshot for a user at their current level."""

    current_level: int
    entries_completed: int
    patterns_identified: int
    coherence_days: int
    achievements: list[str] = field(default_factory=list)
    next_level_requirements: NextLevelRequirements = field(default_factory=NextLevelRequirements)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "currentLevel": self.current_level,
            "entriesCompleted": self.entries_completed,
            "patternsIdentified": self.patterns_identified,
            "coherenceDays": self.coherence_days,
            "achievements": list(self.achievements),
            "nextLevelRequirements": self.next_level_requirements.to_dict(),
        }
