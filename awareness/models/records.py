"""
Daily record value types for the Awareness Engine.

A DailyRecord is one user's self-report for one calendar date:
- categories: life-area scores (e.g. {"health": 7, "career": 5})
- thoughts: thought-pattern scores (e.g. {"gratitude": 8})
- emotion_tag: ordinal mood on the scale low < neutral < elevated < high < peak
- identity_tag: free-form identity label
- journal_entry: free text

Records are immutable. Callers hand the engine a list ordered
oldest -> newest with one record per date.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any

from awareness.config.analysis import DEFAULT_MOOD_VALUE, EMOTION_VOCABULARY, MIN_LEVEL
from awareness.lib.exceptions import ValidationError


class EmotionTag(StrEnum):
    """Ordinal mood scale. Declaration order is the ordinal order."""

    LOW = "low"
    NEUTRAL = "neutral"
    ELEVATED = "elevated"
    HIGH = "high"
    PEAK = "peak"

    @property
    def ordinal(self) -> int:
        """Position on the mood scale (0 = low, 4 = peak)."""
        return EMOTION_VOCABULARY.index(self.value)


def mood_value(tag: str) -> int:
    """
    Get the ordinal mood value for an emotion tag.

    Unknown tags map to the neutral midpoint instead of failing,
    since tag vocabularies may evolve.

    Args:
        tag: Emotion tag string (e.g. "elevated")

    Returns:
        Ordinal value 0-4

    Example:
        >>> mood_value("high")
        3
        >>> mood_value("ecstatic")
        2
    """
    try:
        return EmotionTag(tag).ordinal
    except ValueError:
        return DEFAULT_MOOD_VALUE


@dataclass(frozen=True)
class DailyRecord:
    """One user's daily self-report entry."""

    date: date
    categories: Mapping[str, int] = field(default_factory=dict)
    thoughts: Mapping[str, int] = field(default_factory=dict)
    emotion_tag: str = EmotionTag.NEUTRAL.value
    identity_tag: str = ""
    journal_entry: str = ""

    @property
    def mood(self) -> int:
        """Ordinal mood value of this record's emotion tag."""
        return mood_value(self.emotion_tag)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DailyRecord:
        """
        Build a record from its wire shape.

        Accepts camelCase keys (emotionTag, identityTag, journalEntry) as
        stored by the client, or their snake_case equivalents. ``date`` may
        be a date or an ISO "YYYY-MM-DD" string.

        Raises:
            ValidationError: If the date is missing or not ISO formatted
        """
        raw_date = data.get("date")
        if isinstance(raw_date, date):
            record_date = raw_date
        else:
            try:
                record_date = date.fromisoformat(str(raw_date))
            except ValueError as e:
                raise ValidationError(f"Invalid record date: {raw_date!r}") from e

        return cls(
            date=record_date,
            categories=dict(data.get("categories") or {}),
            thoughts=dict(data.get("thoughts") or {}),
            emotion_tag=str(data.get("emotionTag", data.get("emotion_tag", EmotionTag.NEUTRAL.value))),
            identity_tag=str(data.get("identityTag", data.get("identity_tag", ""))),
            journal_entry=str(data.get("journalEntry", data.get("journal_entry", ""))),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire shape."""
        return {
            "date": self.date.isoformat(),
            "categories": dict(self.categories),
            "thoughts": dict(self.thoughts),
            "emotionTag": self.emotion_tag,
            "identityTag": self.identity_tag,
            "journalEntry": self.journal_entry,
        }


@dataclass
class UserConfig:
    """
    Per-user tracking configuration, owned and persisted by the caller.

    The engine only reads current_level; level_progress is the last
    LevelProgress payload the caller chose to store.
    """

    current_level: int = MIN_LEVEL
    level_progress: dict[str, Any] = field(default_factory=dict)
    categories: list[str] = field(default_factory=list)
    thoughts: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.current_level < MIN_LEVEL:
            self.current_level = MIN_LEVEL
