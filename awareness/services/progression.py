"""
Progression Calculator for the Awareness Engine.

Turns a user's records and current level into a LevelProgress snapshot:
- entries completed, patterns identified, coherence days
- unlocked achievements (all thresholds crossed, not only the highest)
- what is still needed for the next level

The engine never stores the level. Callers persist whatever
check_level_advance() returns.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from awareness.config.analysis import (
    COHERENCE_ACHIEVEMENTS,
    COHERENCE_THRESHOLDS,
    ENTRY_ACHIEVEMENTS,
    MAX_LEVEL,
    MIN_LEVEL,
    PATTERN_ACHIEVEMENTS,
    get_level_requirements,
)
from awareness.models.patterns import LevelProgress, NextLevelRequirements
from awareness.models.records import DailyRecord
from awareness.services.pattern_detection import analyze_patterns, mean_score

logger = logging.getLogger(__name__)


def is_coherent(record: DailyRecord) -> bool:
    """
    Whether a record is a coherence day.

    Both the category mean and the thought mean must clear one of the
    threshold pairs. Records without any category or thought score
    are never coherent.
    """
    category_avg = mean_score(record.categories)
    thought_avg = mean_score(record.thoughts)
    if category_avg is None or thought_avg is None:
        return False
    return any(
        category_avg >= min_category and thought_avg >= min_thought
        for min_category, min_thought in COHERENCE_THRESHOLDS
    )


def calculate_coherence_days(records: Sequence[DailyRecord]) -> int:
    """Count coherence days."""
    return sum(1 for record in records if is_coherent(record))


def calculate_achievements(entries: int, patterns: int, coherence: int) -> list[str]:
    """
    All unlocked achievement badges.

    Thresholds are cumulative and independent, so a user with 21 entries
    holds both "Observer Foundation" and "Pattern Seeker".

    Args:
        entries: Total records
        patterns: Cycles plus trends
        coherence: Coherence days

    Returns:
        Badge names: entry badges, then pattern badges, then coherence badges
    """
    achievements: list[str] = []
    for value, table in (
        (entries, ENTRY_ACHIEVEMENTS),
        (patterns, PATTERN_ACHIEVEMENTS),
        (coherence, COHERENCE_ACHIEVEMENTS),
    ):
        achievements.extend(badge for threshold, badge in table if value >= threshold)
    return achievements


def get_next_level_requirements(
    level: int,
    entries: int,
    patterns: int,
    coherence: int,
) -> NextLevelRequirements:
    """
    Remaining requirements for the level after ``level``.

    The target is capped at 5; a target without a table entry uses the
    level 4 requirements.
    """
    target_level = min(level + 1, MAX_LEVEL)
    requirements = get_level_requirements(target_level)
    return NextLevelRequirements(
        entries_needed=max(0, requirements["entries"] - entries),
        patterns_needed=max(0, requirements["patterns"] - patterns),
        coherence_needed=max(0, requirements["coherence"] - coherence),
        specific_tasks=list(requirements["tasks"]),
    )


def calculate_level_progress(records: Sequence[DailyRecord], current_level: int) -> LevelProgress:
    """
    Build the progression snapshot for a user.

    Args:
        records: Records ordered oldest -> newest
        current_level: The user's stored level (values below 1 count as 1)

    Returns:
        LevelProgress

    Raises:
        RecordValidationError: If dates are duplicated or out of order
    """
    level = max(current_level, MIN_LEVEL)
    patterns = analyze_patterns(records)

    entries_completed = len(records)
    patterns_identified = patterns.patterns_identified
    coherence_days = calculate_coherence_days(records)

    return LevelProgress(
        current_level=level,
        entries_completed=entries_completed,
        patterns_identified=patterns_identified,
        coherence_days=coherence_days,
        achievements=calculate_achievements(entries_completed, patterns_identified, coherence_days),
        next_level_requirements=get_next_level_requirements(
            level, entries_completed, patterns_identified, coherence_days,
        ),
    )


def check_level_advance(progress: LevelProgress) -> int:
    """
    The level a user should hold given their progress.

    Advances one level when every requirement for the next level is met,
    never past level 5.
    """
    if progress.current_level >= MAX_LEVEL or not progress.next_level_requirements.is_met:
        return progress.current_level

    new_level = progress.current_level + 1
    logger.info("Level advance %d -> %d", progress.current_level, new_level)
    return new_level
