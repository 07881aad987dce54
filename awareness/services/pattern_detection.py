"""
Pattern Detection Service for the Awareness Engine.

Derives behavioral insight from a user's ordered daily records.

4 Analyzers (independent, all read the same record sequence):
- Cycle Detector: repeating emotion-tag triads
- Trend Analyzer: last 7 records vs the 7 before, per category
- Correlation Analyzer: thought score co-movement with mood
- Readiness Scorer & Insight Generator: 0-100 score plus rule-based insights

Every function here is pure. Nothing is cached between calls and no
state is shared, so the same records always give the same result.

Usage:
    result = analyze_patterns(records)
    result.to_dict()  # {"emotionalCycles": [...], "categoryTrends": [...], ...}
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence

from awareness.config.analysis import (
    COMPLETE_MIN_CATEGORIES,
    COMPLETE_MIN_JOURNAL_CHARS,
    COMPLETE_MIN_THOUGHTS,
    COMPLETENESS_POINTS,
    CONSISTENCY_POINTS,
    CONSISTENCY_RECORDS,
    CORRELATION_DAMPING,
    CORRELATION_THRESHOLD,
    CYCLE_LENGTH,
    CYCLE_SEPARATOR,
    EARLY_READINESS_PER_RECORD,
    ELEVATED_MOOD_THRESHOLD,
    MAX_CYCLE_CONFIDENCE,
    MAX_CYCLES,
    MAX_THOUGHT_PATTERNS,
    MIN_RECORDS_FOR_ANALYSIS,
    MIN_THOUGHT_SAMPLES,
    RECENT_MOOD_WINDOW,
    TREND_THRESHOLD_PERCENT,
    TREND_WINDOW,
    VARIETY_POINTS,
    VARIETY_POINTS_PER_TAG,
)
from awareness.lib.exceptions import RecordValidationError
from awareness.models.patterns import (
    CategoryTrend,
    EmotionalCycle,
    PatternResult,
    ThoughtImpact,
    ThoughtPattern,
    TrendDirection,
)
from awareness.models.records import DailyRecord

logger = logging.getLogger(__name__)


# ============================================================================
# Helpers
# ============================================================================

def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3, -2.5 -> -2), unlike round()."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def score_of(scores: Mapping[str, object], label: str) -> float | None:
    """Numeric score for a label, or None when missing or malformed."""
    value = scores.get(label)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def mean_score(scores: Mapping[str, object]) -> float | None:
    """Mean of the numeric values in a score mapping, None if there are none."""
    values = [v for v in (score_of(scores, k) for k in scores) if v is not None]
    if not values:
        return None
    return sum(values) / len(values)


def discover_labels(mappings: Iterable[Mapping[str, object]]) -> list[str]:
    """Labels in the order they are first seen, oldest record first."""
    seen: dict[str, None] = {}
    for mapping in mappings:
        for label in mapping:
            seen.setdefault(label, None)
    return list(seen)


def validate_records(records: Sequence[DailyRecord]) -> None:
    """
    Check that records are strictly chronological.

    Raises:
        RecordValidationError: On the first duplicate or out-of-order date
    """
    for index in range(1, len(records)):
        previous = records[index - 1].date
        current = records[index].date
        if current <= previous:
            logger.warning(
                "Rejected record sequence: date %s at index %d follows %s",
                current, index, previous,
            )
            raise RecordValidationError(index, previous, current)


# ============================================================================
# Cycle Detector
# ============================================================================

def detect_emotional_cycles(records: Sequence[DailyRecord]) -> list[EmotionalCycle]:
    """
    Find emotion-tag triads that occur more than once.

    Triads are counted in one pass. A triad seen at several positions is
    reported once per position, in start-index order, until MAX_CYCLES
    results are collected.

    Args:
        records: Records ordered oldest -> newest

    Returns:
        Up to 5 EmotionalCycle entries
    """
    sequence = [record.emotion_tag for record in records]
    triads = list(zip(*(sequence[offset:] for offset in range(CYCLE_LENGTH))))
    counts = Counter(triads)
    last_start = {triad: start for start, triad in enumerate(triads)}
    total = len(records)
    cycles: list[EmotionalCycle] = []

    for triad in triads:
        occurrences = counts[triad]
        if occurrences <= 1:
            continue

        cycles.append(EmotionalCycle(
            pattern=CYCLE_SEPARATOR.join(triad),
            frequency=occurrences,
            last_occurrence=records[last_start[triad]].date.isoformat(),
            confidence=min(occurrences / total * 100, MAX_CYCLE_CONFIDENCE),
        ))
        if len(cycles) == MAX_CYCLES:
            break

    return cycles


# ============================================================================
# Trend Analyzer
# ============================================================================

def category_average(records: Sequence[DailyRecord], category: str) -> float | None:
    """Mean score of a category over the records that contain it."""
    values = [
        value
        for value in (score_of(record.categories, category) for record in records)
        if value is not None
    ]
    if not values:
        return None
    return sum(values) / len(values)


def classify_trend(change: float) -> TrendDirection:
    """Classify a percent change (beyond +/-10% is a real move)."""
    if change > TREND_THRESHOLD_PERCENT:
        return TrendDirection.IMPROVING
    if change < -TREND_THRESHOLD_PERCENT:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def analyze_category_trends(records: Sequence[DailyRecord]) -> list[CategoryTrend]:
    """
    Compare the last 7 records against the 7 before them, per category.

    Categories absent from either window are skipped, as are categories
    whose older mean is zero.

    Args:
        records: Records ordered oldest -> newest

    Returns:
        One CategoryTrend per qualifying category, in discovery order
    """
    if len(records) < TREND_WINDOW:
        return []

    recent = records[-TREND_WINDOW:]
    older = records[-2 * TREND_WINDOW:-TREND_WINDOW]
    trends: list[CategoryTrend] = []

    for category in discover_labels(record.categories for record in records):
        recent_avg = category_average(recent, category)
        older_avg = category_average(older, category)
        if recent_avg is None or older_avg is None or older_avg == 0:
            continue

        change = (recent_avg - older_avg) / older_avg * 100
        trends.append(CategoryTrend(
            category=category,
            trend=classify_trend(change),
            change=int(round_half_up(change)),
        ))

    return trends


# ============================================================================
# Correlation Analyzer
# ============================================================================

def thought_impact(records: Sequence[DailyRecord], thought: str) -> float:
    """
    Damped co-movement of a thought's score with mood.

    mean((t - t_mean) * (m - m_mean)) / 10 over the records containing the
    thought. Not normalized by variance: the +/-0.3 impact thresholds are
    calibrated against this exact statistic.

    Returns:
        The statistic, or 0.0 with fewer than 3 samples
    """
    thought_values: list[float] = []
    mood_values: list[int] = []
    for record in records:
        value = score_of(record.thoughts, thought)
        if value is None:
            continue
        thought_values.append(value)
        mood_values.append(record.mood)

    count = len(thought_values)
    if count < MIN_THOUGHT_SAMPLES:
        return 0.0

    thought_mean = sum(thought_values) / count
    mood_mean = sum(mood_values) / count
    covariance = sum(
        (t - thought_mean) * (m - mood_mean)
        for t, m in zip(thought_values, mood_values)
    )
    return covariance / count / CORRELATION_DAMPING


def classify_impact(correlation: float) -> ThoughtImpact:
    """Classify a thought/mood statistic."""
    if correlation > CORRELATION_THRESHOLD:
        return ThoughtImpact.POSITIVE
    if correlation < -CORRELATION_THRESHOLD:
        return ThoughtImpact.NEGATIVE
    return ThoughtImpact.NEUTRAL


def analyze_thought_patterns(records: Sequence[DailyRecord]) -> list[ThoughtPattern]:
    """
    Measure thought/mood association for the first 5 thoughts discovered.

    Args:
        records: Records ordered oldest -> newest

    Returns:
        Up to 5 ThoughtPattern entries in discovery order
    """
    patterns: list[ThoughtPattern] = []
    for thought in discover_labels(record.thoughts for record in records):
        correlation = thought_impact(records, thought)
        patterns.append(ThoughtPattern(
            thought=thought,
            correlation=round_half_up(correlation, 2),
            impact=classify_impact(correlation),
        ))
    return patterns[:MAX_THOUGHT_PATTERNS]


# ============================================================================
# Readiness Scorer & Insight Generator
# ============================================================================

def is_complete(record: DailyRecord) -> bool:
    """A record with enough categories, thoughts and journal text."""
    return (
        len(record.categories) >= COMPLETE_MIN_CATEGORIES
        and len(record.thoughts) >= COMPLETE_MIN_THOUGHTS
        and len(record.journal_entry) > COMPLETE_MIN_JOURNAL_CHARS
    )


def calculate_readiness_score(records: Sequence[DailyRecord]) -> int:
    """
    Composite 0-100 readiness score.

    Under 7 records the score is a linear 14 points per record; the
    composite below only applies from 7 records on, so the score can jump
    at that boundary.

    Composite:
    - Consistency: 40 points
    - Completeness: up to 30, by share of complete records
    - Variety: 3 points per distinct emotion/identity tag, up to 30
    """
    count = len(records)
    if count < CONSISTENCY_RECORDS:
        return min(count * EARLY_READINESS_PER_RECORD, 100)

    score = CONSISTENCY_POINTS

    complete = sum(1 for record in records if is_complete(record))
    score += complete / count * COMPLETENESS_POINTS

    emotional_variety = len({record.emotion_tag for record in records})
    identity_variety = len({record.identity_tag for record in records})
    score += min((emotional_variety + identity_variety) * VARIETY_POINTS_PER_TAG, VARIETY_POINTS)

    return max(0, min(100, int(round_half_up(score))))


def recent_mood_average(records: Sequence[DailyRecord]) -> float | None:
    """Mean mood ordinal of the last 3 records."""
    recent = records[-RECENT_MOOD_WINDOW:]
    if not recent:
        return None
    return sum(record.mood for record in recent) / len(recent)


def generate_insights(
    records: Sequence[DailyRecord],
    cycles: Sequence[EmotionalCycle],
    trends: Sequence[CategoryTrend],
) -> list[str]:
    """
    Rule-based insight strings, always in the same order.

    1. Consistent practice (7+ records)
    2. Recurring emotional patterns (any cycles)
    3. Improving life areas (any improving trends)
    4. Elevated recent mood (last 3 records average "high" or better)
    """
    insights: list[str] = []

    if len(records) >= CONSISTENCY_RECORDS:
        insights.append("You've established a consistent awareness tracking practice")

    if cycles:
        insights.append(
            f"Detected {len(cycles)} recurring emotional patterns - "
            "you're developing pattern recognition"
        )

    improving = [t for t in trends if t.trend == TrendDirection.IMPROVING]
    if improving:
        insights.append(
            f"{len(improving)} life areas are improving - "
            "your awareness is creating positive shifts"
        )

    avg_mood = recent_mood_average(records)
    if avg_mood is not None and avg_mood >= ELEVATED_MOOD_THRESHOLD:
        insights.append(
            "Your recent emotional state shows elevated awareness - "
            "you're entering a higher frequency"
        )

    return insights


# ============================================================================
# Entry point
# ============================================================================

def analyze_patterns(records: Sequence[DailyRecord]) -> PatternResult:
    """
    Run all analyzers over a user's records.

    With fewer than 5 records no analyzer runs and the default result
    (empty lists, readiness 0, one "keep tracking" insight) is returned.

    Args:
        records: Records ordered oldest -> newest, one per date

    Returns:
        PatternResult

    Raises:
        RecordValidationError: If dates are duplicated or out of order
    """
    validate_records(records)

    if len(records) < MIN_RECORDS_FOR_ANALYSIS:
        return PatternResult.empty()

    cycles = detect_emotional_cycles(records)
    trends = analyze_category_trends(records)
    thoughts = analyze_thought_patterns(records)
    readiness = calculate_readiness_score(records)
    insights = generate_insights(records, cycles, trends)

    logger.debug(
        "Analyzed %d records: %d cycles, %d trends, %d thoughts, readiness %d",
        len(records), len(cycles), len(trends), len(thoughts), readiness,
    )

    return PatternResult(
        emotional_cycles=cycles,
        category_trends=trends,
        thought_patterns=thoughts,
        readiness_score=readiness,
        insights=insights,
    )
