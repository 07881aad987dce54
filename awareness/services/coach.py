"""
Consciousness Coach for the Awareness Engine.

Turns a PatternResult and the user's records into personal guidance by
prompting a text-generation service (Anthropic Messages API) and parsing
its JSON reply.

2-tier fallback:
1. Generated (structured JSON from the generation service)
2. Fallback (deterministic templates keyed on query keywords)

Generation errors never reach the user: a failed call, a missing API key
or a malformed reply all fall through to tier 2.

Usage:
    coach = ConsciousnessCoach()
    guidance = await coach.generate_guidance(query, records, patterns, config)
    insights = await coach.generate_level_insights(records, patterns, level=2)
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from awareness.config.analysis import get_level_title
from awareness.lib.exceptions import ExternalServiceError, SerializationError
from awareness.models.patterns import PatternResult
from awareness.models.records import DailyRecord, UserConfig, mood_value

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

JOURNAL_THEME_WORDS: frozenset[str] = frozenset({
    "grateful", "stress", "anxiety", "happy", "progress",
    "challenge", "growth", "fear", "excited", "peaceful",
})

COACH_FRAMEWORK = """
You are an AI Consciousness Coach specializing in awareness and reality creation.

AWARENESS LEVELS:
- Level 1 (Observer): Learning to watch reality without reactive judgment
- Level 2 (Detector): Recognizing unconscious patterns and loops
- Level 3 (Shifter): Breaking old programming and identity structures
- Level 4 (Aligner): Tuning into higher frequencies and future self
- Level 5 (Creator): Conscious reality architect

GUIDANCE PRINCIPLES:
- Never give generic advice. Always reference their specific data patterns.
- Focus on identity shifts over behavior changes
- Address resistance as natural part of expansion, not failure
- Guide toward embodied changes, not just mental shifts
"""

COACH_SYSTEM_PROMPT = (
    "You are a consciousness coach. Always respond with practical, "
    "data-driven insights in valid JSON format."
)


class GuidanceSource(StrEnum):
    """Which tier produced the guidance."""

    GENERATED = "generated"
    FALLBACK = "fallback"


@dataclass
class CoachingGuidance:
    """Structured guidance returned to the user."""

    insight: str
    guidance: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)
    frequency_shift: str = ""
    source: GuidanceSource = GuidanceSource.FALLBACK

    @classmethod
    def from_payload(cls, payload: Any) -> CoachingGuidance:
        """
        Build guidance from the generation service's JSON object.

        Raises:
            SerializationError: If required fields are missing or mistyped
        """
        if not isinstance(payload, dict):
            raise SerializationError("Guidance payload is not a JSON object")

        insight = payload.get("insight")
        guidance = payload.get("guidance")
        next_steps = payload.get("nextSteps")
        frequency_shift = payload.get("frequencyShift")
        if not isinstance(insight, str) or not isinstance(frequency_shift, str):
            raise SerializationError("Guidance payload is missing insight or frequencyShift")
        if not _is_str_list(guidance) or not _is_str_list(next_steps):
            raise SerializationError("Guidance payload lists are malformed")

        return cls(
            insight=insight,
            guidance=guidance,
            next_steps=next_steps,
            frequency_shift=frequency_shift,
            source=GuidanceSource.GENERATED,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "insight": self.insight,
            "guidance": list(self.guidance),
            "nextSteps": list(self.next_steps),
            "frequencyShift": self.frequency_shift,
            "source": self.source.value,
        }


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def parse_json_reply(text: str) -> Any:
    """
    Decode a JSON reply, tolerating markdown code fences around it.

    Raises:
        SerializationError: If the text is not valid JSON
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    try:
        return json.loads(cleaned.strip())
    except json.JSONDecodeError as e:
        raise SerializationError(f"Reply is not valid JSON: {e}") from e


# ============================================================================
# Context builders
# ============================================================================

def get_emotional_trend(records: Sequence[DailyRecord]) -> str:
    """
    Direction of mood over the given records.

    Compares the last 3 records' mean mood with the mean of the records
    before them; a difference above 0.5 is a move.

    Returns:
        "ascending", "descending", "stable" or "insufficient data"
    """
    if len(records) < 3:
        return "insufficient data"

    moods = [mood_value(record.emotion_tag) for record in records]
    recent = sum(moods[-3:]) / 3
    earlier = moods[:-3]
    older = sum(earlier) / max(len(earlier), 1)

    if recent > older + 0.5:
        return "ascending"
    if recent < older - 0.5:
        return "descending"
    return "stable"


def _top_labels(score_maps: Sequence[dict[str, Any]], limit: int = 3) -> list[str]:
    collected: dict[str, list[float]] = {}
    for scores in score_maps:
        for label, value in scores.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            collected.setdefault(label, []).append(float(value))

    averages = [(label, sum(values) / len(values)) for label, values in collected.items()]
    averages.sort(key=lambda item: item[1], reverse=True)
    return [label for label, _ in averages[:limit]]


def get_dominant_categories(records: Sequence[DailyRecord]) -> list[str]:
    """Top 3 categories by mean score."""
    return _top_labels([dict(record.categories) for record in records])


def get_dominant_thoughts(records: Sequence[DailyRecord]) -> list[str]:
    """Top 3 thoughts by mean score."""
    return _top_labels([dict(record.thoughts) for record in records])


def extract_journal_themes(records: Sequence[DailyRecord]) -> str:
    """Distinct theme keywords from substantial journal entries (first 5)."""
    themes: dict[str, None] = {}
    for record in records:
        if len(record.journal_entry) <= 20:
            continue
        for word in record.journal_entry.lower().split(" "):
            if word in JOURNAL_THEME_WORDS:
                themes.setdefault(word, None)

    return ", ".join(list(themes)[:5]) or "no significant themes detected"


def build_user_context(
    records: Sequence[DailyRecord],
    patterns: PatternResult,
    config: UserConfig,
) -> str:
    """Prompt context for a coaching query."""
    recent = records[-7:]
    cycle_lines = [
        f"- Emotional Cycle: {c.pattern} ({c.frequency} times, {c.confidence:.0f}% confidence)"
        for c in patterns.emotional_cycles
    ]
    trend_lines = [
        f"- Category Trend: {t.category} is {t.trend.value} ({t.change}% change)"
        for t in patterns.category_trends
    ]
    detected = "\n".join(cycle_lines + trend_lines) or "- none yet"

    return (
        f"Current Level: {config.current_level} ({get_level_title(config.current_level)})\n"
        f"Total Entries: {len(records)}\n"
        f"Recent Emotional Trend: {get_emotional_trend(recent)}\n"
        f"Patterns Identified: {patterns.patterns_identified}\n"
        f"Readiness Score: {patterns.readiness_score}%\n\n"
        f"DOMINANT LIFE CATEGORIES: {', '.join(get_dominant_categories(records))}\n"
        f"DOMINANT THOUGHT PATTERNS: {', '.join(get_dominant_thoughts(records))}\n\n"
        f"DETECTED PATTERNS:\n{detected}\n\n"
        f"RECENT INSIGHTS: {' | '.join(patterns.insights)}\n\n"
        f"RECENT JOURNAL THEMES: {extract_journal_themes(recent)}\n"
    )


def build_level_context(
    records: Sequence[DailyRecord],
    patterns: PatternResult,
    level: int,
) -> str:
    """Prompt context for level insights."""
    return (
        f"Current Level: {level}\n"
        f"Total Entries: {len(records)}\n"
        f"Patterns Detected: {patterns.patterns_identified}\n"
        f"Readiness Score: {patterns.readiness_score}%\n"
        f"Recent Insights: {' | '.join(patterns.insights)}\n"
        f"Emotional Cycles: {', '.join(c.pattern for c in patterns.emotional_cycles)}\n"
        "Category Trends: "
        + ", ".join(f"{t.category}: {t.trend.value}" for t in patterns.category_trends)
        + "\n"
    )


# ============================================================================
# Fallback templates
# ============================================================================

def fallback_guidance(query: str, patterns: PatternResult) -> CoachingGuidance:
    """Deterministic guidance chosen by keywords in the query."""
    query_lower = query.lower()

    if "pattern" in query_lower or "cycle" in query_lower:
        return CoachingGuidance(
            insight=(
                "You're developing pattern recognition skills. Your awareness data shows "
                f"{len(patterns.emotional_cycles)} emotional cycles and "
                f"{len(patterns.category_trends)} category trends emerging."
            ),
            guidance=[
                "Patterns are your subconscious mind's way of maintaining familiar reality",
                "The observer effect means simply noticing patterns begins to shift them",
                "Focus on witnessing without judgment - this creates space for change",
            ],
            next_steps=[
                "Track which patterns feel most automatic in your daily life",
                "Notice the gap between trigger and reaction - that's your power point",
            ],
            frequency_shift=(
                "I AM becoming aware of my patterns while remaining centered "
                "in my observer consciousness."
            ),
        )

    if any(word in query_lower for word in ("frequency", "shift", "vibration")):
        return CoachingGuidance(
            insight=(
                "Frequency shifting happens through embodied change, not just mental "
                f"understanding. Your readiness score of {patterns.readiness_score}% "
                "shows your current alignment."
            ),
            guidance=[
                "Your frequency is determined by your dominant emotional and mental states",
                "The field responds to what you ARE, not what you want",
                "Shift frequency by embodying the identity that already has your desired reality",
            ],
            next_steps=[
                "Practice feeling states of your desired reality for 10 minutes daily",
                "Notice when you slip back into old frequency patterns",
            ],
            frequency_shift="I AM already the version of myself living my desired reality.",
        )

    if any(word in query_lower for word in ("block", "stuck", "resistance")):
        return CoachingGuidance(
            insight=(
                "Blocks are actually protective mechanisms from your subconscious. "
                "They reveal where you need the most growth and healing."
            ),
            guidance=[
                "Resistance points to your expansion edges",
                "Your subconscious creates blocks to keep you safe in familiar territory",
                "Approach blocks with curiosity rather than force",
            ],
            next_steps=[
                "Ask: 'What is this block trying to protect me from?'",
                "Practice self-compassion when encountering resistance",
            ],
            frequency_shift="I AM grateful for my blocks as they show me where I'm ready to expand.",
        )

    return CoachingGuidance(
        insight=(
            "Your consciousness journey is unique and unfolding. With "
            f"{patterns.readiness_score}% readiness, you're building the foundation "
            "for deeper awareness."
        ),
        guidance=[
            "Reality is shaped by your level of consciousness and observation",
            "Every moment offers an opportunity to choose conscious response over automatic reaction",
            "Your external world mirrors your internal frequency and beliefs",
        ],
        next_steps=[
            "Continue daily awareness tracking to strengthen your observer muscle",
            "Notice synchronicities and signs that confirm your growing awareness",
        ],
        frequency_shift="I AM the conscious creator of my reality, awakening to my infinite potential.",
    )


_LEVEL_FOCUS: dict[int, str] = {
    1: "building awareness foundation",
    2: "detecting patterns",
    3: "shifting old programming",
}


def fallback_level_insights(level: int, patterns: PatternResult) -> list[str]:
    """Deterministic level insights."""
    focus = _LEVEL_FOCUS.get(level, "aligning with higher frequencies")
    development = "strong development" if patterns.readiness_score > 70 else "growing awareness"
    insights = [
        f"At Level {level}, you're {focus}",
        f"Your readiness score of {patterns.readiness_score}% shows {development}",
        (
            "Focus on consistency in tracking - you've identified "
            f"{patterns.patterns_identified} patterns so far"
        ),
    ]
    if patterns.insights:
        insights.append(f"Key insight: {patterns.insights[0]}")
    return insights


# ============================================================================
# Coach
# ============================================================================

class ConsciousnessCoach:
    """
    Generation-backed coach with deterministic fallback.

    Args:
        client: Optional AsyncAnthropic-compatible client (created from
            ANTHROPIC_API_KEY when omitted; None disables generation)
        model: Model name (AWARENESS_COACH_MODEL or DEFAULT_MODEL)
    """

    def __init__(self, client: Any | None = None, model: str | None = None) -> None:
        self.model = model or os.getenv("AWARENESS_COACH_MODEL", DEFAULT_MODEL)
        self._client = client if client is not None else self._create_client()

    @staticmethod
    def _create_client() -> Any | None:
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            logger.info("ANTHROPIC_API_KEY not configured, coach uses fallback guidance")
            return None

        import anthropic

        return anthropic.AsyncAnthropic(api_key=api_key)

    @property
    def generation_enabled(self) -> bool:
        """Whether a generation client is available."""
        return self._client is not None

    async def _generate(self, prompt: str, max_tokens: int, system: str | None = None) -> str:
        """
        Send one prompt and return the reply text.

        Raises:
            ExternalServiceError: If generation is disabled, the call fails
                or the reply has no text block
        """
        if self._client is None:
            raise ExternalServiceError("Generation service not configured")

        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            response = await self._client.messages.create(**kwargs)
        except Exception as e:
            raise ExternalServiceError(f"Generation call failed: {e}") from e

        content = response.content[0] if response.content else None
        if content is None or getattr(content, "type", None) != "text":
            raise ExternalServiceError("Invalid response format")
        return content.text

    async def generate_guidance(
        self,
        query: str,
        records: Sequence[DailyRecord],
        patterns: PatternResult,
        config: UserConfig,
    ) -> CoachingGuidance:
        """
        Personal guidance for a user's question.

        Args:
            query: The user's question
            records: The user's records, oldest first
            patterns: analyze_patterns() result for those records
            config: The user's configuration

        Returns:
            Generated guidance, or keyword-based fallback guidance
        """
        prompt = (
            f"{COACH_FRAMEWORK}\n"
            f"USER CONTEXT:\n{build_user_context(records, patterns, config)}\n"
            f'USER QUERY: "{query}"\n\n'
            "Based on their awareness data and level, provide:\n"
            "1. A deep insight about their current patterns\n"
            "2. Specific guidance steps\n"
            "3. Next practical steps for their level progression\n"
            "4. A frequency shift statement they can embody\n\n"
            "Respond in JSON format:\n"
            '{"insight": "...", "guidance": ["...", "...", "..."], '
            '"nextSteps": ["...", "..."], "frequencyShift": "I AM ..."}'
        )

        try:
            reply = await self._generate(prompt, max_tokens=1500, system=COACH_SYSTEM_PROMPT)
            return CoachingGuidance.from_payload(parse_json_reply(reply))
        except (ExternalServiceError, SerializationError) as e:
            if self.generation_enabled:
                logger.warning("Coach guidance fell back to templates: %s", e)
            return fallback_guidance(query, patterns)

    async def generate_level_insights(
        self,
        records: Sequence[DailyRecord],
        patterns: PatternResult,
        level: int,
    ) -> list[str]:
        """
        3-5 insights about the user's level development.

        Returns:
            Generated insight strings, or deterministic fallback insights
        """
        prompt = (
            f"{COACH_FRAMEWORK}\n"
            f"USER CONTEXT:\n{build_level_context(records, patterns, level)}\n"
            "Generate 3-5 specific insights about their development and what they "
            "need to focus on next for their level progression. Reference their "
            "actual data patterns.\n\n"
            'Respond as a JSON array of insight strings: ["insight1", "insight2", "insight3"]'
        )

        try:
            reply = await self._generate(prompt, max_tokens=800)
            insights = parse_json_reply(reply)
        except (ExternalServiceError, SerializationError) as e:
            if self.generation_enabled:
                logger.warning("Coach level insights fell back to templates: %s", e)
            return fallback_level_insights(level, patterns)

        if not _is_str_list(insights) or not insights:
            logger.warning("Coach level insights reply was not a list of strings")
            return fallback_level_insights(level, patterns)
        return insights
