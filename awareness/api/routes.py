"""
REST API Routes for the Awareness Engine.

All responses use the envelope from awareness.api.schemas. Records are
sent in the request body; the API stores nothing. Engine calls are CPU-bound
and run in the threadpool, never on the event loop.

Endpoints (all under /api/v1 prefix):
- /health - Health check
- /patterns/analysis - PatternResult for a record sequence
- /level/progress - LevelProgress for records + current level
- /level/advance - Level the user should hold now
- /coach/query - Personal guidance for a question
- /coach/insights - Level development insights
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from awareness.api.dependencies import get_coach
from awareness.api.schemas import (
    CoachQueryRequest,
    LevelRequest,
    RecordsRequest,
    success_response,
)
from awareness.services.coach import ConsciousnessCoach
from awareness.services.pattern_detection import analyze_patterns
from awareness.services.progression import calculate_level_progress, check_level_advance

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


# =============================================================================
# Health
# =============================================================================


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return success_response({"status": "ok"})


# =============================================================================
# Pattern Engine Endpoints
# =============================================================================


@router.post("/patterns/analysis")
def analyze(request: RecordsRequest) -> dict[str, Any]:
    """
    Analyze a user's records.

    Returns:
        Envelope with the PatternResult payload
    """
    result = analyze_patterns(request.to_records())
    return success_response(result.to_dict())


@router.post("/level/progress")
def level_progress(request: LevelRequest) -> dict[str, Any]:
    """
    Progression snapshot for a user.

    Returns:
        Envelope with the LevelProgress payload
    """
    progress = calculate_level_progress(request.to_records(), request.current_level)
    return success_response(progress.to_dict())


@router.post("/level/advance")
def level_advance(request: LevelRequest) -> dict[str, Any]:
    """
    Level the user should hold given their records.

    The caller persists the returned level; nothing is stored here.

    Returns:
        Envelope with {"level", "advanced", "progress"}
    """
    progress = calculate_level_progress(request.to_records(), request.current_level)
    level = check_level_advance(progress)
    return success_response({
        "level": level,
        "advanced": level > progress.current_level,
        "progress": progress.to_dict(),
    })


# =============================================================================
# Coach Endpoints
# =============================================================================


@router.post("/coach/query")
async def coach_query(
    request: CoachQueryRequest,
    coach: ConsciousnessCoach = Depends(get_coach),
) -> dict[str, Any]:
    """
    Personal guidance for the user's question.

    Generation failures fall back to template guidance, so this endpoint
    only fails on invalid input.
    """
    records = request.to_records()
    patterns = await run_in_threadpool(analyze_patterns, records)
    guidance = await coach.generate_guidance(
        request.query, records, patterns, request.user_config.to_config(),
    )
    return success_response(guidance.to_dict())


@router.post("/coach/insights")
async def coach_insights(
    request: LevelRequest,
    coach: ConsciousnessCoach = Depends(get_coach),
) -> dict[str, Any]:
    """Level development insights for the user."""
    records = request.to_records()
    patterns = await run_in_threadpool(analyze_patterns, records)
    insights = await coach.generate_level_insights(records, patterns, request.current_level)
    return success_response({"insights": insights})


__all__ = ["router"]
