"""
Shared test fixtures for the Awareness Engine.

This module provides common fixtures used across all test modules:
- Environment setup (dev mode, no generation API key)
- record_factory: builds chronological DailyRecord sequences

Usage:
    All fixtures are automatically available to any test in the tests/ directory.
"""

from __future__ import annotations

import os
from datetime import date, timedelta
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# 1. Environment setup -- must run before any application imports
#    so that the coach never reaches the real generation service.
# ---------------------------------------------------------------------------

os.environ.setdefault("AWARENESS_DEV_MODE", "1")
os.environ.pop("ANTHROPIC_API_KEY", None)

from awareness.models.records import DailyRecord  # noqa: E402

START_DATE = date(2026, 1, 1)


def _pick(value: Any, index: int) -> Any:
    """Per-record value: lists are indexed, anything else is shared."""
    if isinstance(value, list):
        return value[index]
    return value


# ---------------------------------------------------------------------------
# 2. record_factory -- consecutive-day records
# ---------------------------------------------------------------------------

@pytest.fixture()
def record_factory():
    """
    Provide a function building ``count`` records on consecutive days.

    Every keyword accepts either one value shared by all records or a
    list with one value per record.

    Example usage in a test::

        def test_gate(record_factory):
            records = record_factory(4, emotions="low")
            assert len(records) == 4
    """

    def _build(
        count: int,
        *,
        emotions: Any = "neutral",
        categories: Any = None,
        thoughts: Any = None,
        identities: Any = "observer",
        journals: Any = "",
        start: date = START_DATE,
    ) -> list[DailyRecord]:
        return [
            DailyRecord(
                date=start + timedelta(days=i),
                categories=dict(_pick(categories, i) or {}),
                thoughts=dict(_pick(thoughts, i) or {}),
                emotion_tag=_pick(emotions, i),
                identity_tag=_pick(identities, i),
                journal_entry=_pick(journals, i),
            )
            for i in range(count)
        ]

    return _build


@pytest.fixture()
def complete_record_kwargs():
    """Keyword arguments for records that count as complete."""
    return {
        "categories": {"health": 7, "career": 6, "relationships": 8},
        "thoughts": {"gratitude": 7, "abundance": 6},
        "journals": "Felt grateful for the progress I made today",
    }
