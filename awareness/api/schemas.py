"""
Pydantic Schemas for the Awareness Engine REST API.

Defines request schemas for all API endpoints and the response
envelope every endpoint returns:

    {"success": bool, "data": Any, "error": {"code", "message"} | None}
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from awareness.lib.errors import build_error_response
from awareness.models.records import DailyRecord, UserConfig

MIN_SCORE = 1
MAX_SCORE = 10

# =============================================================================
# Response Envelope
# =============================================================================


def success_response(data: Any) -> dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"success": True, "data": data, "error": None}


def error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Wrap an error code in the failure envelope."""
    return {
        "success": False,
        "data": None,
        "error": build_error_response(code, message=message, details=details),
    }


# =============================================================================
# Record Schemas
# =============================================================================


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DailyRecordIn(_CamelModel):
    """One daily self-report as sent by the client."""

    date: dt.date
    # StrictInt: JSON true/false and numeric strings are rejected, not coerced
    categories: dict[str, StrictInt] = Field(default_factory=dict)
    thoughts: dict[str, StrictInt] = Field(default_factory=dict)
    emotion_tag: str = Field(..., alias="emotionTag", min_length=1, max_length=50)
    identity_tag: str = Field(default="", alias="identityTag", max_length=200)
    journal_entry: str = Field(default="", alias="journalEntry", max_length=10000)

    @field_validator("categories", "thoughts")
    @classmethod
    def validate_scores(cls, v: dict[str, int]) -> dict[str, int]:
        """Scores must be within 1-10."""
        for label, score in v.items():
            if not MIN_SCORE <= score <= MAX_SCORE:
                raise ValueError(
                    f"score for '{label}' must be between {MIN_SCORE} and {MAX_SCORE}"
                )
        return v

    def to_record(self) -> DailyRecord:
        """Convert to the engine's record type."""
        return DailyRecord(
            date=self.date,
            categories=dict(self.categories),
            thoughts=dict(self.thoughts),
            emotion_tag=self.emotion_tag,
            identity_tag=self.identity_tag,
            journal_entry=self.journal_entry,
        )


class RecordsRequest(_CamelModel):
    """A user's records, oldest first."""

    records: list[DailyRecordIn] = Field(default_factory=list, max_length=3660)

    def to_records(self) -> list[DailyRecord]:
        """Convert all records."""
        return [record.to_record() for record in self.records]


class LevelRequest(RecordsRequest):
    """Records plus the user's stored level."""

    current_level: int = Field(default=1, alias="currentLevel", ge=1, le=5)


class UserConfigIn(_CamelModel):
    """The parts of the user's configuration the coach reads."""

    current_level: int = Field(default=1, alias="currentLevel", ge=1, le=5)
    level_progress: dict[str, Any] = Field(default_factory=dict, alias="levelProgress")
    categories: list[str] = Field(default_factory=list)
    thoughts: list[str] = Field(default_factory=list)

    def to_config(self) -> UserConfig:
        """Convert to the engine's config type."""
        return UserConfig(
            current_level=self.current_level,
            level_progress=dict(self.level_progress),
            categories=list(self.categories),
            thoughts=list(self.thoughts),
        )


class CoachQueryRequest(RecordsRequest):
    """A question for the coach, with the data it should reference."""

    query: str = Field(..., min_length=1, max_length=4000)
    user_config: UserConfigIn = Field(default_factory=UserConfigIn, alias="config")


__all__ = [
    "success_response",
    "error_response",
    "DailyRecordIn",
    "RecordsRequest",
    "LevelRequest",
    "UserConfigIn",
    "CoachQueryRequest",
]
