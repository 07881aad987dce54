"""
Tests for the REST API (awareness/api).

Tests:
- Health checks (root and /api/v1)
- Pattern analysis endpoint (gate, full result, validation)
- Level progress and advance endpoints
- Coach endpoints with fallback and mocked generation
- Error envelopes (422 validation, 404 unknown route)
- Production mode: wildcard CORS rejection, docs disabled
"""

from __future__ import annotations

import inspect
import json
from datetime import date, timedelta
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from awareness.api import create_app
from awareness.api.routes import analyze, level_advance, level_progress
from awareness.lib.exceptions import ConfigurationError
from awareness.services.coach import ConsciousnessCoach


def _records(count: int, emotions: list[str] | str = "neutral", **extra: Any) -> list[dict[str, Any]]:
    """Wire-shaped records on consecutive days."""
    start = date(2026, 1, 1)
    return [
        {
            "date": (start + timedelta(days=i)).isoformat(),
            "emotionTag": emotions[i] if isinstance(emotions, list) else emotions,
            **extra,
        }
        for i in range(count)
    ]


@pytest.fixture()
def client() -> TestClient:
    """Client for an app whose coach has no generation service."""
    return TestClient(create_app(coach=ConsciousnessCoach(client=None)))


# =============================================================================
# Health
# =============================================================================


class TestHealth:
    """Tests for health endpoints."""

    def test_root_health(self, client: TestClient) -> None:
        """Test root health check returns plain status."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_api_health(self, client: TestClient) -> None:
        """Test /api/v1/health uses the envelope."""
        response = client.get("/api/v1/health")
        assert response.json() == {"success": True, "data": {"status": "ok"}, "error": None}


# =============================================================================
# Pattern analysis
# =============================================================================


class TestPatternAnalysis:
    """Tests for POST /api/v1/patterns/analysis."""

    def test_gate_returns_default_result(self, client: TestClient) -> None:
        """Test fewer than 5 records gives the keep-tracking result."""
        response = client.post("/api/v1/patterns/analysis", json={"records": _records(4)})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["readinessScore"] == 0
        assert data["insights"] == ["Keep tracking daily to unlock pattern insights"]

    def test_cycles_in_payload(self, client: TestClient) -> None:
        """Test a repeating triad shows up with camelCase keys."""
        emotions = ["low", "neutral", "elevated", "low", "neutral", "elevated", "peak"]
        response = client.post(
            "/api/v1/patterns/analysis", json={"records": _records(7, emotions)},
        )

        cycle = response.json()["data"]["emotionalCycles"][0]
        assert cycle["pattern"] == "low → neutral → elevated"
        assert cycle["frequency"] == 2
        assert cycle["lastOccurrence"] == "2026-01-04"
        assert cycle["confidence"] == pytest.approx(200 / 7)

    def test_score_out_of_range_rejected(self, client: TestClient) -> None:
        """Test scores must be 1-10."""
        records = _records(5, categories={"health": 11})
        response = client.post("/api/v1/patterns/analysis", json={"records": records})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert body["error"]["details"]["errors"]

    @pytest.mark.parametrize("score", [True, "7", 7.5])
    def test_non_integer_score_rejected(self, client: TestClient, score: Any) -> None:
        """Test booleans, numeric strings and floats are not coerced into scores."""
        records = _records(5, thoughts={"focus": score})
        response = client.post("/api/v1/patterns/analysis", json={"records": records})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_engine_handlers_run_in_threadpool(self) -> None:
        """Test CPU-bound handlers are sync so FastAPI keeps them off the event loop."""
        for handler in (analyze, level_progress, level_advance):
            assert not inspect.iscoroutinefunction(handler)

    def test_missing_emotion_tag_rejected(self, client: TestClient) -> None:
        """Test every record needs an emotion tag."""
        response = client.post(
            "/api/v1/patterns/analysis", json={"records": [{"date": "2026-01-01"}]},
        )
        assert response.status_code == 422

    def test_out_of_order_dates_rejected(self, client: TestClient) -> None:
        """Test engine validation maps to a 422 envelope."""
        records = list(reversed(_records(5)))
        response = client.post("/api/v1/patterns/analysis", json={"records": records})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "out-of-order" in error["message"]


# =============================================================================
# Level progress and advance
# =============================================================================


class TestLevel:
    """Tests for the level endpoints."""

    def test_progress(self, client: TestClient) -> None:
        """Test progress snapshot for 7 records."""
        emotions = ["low", "neutral", "elevated", "high", "peak", "low", "high"]
        response = client.post(
            "/api/v1/level/progress",
            json={"records": _records(7, emotions), "currentLevel": 1},
        )

        data = response.json()["data"]
        assert data["entriesCompleted"] == 7
        assert data["achievements"] == ["Observer Foundation"]
        assert data["nextLevelRequirements"]["entriesNeeded"] == 14

    def test_level_out_of_range_rejected(self, client: TestClient) -> None:
        """Test currentLevel must be 1-5."""
        response = client.post("/api/v1/level/progress", json={"records": [], "currentLevel": 6})
        assert response.status_code == 422

    def test_advance(self, client: TestClient) -> None:
        """Test 21 repeating records advance level 1 to 2."""
        response = client.post(
            "/api/v1/level/advance", json={"records": _records(21), "currentLevel": 1},
        )

        data = response.json()["data"]
        assert data["level"] == 2
        assert data["advanced"] is True
        assert data["progress"]["currentLevel"] == 1

    def test_no_advance(self, client: TestClient) -> None:
        """Test unmet requirements keep the level."""
        response = client.post(
            "/api/v1/level/advance", json={"records": _records(3), "currentLevel": 2},
        )

        data = response.json()["data"]
        assert data["level"] == 2
        assert data["advanced"] is False


# =============================================================================
# Coach
# =============================================================================


class TestCoach:
    """Tests for the coach endpoints."""

    def test_query_falls_back_without_generation(self, client: TestClient) -> None:
        """Test fallback guidance is served when generation is unavailable."""
        response = client.post(
            "/api/v1/coach/query",
            json={"records": _records(5), "query": "How do I raise my frequency?"},
        )

        data = response.json()["data"]
        assert data["source"] == "fallback"
        assert "readiness score of 70%" in data["insight"]
        assert len(data["nextSteps"]) == 2

    def test_query_requires_text(self, client: TestClient) -> None:
        """Test empty queries are rejected."""
        response = client.post("/api/v1/coach/query", json={"records": [], "query": ""})
        assert response.status_code == 422

    def test_query_with_generation(self) -> None:
        """Test generated guidance is passed through."""
        payload = {
            "insight": "Your cycles are shortening",
            "guidance": ["a", "b", "c"],
            "nextSteps": ["d", "e"],
            "frequencyShift": "I AM steady.",
        }
        anthropic_client = MagicMock()
        anthropic_client.messages.create = AsyncMock(
            return_value=SimpleNamespace(
                content=[SimpleNamespace(type="text", text=json.dumps(payload))],
            ),
        )
        client = TestClient(create_app(coach=ConsciousnessCoach(client=anthropic_client)))

        response = client.post(
            "/api/v1/coach/query",
            json={
                "records": _records(5),
                "query": "What changed?",
                "config": {"currentLevel": 3, "categories": ["health"]},
            },
        )

        data = response.json()["data"]
        assert data["source"] == "generated"
        assert data["insight"] == "Your cycles are shortening"
        prompt = anthropic_client.messages.create.await_args.kwargs["messages"][0]["content"]
        assert "Current Level: 3 (Shifter)" in prompt

    def test_insights_fall_back(self, client: TestClient) -> None:
        """Test level insights fall back to templates."""
        response = client.post(
            "/api/v1/coach/insights", json={"records": _records(5), "currentLevel": 2},
        )

        insights = response.json()["data"]["insights"]
        assert insights[0] == "At Level 2, you're detecting patterns"


# =============================================================================
# App factory
# =============================================================================


class TestCreateApp:
    """Tests for create_app()."""

    def test_unknown_route_uses_envelope(self, client: TestClient) -> None:
        """Test 404s are wrapped with NOT_FOUND."""
        response = client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_production_rejects_wildcard_cors(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test wildcard origins are refused in production."""
        monkeypatch.setenv("AWARENESS_ENVIRONMENT", "production")
        monkeypatch.setenv("AWARENESS_CORS_ORIGINS", "*")

        with pytest.raises(ConfigurationError):
            create_app(coach=ConsciousnessCoach(client=None))

    def test_production_disables_docs(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test /docs is not served in production."""
        monkeypatch.setenv("AWARENESS_ENVIRONMENT", "production")
        monkeypatch.delenv("AWARENESS_CORS_ORIGINS", raising=False)

        client = TestClient(create_app(coach=ConsciousnessCoach(client=None)))
        assert client.get("/docs").status_code == 404

    def test_cors_headers_for_configured_origin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test configured origins receive CORS headers."""
        monkeypatch.setenv("AWARENESS_CORS_ORIGINS", "https://app.example.com")

        client = TestClient(create_app(coach=ConsciousnessCoach(client=None)))
        response = client.get("/health", headers={"Origin": "https://app.example.com"})

        assert response.headers["access-control-allow-origin"] == "https://app.example.com"
