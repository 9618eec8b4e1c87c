"""Tests for agent API routes using FastAPI TestClient."""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from app.core.llm import LLMNotConfiguredError
from app.data import MOCK_TRANSCRIPT_ROWS
from app.main import app
from app.schemas.agents import AgentMetrics, AgentProfile
from app.schemas.transcripts import TranscriptRecord
from app.services.data_source import DataSourceError

client = TestClient(app)

TRANSCRIPTS = [TranscriptRecord.model_validate(r) for r in MOCK_TRANSCRIPT_ROWS]

AGENT_STATS = {
    "name": "Maria Rivera",
    "email": "mrivera@example.com",
    "department": "Customer Service",
    "call_count": 40,
    "avg_duration": 606,
    "positive_rate": 70,
    "negative_rate": 10,
    "neutral_rate": 20,
    "sentiment_score": 60,
    "recent_calls": [],
}


def _profile(ai_generated: bool = True) -> AgentProfile:
    return AgentProfile(
        name="Maria Rivera",
        email="mrivera@example.com",
        department="Customer Service",
        metrics=AgentMetrics(
            total_calls=40,
            avg_call_duration=606,
            positive_rate=70,
            negative_rate=10,
            neutral_rate=20,
            sentiment_score=60,
            performance_tier="top",
        ),
        strengths=["Clear explanations"],
        areas_for_improvement=["Shorter holds"],
        recommendations=["Use the escrow FAQ"],
        overall_assessment="Strong performer.",
        recent_calls=[],
        ai_generated=ai_generated,
    )


# ── GET /api/agents ──────────────────────────────────────────────────


class TestGetAgents:
    @patch("app.api.agent_routes.load_transcripts")
    def test_default_minimum_filters_small_samples(self, mock_load):
        mock_load.return_value = TRANSCRIPTS
        resp = client.get("/api/agents")
        assert resp.status_code == 200
        assert resp.json() == []

    @patch("app.api.agent_routes.load_transcripts")
    def test_search_and_tier(self, mock_load):
        mock_load.return_value = TRANSCRIPTS
        resp = client.get("/api/agents?min_calls=1&tier=top&sort_by=calls")
        assert resp.status_code == 200
        assert [a["name"] for a in resp.json()] == ["Maria Rivera", "David Chen"]

    @patch("app.api.agent_routes.load_transcripts")
    def test_search_by_department(self, mock_load):
        mock_load.return_value = TRANSCRIPTS
        resp = client.get("/api/agents?min_calls=1&search=loss")
        assert resp.status_code == 200
        body = resp.json()
        assert [a["name"] for a in body] == ["Grace Okafor"]
        assert body[0]["performance_tier"] == "critical"

    def test_invalid_tier_is_rejected(self):
        resp = client.get("/api/agents?tier=legendary")
        assert resp.status_code == 422

    @patch("app.api.agent_routes.load_transcripts")
    def test_missing_data_returns_503(self, mock_load):
        mock_load.side_effect = DataSourceError("unavailable")
        resp = client.get("/api/agents")
        assert resp.status_code == 503


# ── POST /api/agent-profile ──────────────────────────────────────────


class TestPostAgentProfile:
    @patch("app.api.agent_routes.generate_agent_profile", new_callable=AsyncMock)
    def test_success(self, mock_generate):
        mock_generate.return_value = _profile()
        resp = client.post("/api/agent-profile", json={"agent_stats": AGENT_STATS})
        assert resp.status_code == 200
        profile = resp.json()["profile"]
        assert profile["metrics"]["performance_tier"] == "top"
        assert profile["ai_generated"] is True
        sent = mock_generate.call_args[0][0]
        assert sent.name == "Maria Rivera"
        assert sent.call_count == 40

    @patch("app.api.agent_routes.generate_agent_profile", new_callable=AsyncMock)
    def test_fallback_profile(self, mock_generate):
        mock_generate.return_value = _profile(ai_generated=False)
        resp = client.post("/api/agent-profile", json={"agent_stats": AGENT_STATS})
        assert resp.status_code == 200
        assert resp.json()["profile"]["ai_generated"] is False

    def test_missing_agent_stats_returns_422(self):
        resp = client.post("/api/agent-profile", json={})
        assert resp.status_code == 422

    def test_blank_name_returns_422(self):
        resp = client.post("/api/agent-profile", json={"agent_stats": {**AGENT_STATS, "name": ""}})
        assert resp.status_code == 422

    @patch("app.api.agent_routes.generate_agent_profile", new_callable=AsyncMock)
    def test_missing_api_key_returns_500(self, mock_generate):
        mock_generate.side_effect = LLMNotConfiguredError("LLM API key not configured")
        resp = client.post("/api/agent-profile", json={"agent_stats": AGENT_STATS})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "LLM API key not configured"

    @patch("app.api.agent_routes.generate_agent_profile", new_callable=AsyncMock)
    def test_unexpected_error_returns_500(self, mock_generate):
        mock_generate.side_effect = RuntimeError("boom")
        resp = client.post("/api/agent-profile", json={"agent_stats": AGENT_STATS})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to generate agent profile"
