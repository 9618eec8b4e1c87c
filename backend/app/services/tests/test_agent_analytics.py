"""Tests for per-agent stats, tiers and rankings in app.services.agent_analytics."""

import pytest

from app.services.agent_analytics import (
    build_agent_rankings,
    build_agent_stats,
    performance_tier,
    search_agents,
)


@pytest.fixture
def agent_stats(transcripts):
    return build_agent_stats(transcripts)


def _by_name(stats):
    return {a.name: a for a in stats}


class TestPerformanceTier:
    @pytest.mark.parametrize(
        "score, tier",
        [
            (100, "top"),
            (30, "top"),
            (29, "good"),
            (15, "good"),
            (14, "average"),
            (0, "average"),
            (-1, "needs-improvement"),
            (-30, "needs-improvement"),
            (-31, "critical"),
        ],
    )
    def test_boundaries(self, score, tier):
        assert performance_tier(score) == tier


# ── Agent stats ─────────────────────────────────────────────────────


class TestBuildAgentStats:
    def test_groups_by_agent(self, agent_stats):
        assert [a.name for a in agent_stats] == ["Maria Rivera", "Grace Okafor", "David Chen", "Unknown"]

    def test_agent_sentiment_drives_headline_score(self, agent_stats):
        maria = _by_name(agent_stats)["Maria Rivera"]
        assert maria.call_count == 5
        assert maria.avg_duration == 606
        assert (maria.agent_positive_rate, maria.agent_negative_rate, maria.agent_neutral_rate) == (80, 0, 20)
        assert maria.sentiment_score == maria.agent_sentiment_score == 80
        assert maria.positive_rate == 80
        assert maria.performance_tier == "top"

    def test_customer_rates(self, agent_stats):
        maria = _by_name(agent_stats)["Maria Rivera"]
        assert (maria.customer_positive_rate, maria.customer_negative_rate) == (60, 20)
        assert maria.customer_sentiment_score == 40

    def test_critical_agent(self, agent_stats):
        grace = _by_name(agent_stats)["Grace Okafor"]
        assert grace.sentiment_score == -50
        assert grace.performance_tier == "critical"
        assert grace.department == "Loss Mitigation"

    def test_unknown_agent_uses_basic_sentiment(self, agent_stats):
        unknown = _by_name(agent_stats)["Unknown"]
        assert unknown.sentiment_score == 0
        assert unknown.performance_tier == "average"
        assert unknown.email == ""

    def test_recent_calls_newest_first(self, agent_stats):
        recent = _by_name(agent_stats)["Maria Rivera"].recent_calls
        assert [c.id for c in recent] == ["5", "4", "3", "2", "1"]
        assert recent[0].summary == "Requested payoff quote for borrower."

    def test_recent_calls_capped(self, transcript_factory):
        calls = [transcript_factory(id=str(i)) for i in range(12)]
        assert len(build_agent_stats(calls)[0].recent_calls) == 10


# ── Rankings & search ───────────────────────────────────────────────


class TestBuildAgentRankings:
    def test_rankings(self, agent_stats):
        rankings = build_agent_rankings(agent_stats, 9)
        assert rankings.total_agents == 4
        assert rankings.total_calls == 9
        # only Maria meets the five-call minimum
        assert [a.name for a in rankings.top_performers] == ["Maria Rivera"]
        assert [a.name for a in rankings.needs_improvement] == ["Maria Rivera"]
        assert [a.name for a in rankings.highest_volume][:2] == ["Maria Rivera", "Grace Okafor"]
        assert len(rankings.all_agents) == 4

    def test_distribution(self, agent_stats):
        distribution = build_agent_rankings(agent_stats, 9).distribution
        assert distribution.model_dump() == {
            "top": 2,
            "good": 0,
            "average": 1,
            "needs_improvement": 0,
            "critical": 1,
        }


class TestSearchAgents:
    def test_default_minimum_hides_small_samples(self, agent_stats):
        assert search_agents(agent_stats) == []

    def test_sort_by_performance(self, agent_stats):
        names = [a.name for a in search_agents(agent_stats, min_calls=1)]
        assert names == ["David Chen", "Maria Rivera", "Unknown", "Grace Okafor"]

    def test_sort_by_calls(self, agent_stats):
        result = search_agents(agent_stats, sort_by="calls", min_calls=1)
        assert result[0].name == "Maria Rivera"

    def test_term_matches_department(self, agent_stats):
        assert [a.name for a in search_agents(agent_stats, "LOSS", min_calls=1)] == ["Grace Okafor"]

    def test_tier_filter(self, agent_stats):
        result = search_agents(agent_stats, min_calls=1, tier="top")
        assert [a.name for a in result] == ["David Chen", "Maria Rivera"]
