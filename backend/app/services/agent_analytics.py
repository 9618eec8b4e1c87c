"""Per-agent call statistics, performance tiers and rankings."""

from collections import defaultdict
from datetime import UTC, datetime
from typing import Literal, Optional

from ..schemas.agents import AgentRankings, AgentStats, PerformanceTier, RecentCall, TierDistribution
from ..schemas.transcripts import TranscriptRecord
from .metrics import percent, round_int

RANKING_MIN_CALLS = 5
RANKING_SIZE = 15
RECENT_CALLS = 10
DISPLAY_MIN_CALLS = 20

UNKNOWN_AGENT = "Unknown"


def performance_tier(score: float) -> PerformanceTier:
    if score >= 30:
        return "top"
    if score >= 15:
        return "good"
    if score >= 0:
        return "average"
    if score >= -30:
        return "needs-improvement"
    return "critical"


def _agent_sentiment(record: TranscriptRecord) -> str:
    if record.analysis and record.analysis.agent_sentiment:
        return record.analysis.agent_sentiment
    return record.basic_sentiment or "neutral"


def _customer_sentiment(record: TranscriptRecord) -> str:
    if record.analysis and record.analysis.customer_sentiment:
        return record.analysis.customer_sentiment
    return record.basic_sentiment or "neutral"


def _rates(sentiments: list[str]) -> tuple[int, int, int, int]:
    """(positive %, negative %, neutral %, score) for a list of labels."""
    count = len(sentiments)
    positive = sum(1 for s in sentiments if s == "positive")
    negative = sum(1 for s in sentiments if s == "negative")
    neutral = count - positive - negative
    score = round_int((positive - negative) / count * 100)
    return percent(positive, count), percent(negative, count), percent(neutral, count), score


def _recent_call(record: TranscriptRecord) -> RecentCall:
    return RecentCall(
        id=record.id,
        date=record.call_start.isoformat() if record.call_start else None,
        duration=record.duration_seconds or 0,
        sentiment=_agent_sentiment(record),
        summary=record.analysis.summary if record.analysis else None,
    )


def build_agent_stats(transcripts: list[TranscriptRecord]) -> list[AgentStats]:
    """Aggregate transcripts per agent; agent sentiment drives score and tier."""
    groups: dict[str, list[TranscriptRecord]] = defaultdict(list)
    for t in transcripts:
        groups[t.agent_name or UNKNOWN_AGENT].append(t)

    oldest = datetime.min.replace(tzinfo=UTC)
    stats: list[AgentStats] = []
    for name, calls in groups.items():
        count = len(calls)
        a_pos, a_neg, a_neu, a_score = _rates([_agent_sentiment(c) for c in calls])
        c_pos, c_neg, c_neu, c_score = _rates([_customer_sentiment(c) for c in calls])
        recent = sorted(calls, key=lambda c: c.call_start or oldest, reverse=True)[:RECENT_CALLS]
        first = calls[0]

        stats.append(AgentStats(
            name=name,
            email=first.agent_email or "",
            department=first.department or "",
            call_count=count,
            avg_duration=round_int(sum(c.duration_seconds or 0 for c in calls) / count),
            agent_positive_rate=a_pos,
            agent_negative_rate=a_neg,
            agent_neutral_rate=a_neu,
            agent_sentiment_score=a_score,
            customer_positive_rate=c_pos,
            customer_negative_rate=c_neg,
            customer_neutral_rate=c_neu,
            customer_sentiment_score=c_score,
            positive_rate=a_pos,
            negative_rate=a_neg,
            neutral_rate=a_neu,
            sentiment_score=a_score,
            performance_tier=performance_tier(a_score),
            recent_calls=[_recent_call(c) for c in recent],
        ))
    return stats


def build_agent_rankings(stats: list[AgentStats], total_calls: int) -> AgentRankings:
    by_volume = sorted(stats, key=lambda a: a.call_count, reverse=True)
    eligible = [a for a in stats if a.call_count >= RANKING_MIN_CALLS]
    tiers = [a.performance_tier for a in stats]

    return AgentRankings(
        total_agents=len(stats),
        total_calls=total_calls,
        top_performers=sorted(eligible, key=lambda a: a.sentiment_score, reverse=True)[:RANKING_SIZE],
        needs_improvement=sorted(eligible, key=lambda a: a.sentiment_score)[:RANKING_SIZE],
        highest_volume=by_volume[:RANKING_SIZE],
        all_agents=by_volume,
        distribution=TierDistribution(
            top=tiers.count("top"),
            good=tiers.count("good"),
            average=tiers.count("average"),
            needs_improvement=tiers.count("needs-improvement"),
            critical=tiers.count("critical"),
        ),
    )


def search_agents(
    stats: list[AgentStats],
    term: Optional[str] = None,
    sort_by: Literal["performance", "calls"] = "performance",
    min_calls: int = DISPLAY_MIN_CALLS,
    tier: Optional[PerformanceTier] = None,
) -> list[AgentStats]:
    """Agents with enough calls to be meaningful, filtered by name or department and tier."""
    agents = [a for a in stats if a.call_count >= min_calls]
    if tier:
        agents = [a for a in agents if a.performance_tier == tier]
    if term:
        needle = term.lower()
        agents = [
            a for a in agents
            if needle in a.name.lower() or needle in (a.department or "").lower()
        ]
    if sort_by == "performance":
        return sorted(agents, key=lambda a: a.sentiment_score, reverse=True)
    return sorted(agents, key=lambda a: a.call_count, reverse=True)
