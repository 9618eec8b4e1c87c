"""Pydantic models for agent performance stats, rankings and coaching profiles."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

PerformanceTier = Literal["top", "good", "average", "needs-improvement", "critical"]


class RecentCall(BaseModel):
    id: str
    date: Optional[str] = None
    duration: int = 0
    sentiment: str
    summary: Optional[str] = None


class AgentStats(BaseModel):
    """Per-agent call statistics derived from transcripts.

    Agent sentiment drives the primary score and tier; customer sentiment is
    reported alongside it. ``positive_rate``/``negative_rate``/``neutral_rate``
    and ``sentiment_score`` mirror the agent figures for older clients.
    """
    name: str = Field(min_length=1)
    email: Optional[str] = None
    department: Optional[str] = None
    call_count: int = Field(ge=0)
    avg_duration: int = 0

    agent_positive_rate: Optional[int] = None
    agent_negative_rate: Optional[int] = None
    agent_neutral_rate: Optional[int] = None
    agent_sentiment_score: Optional[int] = None

    customer_positive_rate: Optional[int] = None
    customer_negative_rate: Optional[int] = None
    customer_neutral_rate: Optional[int] = None
    customer_sentiment_score: Optional[int] = None

    positive_rate: int = 0
    negative_rate: int = 0
    neutral_rate: int = 0
    sentiment_score: int = 0

    performance_tier: Optional[PerformanceTier] = None
    recent_calls: List[RecentCall] = []


class TierDistribution(BaseModel):
    top: int = 0
    good: int = 0
    average: int = 0
    needs_improvement: int = 0
    critical: int = 0


class AgentRankings(BaseModel):
    total_agents: int
    total_calls: int
    top_performers: List[AgentStats]
    needs_improvement: List[AgentStats]
    highest_volume: List[AgentStats]
    all_agents: List[AgentStats]
    distribution: TierDistribution


class CoachingInsights(BaseModel):
    """Structured output the LLM returns for an agent coaching profile."""
    strengths: List[str] = Field(description="Two to four things the agent does well")
    areas_for_improvement: List[str] = Field(description="One to three concrete gaps")
    recommendations: List[str] = Field(description="Specific, actionable coaching steps")
    overall_assessment: str = Field(description="Two to three sentence executive summary")


class AgentMetrics(BaseModel):
    total_calls: int
    avg_call_duration: int
    positive_rate: int
    negative_rate: int
    neutral_rate: int
    sentiment_score: int
    performance_tier: PerformanceTier


class AgentProfile(BaseModel):
    name: str
    email: Optional[str] = None
    department: Optional[str] = None
    metrics: AgentMetrics
    strengths: List[str]
    areas_for_improvement: List[str]
    recommendations: List[str]
    overall_assessment: str
    recent_calls: List[RecentCall]
    ai_generated: bool = True


class AgentProfileRequest(BaseModel):
    agent_stats: AgentStats


class AgentProfileResponse(BaseModel):
    profile: AgentProfile
