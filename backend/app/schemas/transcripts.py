"""Pydantic models for call transcripts, their analysis and transcript analytics."""

from datetime import UTC, date as date_type, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

Role = Literal["agent", "customer"]
Sentiment = Literal["positive", "negative", "neutral", "mixed"]
DayName = Literal["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class ConversationMessage(BaseModel):
    """A single speaker turn in a call transcript."""
    role: Role
    text: str
    timestamp: Optional[str] = None


class TranscriptAnalysis(BaseModel):
    """AI analysis attached to a transcript (one row per analysed call)."""
    agent_sentiment: Optional[str] = None
    agent_sentiment_score: Optional[float] = None
    customer_sentiment: Optional[str] = None
    customer_sentiment_score: Optional[float] = None
    ai_discovered_topic: Optional[str] = None
    ai_discovered_subcategory: Optional[str] = None
    topic_confidence: Optional[float] = None
    summary: Optional[str] = None
    key_issue: Optional[str] = None
    escalation_risk: Optional[str] = None
    agent_performance: Optional[float] = None

    model_config = {"extra": "ignore"}


class TranscriptRecord(BaseModel):
    """A call transcript with call metadata and optional AI analysis."""
    id: str
    vendor_call_key: Optional[str] = None
    call_start: Optional[datetime] = None
    call_end: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    disposition: Optional[str] = None
    department: Optional[str] = None
    agent_name: Optional[str] = None
    agent_email: Optional[str] = None
    number_of_holds: int = 0
    hold_duration: int = 0
    messages: list[ConversationMessage] = []
    basic_sentiment: Optional[str] = None
    detected_topics: list[str] = []
    analysis: Optional[TranscriptAnalysis] = None

    model_config = {"extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def _coerce_row(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        for key in ("number_of_holds", "hold_duration"):
            if data.get(key) is None:
                data.pop(key, None)
        for key in ("messages", "detected_topics"):
            if data.get(key) is None:
                data.pop(key, None)
        return data

    @field_validator("call_start", "call_end")
    @classmethod
    def _ensure_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


# ── Heuristic transcript analysis ────────────────────────────────────


class SpeakerTurns(BaseModel):
    agent_turns: int
    customer_turns: int
    total_messages: int


class ResolutionResult(BaseModel):
    resolution_status: Literal["Resolved", "Escalated", "Follow-up Required", "Unknown"]
    was_resolved: bool
    was_escalated: bool
    requires_followup: bool
    escalation_reason: Optional[str] = None


class SentimentResult(BaseModel):
    sentiment: Sentiment
    score: float


class QualityResult(BaseModel):
    quality: Literal["high", "medium", "low"]
    score: int
    issues: list[str]


class TopicResult(BaseModel):
    topics: list[str]
    primary_topic: str
    topic_scores: dict[str, int]


class NamedEntities(BaseModel):
    loan_numbers: list[str] = []
    customer_names: list[str] = []
    email_addresses: list[str] = []
    phone_numbers: list[str] = []
    addresses: list[str] = []
    dates: list[str] = []
    amounts: list[str] = []


class SelfServiceResult(BaseModel):
    has_self_service_opportunity: bool
    opportunities: list[str]
    automation_potential: Literal["high", "medium", "low"]


class TranscriptInsight(BaseModel):
    """Combined heuristic analysis of one transcript."""
    agent_turns: int
    customer_turns: int
    total_messages: int
    resolution: ResolutionResult
    overall_sentiment: Sentiment
    sentiment_score: float
    customer_sentiment: Sentiment
    customer_sentiment_score: float
    transcript_quality: Literal["high", "medium", "low"]
    quality_issues: list[str] = []
    call_quality_score: int
    customer_intent: str
    all_issues: list[str] = []
    detected_topics: list[str]
    primary_topic: str
    topic_scores: dict[str, int]
    entities: NamedEntities
    self_service: SelfServiceResult


# ── Summary (/api/transcript-analytics?type=summary) ─────────────────


class SentimentCounts(BaseModel):
    positive: int = 0
    neutral: int = 0
    negative: int = 0


class TopicStat(BaseModel):
    name: str
    count: int
    avg_confidence: float
    avg_agent_score: float
    avg_customer_score: float


class SubcategoryStat(BaseModel):
    name: str
    count: int
    parent_topic: str


class DailyTrend(BaseModel):
    date: str
    total: int
    agent_positive: int = 0
    agent_neutral: int = 0
    agent_negative: int = 0
    customer_positive: int = 0
    customer_neutral: int = 0
    customer_negative: int = 0


class SummaryMetadata(BaseModel):
    total_transcripts: int
    analyzed_transcripts: int
    analysis_progress: float


class SentimentSummary(BaseModel):
    agent_sentiment: SentimentCounts
    customer_sentiment: SentimentCounts
    avg_agent_score: float
    avg_customer_score: float


class TopicSummary(BaseModel):
    main_topics: list[TopicStat]
    subcategories: list[SubcategoryStat]


class TranscriptSummaryResponse(BaseModel):
    success: bool = True
    metadata: SummaryMetadata
    summary: SentimentSummary
    topics: TopicSummary
    daily_trends: list[DailyTrend]


# ── Listing / drill-down ─────────────────────────────────────────────


class TranscriptQuery(BaseModel):
    """Drill-down filters applied to transcripts before pagination."""
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)
    date: Optional[date_type] = None
    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None
    sentiment: Optional[str] = None
    agent_sentiment: Optional[str] = None
    customer_sentiment: Optional[str] = None
    topic: Optional[str] = None
    no_subcategory: bool = False
    department: Optional[str] = None
    agent: Optional[str] = None
    hour: Optional[str] = Field(default=None, pattern=r"^([01]\d|2[0-3]):00$")
    day_of_week: Optional[DayName] = None
    escalated: Optional[bool] = None
    search: Optional[str] = None


class TranscriptPagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class TranscriptListResponse(BaseModel):
    success: bool = True
    data: list[TranscriptRecord]
    pagination: TranscriptPagination


# ── Dashboard stats (/api/transcript-analytics?type=stats) ───────────


class DepartmentStat(BaseModel):
    name: str
    count: int
    positive: int
    negative: int
    positive_rate: float
    negative_rate: float


class AgentLeaderboardRow(BaseModel):
    name: str
    count: int
    avg_performance: Optional[float] = None


class HourVolume(BaseModel):
    hour: str
    count: int


class CallDailyTrend(BaseModel):
    date: str
    total: int
    positive: int = 0
    negative: int = 0
    neutral: int = 0


class TranscriptStats(BaseModel):
    total_calls: int
    sentiment_distribution: dict[str, int]
    topic_distribution: dict[str, int]
    escalation_risk_distribution: dict[str, int]
    departments: list[DepartmentStat]
    agent_leaderboard: list[AgentLeaderboardRow]
    by_day_of_week: dict[str, int]
    hourly_volume: list[HourVolume]
    avg_duration: int
    avg_hold_time: int
    avg_messages_per_call: float
    avg_agent_performance: Optional[float] = None
    daily_trends: list[CallDailyTrend]
