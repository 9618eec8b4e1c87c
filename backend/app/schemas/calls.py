"""Pydantic models for single-call drill-down: per-message sentiment and the call scorecard."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .transcripts import ConversationMessage


# ── Per-message sentiment (/api/sentiment) ───────────────────────────


class MessageSentiment(BaseModel):
    score: float = Field(ge=-1, le=1, description="-1 (very negative) to 1 (very positive)")
    emotion: str = Field(description="Single-word emotion, e.g. frustrated, helpful, neutral")


class MessageSentimentBatch(BaseModel):
    """Structured output the LLM returns: one entry per message, in order."""
    sentiments: List[MessageSentiment]


class SentimentRequest(BaseModel):
    messages: List[ConversationMessage] = Field(min_length=1)


class SentimentResponse(BaseModel):
    sentiments: List[MessageSentiment]
    ai_generated: bool = True


# ── Call scorecard (/api/call-analysis) ──────────────────────────────


class CallMetadata(BaseModel):
    agent_name: Optional[str] = None
    department: Optional[str] = None
    duration_seconds: Optional[int] = None
    call_start: Optional[str] = None


class CallAnalysisRequest(BaseModel):
    """A call to score.

    ``sentiment_context`` is free text appended to the scoring instructions.
    When it is absent and ``message_sentiments`` (from ``/api/sentiment``) are
    given, the context is built from them.
    """
    messages: List[ConversationMessage] = Field(min_length=1)
    metadata: Optional[CallMetadata] = None
    sentiment_context: Optional[str] = None
    message_sentiments: Optional[List[MessageSentiment]] = None


class OverallScores(BaseModel):
    customer_satisfaction: int = Field(ge=1, le=5)
    resolution_confidence: int = Field(ge=1, le=5)
    agent_professionalism: int = Field(ge=1, le=5)
    empathy_connection: int = Field(ge=1, le=5)
    communication_clarity: int = Field(ge=1, le=5)
    overall_call_impact: int = Field(ge=1, le=5)


class ExecutiveSummary(BaseModel):
    overview: str = Field(description="Three to four sentence executive overview")
    reason_for_contact: str
    main_actions: str
    resolution_outcome: str
    emotional_trajectory: str


class FollowUpItem(BaseModel):
    party: Literal["Agent", "Customer", "Back Office"]
    action: str
    context: str
    deadline: str


class ToneScore(BaseModel):
    tone: str
    score: int = Field(ge=1, le=5)


class ToneArc(BaseModel):
    start: ToneScore
    mid: ToneScore
    end: ToneScore


class SentimentProgression(BaseModel):
    customer: ToneArc
    agent: ToneArc


class CommunicationScores(BaseModel):
    clarity: int = Field(ge=1, le=5)
    empathy: int = Field(ge=1, le=5)
    active_listening: int = Field(ge=1, le=5)
    respectfulness: int = Field(ge=1, le=5)
    emotional_regulation: int = Field(ge=1, le=5)
    responsiveness: int = Field(ge=1, le=5)


class CommunicationQuality(BaseModel):
    customer: CommunicationScores
    agent: CommunicationScores


class AgentBehaviour(BaseModel):
    tone_professionalism: str
    problem_solving: str
    empathy_connection: str
    de_escalation: str
    closure: str


class CustomerBehaviour(BaseModel):
    initial_disposition: str
    engagement_cooperation: str
    tone_evolution: str
    satisfaction_level: str


class CallInsights(BaseModel):
    relational_flow: str
    conflict_recovery: str
    psychological_commentary: str


class CallAnalysis(BaseModel):
    """Structured output the LLM returns for one call (all scores 1-5)."""
    overall_scores: OverallScores
    executive_summary: ExecutiveSummary
    key_interaction_points: List[str]
    follow_up_items: List[FollowUpItem]
    sentiment_progression: SentimentProgression
    communication_quality: CommunicationQuality
    agent_summary: AgentBehaviour
    customer_summary: CustomerBehaviour
    insights: CallInsights


class CallAnalysisResponse(BaseModel):
    analysis: CallAnalysis
