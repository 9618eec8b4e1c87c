"""Schemas module - Pydantic models for API request/response validation."""

from .agents import (
    AgentProfile,
    AgentProfileRequest,
    AgentProfileResponse,
    AgentRankings,
    AgentStats,
    CoachingInsights,
    PerformanceTier,
    RecentCall,
)
from .analytics import (
    AgentPerformance,
    AnalyticsResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    BaselineComparison,
    CategoryResult,
    CategoryStat,
    CategoryTree,
    MonthlyBreakdown,
)
from .calls import (
    CallAnalysis,
    CallAnalysisRequest,
    CallAnalysisResponse,
    MessageSentiment,
    SentimentRequest,
    SentimentResponse,
)
from .tickets import (
    BurndownResponse,
    DashboardStats,
    GroupResponse,
    TicketListResponse,
    TicketQuery,
    TicketRecord,
    TicketRow,
)
from .transcripts import (
    ConversationMessage,
    TranscriptAnalysis,
    TranscriptInsight,
    TranscriptListResponse,
    TranscriptQuery,
    TranscriptRecord,
    TranscriptStats,
    TranscriptSummaryResponse,
)

__all__ = [
    # Agents
    "AgentProfile",
    "AgentProfileRequest",
    "AgentProfileResponse",
    "AgentRankings",
    "AgentStats",
    "CoachingInsights",
    "PerformanceTier",
    "RecentCall",
    # Analytics
    "AgentPerformance",
    "AnalyticsResponse",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "BaselineComparison",
    "CategoryResult",
    "CategoryStat",
    "CategoryTree",
    "MonthlyBreakdown",
    # Calls
    "CallAnalysis",
    "CallAnalysisRequest",
    "CallAnalysisResponse",
    "MessageSentiment",
    "SentimentRequest",
    "SentimentResponse",
    # Tickets
    "BurndownResponse",
    "DashboardStats",
    "GroupResponse",
    "TicketListResponse",
    "TicketQuery",
    "TicketRecord",
    "TicketRow",
    # Transcripts
    "ConversationMessage",
    "TranscriptAnalysis",
    "TranscriptInsight",
    "TranscriptListResponse",
    "TranscriptQuery",
    "TranscriptRecord",
    "TranscriptStats",
    "TranscriptSummaryResponse",
]
