"""Pydantic models for categorization, trend analytics and AI analysis."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

AnalyticsType = Literal["baseline", "monthly", "agent", "categories", "all"]
Trend = Literal["increasing", "decreasing", "stable"]


class CategoryResult(BaseModel):
    """Outcome of multi-level keyword categorization."""
    category: str
    subcategory: str
    confidence: float
    all_issues: list[str] = []
    matched_keywords: list[str] = []


class CategoryTree(BaseModel):
    category: str
    subcategories: list[str]


class BaselineComparison(BaseModel):
    category: str
    subcategory: str
    baseline_count: int
    recent_count: int
    change: int
    percent_change: float
    trend: Trend


class MonthlyBreakdown(BaseModel):
    month: str
    year: int
    category: str
    subcategory: str
    count: int
    percentage: float


class AgentPerformance(BaseModel):
    agent_name: str
    total_calls: int
    avg_duration: float
    resolution_rate: float
    escalation_rate: float
    avg_call_quality: float
    positive_sentiment_rate: float
    category_distribution: dict[str, int]


class CategoryStat(BaseModel):
    category: str
    subcategory: str
    count: int
    percentage: float
    avg_confidence: float


class AnalyticsResponse(BaseModel):
    success: bool = True
    type: AnalyticsType
    source: str = "computed"
    data: Any


class AnalyzeRequest(BaseModel):
    prompt: str = Field(min_length=1, max_length=4000)


class AnalyzeResponse(BaseModel):
    analysis: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    detail: Optional[str] = None
