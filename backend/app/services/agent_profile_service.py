"""AI coaching profiles for call-center agents using LangChain."""

import logging

from ..core.llm import LLMNotConfiguredError, generate_structured_output
from ..schemas.agents import AgentMetrics, AgentProfile, AgentStats, CoachingInsights, PerformanceTier
from .agent_analytics import performance_tier
from .metrics import round_int

logger = logging.getLogger(__name__)

PROFILE_RECENT_CALLS = 10


SYSTEM_PROMPT = """You are an expert customer service coach and performance analyst for a mortgage servicing company.

Analyze the agent's performance data and provide actionable coaching insights.

GUIDELINES:
- For TOP performers: Focus on what makes them excellent and how to maintain/share their skills
- For GOOD performers: Acknowledge success while suggesting refinements
- For AVERAGE performers: Balanced feedback with clear improvement paths
- For NEEDS-IMPROVEMENT: Constructive, specific guidance without being harsh
- For CRITICAL: Urgent but supportive intervention recommendations

Be specific to mortgage customer service (payments, escrow, loan questions, frustrated homeowners).
Focus on actionable, measurable improvements."""


def _format_recent_calls(stats: AgentStats) -> str:
    lines = [
        f"{i}. {call.sentiment} call ({round_int(call.duration / 60)}min): {call.summary or 'No summary'}"
        for i, call in enumerate(stats.recent_calls[:PROFILE_RECENT_CALLS], start=1)
    ]
    return "\n".join(lines) or "No recent call data available"


def build_profile_prompt(stats: AgentStats, tier: PerformanceTier) -> str:
    """Format an agent's numbers and recent calls for the coaching LLM."""
    return f"""AGENT DATA:
- Name: {stats.name}
- Department: {stats.department or 'Unknown'}
- Total Calls: {stats.call_count}
- Average Call Duration: {round_int(stats.avg_duration / 60)} minutes
- Positive Calls: {stats.positive_rate}%
- Negative Calls: {stats.negative_rate}%
- Neutral Calls: {stats.neutral_rate}%
- Sentiment Score: {stats.sentiment_score} (range: -100 to +100)
- Performance Tier: {tier}

RECENT CALL SAMPLES:
{_format_recent_calls(stats)}

Generate the coaching profile for this agent."""


def fallback_insights(stats: AgentStats, tier: PerformanceTier) -> CoachingInsights:
    """Deterministic coaching notes used when the LLM is unavailable."""
    struggling = tier in ("needs-improvement", "critical")
    if tier in ("top", "good"):
        strengths = ["Maintains professional tone", "Handles customer inquiries effectively"]
    else:
        strengths = ["Shows commitment to customer service"]
    if struggling:
        areas = [
            "Customer satisfaction rates need attention",
            "Consider additional training on de-escalation",
        ]
    else:
        areas = ["Continue developing advanced problem-solving skills"]
    closing = "Targeted coaching recommended." if struggling else "Continue current performance trajectory."
    return CoachingInsights(
        strengths=strengths,
        areas_for_improvement=areas,
        recommendations=[
            "Review call recordings to identify improvement opportunities",
            "Shadow top-performing agents for best practices",
            "Focus on first-call resolution strategies",
        ],
        overall_assessment=(
            f"{stats.name} has handled {stats.call_count} calls with a "
            f"{stats.positive_rate}% positive rate. {closing}"
        ),
    )


async def generate_agent_profile(stats: AgentStats) -> AgentProfile:
    """
    Build a coaching profile for one agent.

    The tier is recomputed from the sentiment score. Insights come from the
    LLM; any failure other than a missing API key falls back to
    ``fallback_insights``.

    Raises:
        LLMNotConfiguredError: No LLM API key is configured.
    """
    tier = performance_tier(stats.sentiment_score)
    ai_generated = True
    try:
        insights = await generate_structured_output(
            prompt=build_profile_prompt(stats, tier),
            output_schema=CoachingInsights,
            system_prompt=SYSTEM_PROMPT,
            temperature=0.3,
        )
    except LLMNotConfiguredError:
        raise
    except Exception:
        logger.warning("Coaching profile LLM call failed for %s, using fallback", stats.name, exc_info=True)
        insights = fallback_insights(stats, tier)
        ai_generated = False

    return AgentProfile(
        name=stats.name,
        email=stats.email,
        department=stats.department,
        metrics=AgentMetrics(
            total_calls=stats.call_count,
            avg_call_duration=stats.avg_duration,
            positive_rate=stats.positive_rate,
            negative_rate=stats.negative_rate,
            neutral_rate=stats.neutral_rate,
            sentiment_score=stats.sentiment_score,
            performance_tier=tier,
        ),
        strengths=insights.strengths,
        areas_for_improvement=insights.areas_for_improvement,
        recommendations=insights.recommendations,
        overall_assessment=insights.overall_assessment,
        recent_calls=stats.recent_calls,
        ai_generated=ai_generated,
    )
