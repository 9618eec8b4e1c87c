"""LLM drill-down for a single call: per-message sentiment and the call scorecard."""

import logging
from collections import Counter
from typing import Optional

from ..core.llm import LLMNotConfiguredError, generate_structured_output
from ..schemas.calls import (
    CallAnalysis,
    CallAnalysisRequest,
    CallMetadata,
    MessageSentiment,
    MessageSentimentBatch,
    SentimentResponse,
)
from ..schemas.transcripts import ConversationMessage, TranscriptRecord
from .metrics import round_half_up
from .transcript_analysis import analyze_sentiment

logger = logging.getLogger(__name__)

TOP_CONTEXT_TOPICS = 5


SENTIMENT_SYSTEM_PROMPT = """You are a sentiment analyzer for mortgage customer service calls. Each message is labeled as CUSTOMER or AGENT - apply DIFFERENT scoring rules for each.

=== CUSTOMER SCORING (be sensitive to frustration) ===
Emotions: frustrated, disappointed, annoyed, resigned, confused, anxious, neutral, satisfied, grateful, relieved
- Complaints, "I don't like", inconvenience = -0.4 to -0.6
- "Disappointed", "frustrated", "upset" = -0.5 to -0.7
- "I guess I'll have to...", resigned acceptance = -0.3
- Routine questions (asking for balance, payment info) = 0 neutral
- Simple confirmations like "OK", "Thank you" = 0 to +0.1
- Genuine gratitude, problem solved = +0.4 to +0.7

=== AGENT SCORING (evaluate helpfulness) ===
Emotions: helpful, professional, empathetic, apologetic, neutral, dismissive, confused
- Helpful explanations, solving problems = +0.3 to +0.5
- Professional, providing information = +0.2 to +0.3
- Empathetic responses, acknowledging feelings = +0.4 to +0.5
- Simple statements of fact = 0 to +0.1
- "Sorry", "I apologize" with action = +0.2
- Robotic/cold responses = 0
- Defensive or dismissive = -0.3 to -0.5

Return exactly one entry per message, in message order. Check the CUSTOMER/AGENT label before scoring."""


CALL_SYSTEM_PROMPT = """You are an expert in conversation analysis, customer psychology, and service quality evaluation for mortgage customer service calls.

Analyze this customer service interaction and provide a comprehensive, executive-ready assessment.
{consistency}
SCORING GUIDE (1-5):
5 = Excellent (delight, confidence, trust reinforced)
4 = Good (satisfied, minor friction)
3 = Average (neutral, some confusion or delay)
2 = Poor (frustrated, unresolved or unclear)
1 = Very Poor (negative, escalated, or damaging experience)

Be critical but fair. Mortgage calls are high-stakes - customers are often stressed about their finances.
{sentiment}"""


def format_conversation(messages: list[ConversationMessage], start: int = 0) -> str:
    """``[n] ROLE: text`` lines, numbered from ``start``."""
    return "\n\n".join(
        f"[{i}] {msg.role.upper()}: {msg.text}"
        for i, msg in enumerate(messages, start=start)
    )


# ── Per-message sentiment ────────────────────────────────────────────


def fallback_sentiments(messages: list[ConversationMessage]) -> list[MessageSentiment]:
    """Keyword sentiment per message, used when the LLM answer is unusable."""
    sentiments = []
    for msg in messages:
        result = analyze_sentiment(msg.text)
        emotion = "neutral" if result.sentiment == "mixed" else result.sentiment
        sentiments.append(MessageSentiment(score=round_half_up(result.score, 2), emotion=emotion))
    return sentiments


async def analyze_message_sentiment(messages: list[ConversationMessage]) -> SentimentResponse:
    """
    Score every message of a call from -1 to 1 with an emotion label.

    LLM failures, and answers that do not cover every message, fall back to
    keyword sentiment (``ai_generated`` is false).

    Raises:
        LLMNotConfiguredError: No LLM API key is configured.
    """
    prompt = (
        "Analyze each message's sentiment. Pay attention to CUSTOMER vs AGENT labels:\n\n"
        + format_conversation(messages)
    )
    try:
        batch = await generate_structured_output(
            prompt=prompt,
            output_schema=MessageSentimentBatch,
            system_prompt=SENTIMENT_SYSTEM_PROMPT,
            temperature=0,
        )
    except LLMNotConfiguredError:
        raise
    except Exception:
        logger.warning("Message sentiment LLM call failed, using fallback", exc_info=True)
        return SentimentResponse(sentiments=fallback_sentiments(messages), ai_generated=False)

    if len(batch.sentiments) != len(messages):
        logger.warning(
            "LLM scored %d of %d messages, using fallback", len(batch.sentiments), len(messages)
        )
        return SentimentResponse(sentiments=fallback_sentiments(messages), ai_generated=False)
    return SentimentResponse(sentiments=batch.sentiments)


def _tone(score: float) -> str:
    if score > 0.2:
        return "positive"
    if score < -0.2:
        return "negative"
    return "neutral"


def sentiment_context(messages: list[ConversationMessage], sentiments: list[MessageSentiment]) -> str:
    """Scoring constraint derived from message-level sentiment, for the scorecard prompt."""
    pairs = list(zip(messages, sentiments))
    customer = [s.score for m, s in pairs if m.role == "customer"]
    agent = [s.score for m, s in pairs if m.role == "agent"]
    avg_customer = sum(customer) / len(customer) if customer else 0.0
    avg_agent = sum(agent) / len(agent) if agent else 0.0
    emotions = list(dict.fromkeys(
        s.emotion for m, s in pairs
        if m.role == "customer" and s.emotion and s.emotion != "neutral"
    ))
    return (
        "\nIMPORTANT - Sentence-level sentiment already analyzed:\n"
        f"- Customer average sentiment: {avg_customer:.2f} ({_tone(avg_customer)})\n"
        f"- Agent average sentiment: {avg_agent:.2f} ({_tone(avg_agent)})\n"
        f"- Customer emotions detected: {', '.join(emotions) if emotions else 'mostly neutral'}\n"
        "Your scores MUST be consistent with this analysis. If customer sentiment is negative, "
        "CSAT should be 1-2. If positive, CSAT should be 4-5."
    )


# ── Call scorecard ───────────────────────────────────────────────────


def _share(counts: Counter, total: int) -> str:
    return ", ".join(f"{k}: {v} ({v / total * 100:.1f}%)" for k, v in counts.items())


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term.lower() in value.lower()


def consistency_context(transcripts: list[TranscriptRecord], metadata: Optional[CallMetadata]) -> str:
    """Historical sentiment and topic patterns, so scores stay comparable across calls.

    Empty when no transcript has been analysed yet.
    """
    analysed = [t for t in transcripts if t.analysis]
    if not analysed:
        return ""
    total = len(analysed)

    agent_counts = Counter(t.analysis.agent_sentiment or "unknown" for t in analysed)
    customer_counts = Counter(t.analysis.customer_sentiment or "unknown" for t in analysed)
    topics = Counter(
        (t.analysis.ai_discovered_topic, t.analysis.ai_discovered_subcategory)
        for t in analysed if t.analysis.ai_discovered_topic
    )
    topic_lines = [
        f"{i}. {topic}{f' -> {sub}' if sub else ''}: {count} calls"
        for i, ((topic, sub), count) in enumerate(topics.most_common(TOP_CONTEXT_TOPICS), start=1)
    ]

    lines = [
        "",
        "PROCESSED TRANSCRIPT DATA FOR CONSISTENCY:",
        f"We have analyzed {total:,} previous transcripts. "
        "Use these patterns as a guide for consistent scoring:",
        "",
        "Overall Sentiment Patterns:",
        f"- Agent Sentiment: {_share(agent_counts, total)}",
        f"- Customer Sentiment: {_share(customer_counts, total)}",
        "",
        "Common Topics Discovered:",
        *topic_lines,
    ]

    if metadata and metadata.agent_name:
        own = [t for t in analysed if _contains(t.agent_name, metadata.agent_name)]
        if own:
            agent_own = Counter(t.analysis.agent_sentiment for t in own)
            customer_own = Counter(t.analysis.customer_sentiment for t in own)
            lines += [
                "",
                f"This Agent's Performance Pattern ({metadata.agent_name}):",
                "- Agent Sentiment: " + ", ".join(f"{k}: {v}" for k, v in agent_own.items()),
                "- Customer Outcomes: " + ", ".join(f"{k}: {v}" for k, v in customer_own.items()),
            ]

    if metadata and metadata.department:
        dept = [t for t in analysed if _contains(t.department, metadata.department)]
        if dept:
            dept_counts = Counter(t.analysis.customer_sentiment for t in dept)
            lines += [
                "",
                f"This Department's Pattern ({metadata.department}):",
                "- Typical Sentiment Distribution: "
                + ", ".join(f"Customer {k}: {v}" for k, v in dept_counts.items()),
            ]

    lines += [
        "",
        "SCORING CONSISTENCY GUIDANCE:",
        "- Compare your scores to these historical patterns",
        "- If this call seems significantly different from patterns, that's valuable to note",
        f"- Maintain consistency: similar interactions should receive similar scores across "
        f"the {total:,} call dataset",
        "",
    ]
    return "\n".join(lines)


def build_call_prompt(messages: list[ConversationMessage], metadata: Optional[CallMetadata]) -> str:
    header = ""
    if metadata:
        duration = (
            f"{metadata.duration_seconds // 60} minutes" if metadata.duration_seconds else "Unknown"
        )
        header = (
            "Call Metadata:\n"
            f"- Agent: {metadata.agent_name or 'Unknown'}\n"
            f"- Department: {metadata.department or 'Unknown'}\n"
            f"- Duration: {duration}\n"
            f"- Date: {metadata.call_start or 'Unknown'}\n\n"
        )
    return f"{header}Analyze this customer service call transcript:\n\n{format_conversation(messages, start=1)}"


async def analyze_call(request: CallAnalysisRequest, transcripts: list[TranscriptRecord]) -> CallAnalysis:
    """
    Score one call 1-5 across satisfaction, resolution, professionalism and
    communication, with summaries and follow-up items.

    Raises:
        LLMNotConfiguredError: No LLM API key is configured.
        Exception: Any LLM or validation failure; there is no fallback scorecard.
    """
    extra = request.sentiment_context or ""
    if not extra and request.message_sentiments:
        extra = sentiment_context(request.messages, request.message_sentiments)

    system_prompt = CALL_SYSTEM_PROMPT.format(
        consistency=consistency_context(transcripts, request.metadata),
        sentiment=extra,
    )
    return await generate_structured_output(
        prompt=build_call_prompt(request.messages, request.metadata),
        output_schema=CallAnalysis,
        system_prompt=system_prompt,
        temperature=0.1,
    )
