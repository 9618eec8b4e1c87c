"""Tests for app.services.call_analysis_service."""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.llm import LLMNotConfiguredError
from app.schemas.calls import (
    CallAnalysis,
    CallAnalysisRequest,
    CallMetadata,
    MessageSentiment,
    MessageSentimentBatch,
)
from app.schemas.transcripts import ConversationMessage
from app.services.call_analysis_service import (
    analyze_call,
    analyze_message_sentiment,
    build_call_prompt,
    consistency_context,
    fallback_sentiments,
    format_conversation,
    sentiment_context,
)

MESSAGES = [
    ConversationMessage(role="customer", text="My escrow went up and I am frustrated."),
    ConversationMessage(role="agent", text="Let me walk you through the escrow analysis."),
    ConversationMessage(role="customer", text="Okay, thanks."),
]

_ARC = {
    "start": {"tone": "anxious", "score": 2},
    "mid": {"tone": "calmer", "score": 3},
    "end": {"tone": "relieved", "score": 4},
}
_COMMS = {
    "clarity": 4,
    "empathy": 4,
    "active_listening": 4,
    "respectfulness": 5,
    "emotional_regulation": 4,
    "responsiveness": 4,
}

ANALYSIS = CallAnalysis.model_validate({
    "overall_scores": {
        "customer_satisfaction": 4,
        "resolution_confidence": 4,
        "agent_professionalism": 5,
        "empathy_connection": 4,
        "communication_clarity": 4,
        "overall_call_impact": 4,
    },
    "executive_summary": {
        "overview": "Borrower called about an escrow increase.",
        "reason_for_contact": "Escrow payment increase",
        "main_actions": "Explained the escrow analysis",
        "resolution_outcome": "Resolved",
        "emotional_trajectory": "Frustrated to reassured",
    },
    "key_interaction_points": ["Agent explained the shortage"],
    "follow_up_items": [
        {"party": "Back Office", "action": "Mail analysis", "context": "Borrower request", "deadline": "3 days"},
    ],
    "sentiment_progression": {"customer": _ARC, "agent": _ARC},
    "communication_quality": {"customer": _COMMS, "agent": _COMMS},
    "agent_summary": {
        "tone_professionalism": "Calm",
        "problem_solving": "Clear",
        "empathy_connection": "Acknowledged frustration",
        "de_escalation": "Effective",
        "closure": "Confirmed next steps",
    },
    "customer_summary": {
        "initial_disposition": "Frustrated",
        "engagement_cooperation": "Cooperative",
        "tone_evolution": "Softened",
        "satisfaction_level": "Satisfied",
    },
    "insights": {
        "relational_flow": "Rapport built after the explanation",
        "conflict_recovery": "Tension eased once the cause was clear",
        "psychological_commentary": "Borrower needed reassurance",
    },
})


@pytest.fixture
def history(transcript_factory):
    return [
        transcript_factory(
            id="1",
            agent_name="Maria Rivera",
            department="Customer Service",
            analysis={
                "agent_sentiment": "positive",
                "customer_sentiment": "positive",
                "ai_discovered_topic": "Escrow",
                "ai_discovered_subcategory": "Escrow Shortage",
            },
        ),
        transcript_factory(
            id="2",
            agent_name="Grace Okafor",
            department="Loss Mitigation",
            analysis={
                "agent_sentiment": "neutral",
                "customer_sentiment": "negative",
                "ai_discovered_topic": "Escrow",
                "ai_discovered_subcategory": "Escrow Shortage",
            },
        ),
        transcript_factory(id="3", analysis=None),
    ]


# ── Formatting ──────────────────────────────────────────────────────


class TestFormatting:
    def test_format_conversation_numbers_from_zero(self):
        text = format_conversation(MESSAGES[:2])
        assert text == (
            "[0] CUSTOMER: My escrow went up and I am frustrated.\n\n"
            "[1] AGENT: Let me walk you through the escrow analysis."
        )

    def test_call_prompt_with_metadata(self):
        prompt = build_call_prompt(
            MESSAGES,
            CallMetadata(agent_name="Maria Rivera", duration_seconds=450, call_start="2026-10-01T14:05:00Z"),
        )
        assert prompt.startswith("Call Metadata:\n- Agent: Maria Rivera\n- Department: Unknown\n")
        assert "- Duration: 7 minutes" in prompt
        assert "[1] CUSTOMER: My escrow went up" in prompt
        assert "[3] CUSTOMER: Okay, thanks." in prompt

    def test_call_prompt_without_metadata(self):
        prompt = build_call_prompt(MESSAGES, None)
        assert prompt.startswith("Analyze this customer service call transcript:")


# ── Sentiment context ───────────────────────────────────────────────


class TestSentimentContext:
    def test_averages_per_role(self):
        sentiments = [
            MessageSentiment(score=-0.75, emotion="frustrated"),
            MessageSentiment(score=0.5, emotion="helpful"),
            MessageSentiment(score=0.25, emotion="grateful"),
        ]
        context = sentiment_context(MESSAGES, sentiments)
        assert "- Customer average sentiment: -0.25 (negative)" in context
        assert "- Agent average sentiment: 0.50 (positive)" in context
        assert "- Customer emotions detected: frustrated, grateful" in context
        assert "CSAT should be 1-2" in context

    def test_all_neutral(self):
        sentiments = [MessageSentiment(score=0, emotion="neutral")] * 3
        context = sentiment_context(MESSAGES, sentiments)
        assert "- Customer emotions detected: mostly neutral" in context
        assert "(neutral)" in context


class TestConsistencyContext:
    def test_empty_without_analysed_calls(self, transcript_factory):
        assert consistency_context([transcript_factory(analysis=None)], None) == ""

    def test_overall_patterns(self, history):
        context = consistency_context(history, None)
        assert "We have analyzed 2 previous transcripts." in context
        assert "- Agent Sentiment: positive: 1 (50.0%), neutral: 1 (50.0%)" in context
        assert "- Customer Sentiment: positive: 1 (50.0%), negative: 1 (50.0%)" in context
        assert "1. Escrow -> Escrow Shortage: 2 calls" in context
        assert "This Agent's" not in context

    def test_agent_and_department_patterns(self, history):
        metadata = CallMetadata(agent_name="rivera", department="loss")
        context = consistency_context(history, metadata)
        assert "This Agent's Performance Pattern (rivera):" in context
        assert "- Customer Outcomes: positive: 1" in context
        assert "This Department's Pattern (loss):" in context
        assert "- Typical Sentiment Distribution: Customer negative: 1" in context


# ── Per-message sentiment ───────────────────────────────────────────


class TestMessageSentiment:
    def test_fallback_uses_keyword_sentiment(self):
        messages = [
            ConversationMessage(role="customer", text="Thank you, this was very helpful"),
            ConversationMessage(role="customer", text="This is unacceptable"),
            ConversationMessage(role="agent", text="Okay"),
        ]
        result = fallback_sentiments(messages)
        assert [(s.score, s.emotion) for s in result] == [
            (1.0, "positive"),
            (-1.0, "negative"),
            (0.0, "neutral"),
        ]

    @patch(
        "app.services.call_analysis_service.generate_structured_output",
        new_callable=AsyncMock,
    )
    @pytest.mark.asyncio
    async def test_ai_sentiments(self, mock_generate):
        mock_generate.return_value = MessageSentimentBatch(sentiments=[
            MessageSentiment(score=-0.75, emotion="frustrated"),
            MessageSentiment(score=0.3, emotion="helpful"),
            MessageSentiment(score=0.1, emotion="satisfied"),
        ])

        result = await analyze_message_sentiment(MESSAGES)

        assert result.ai_generated is True
        assert [s.emotion for s in result.sentiments] == ["frustrated", "helpful", "satisfied"]
        kwargs = mock_generate.call_args.kwargs
        assert kwargs["output_schema"] is MessageSentimentBatch
        assert kwargs["temperature"] == 0
        assert "[2] CUSTOMER: Okay, thanks." in kwargs["prompt"]

    @patch(
        "app.services.call_analysis_service.generate_structured_output",
        new_callable=AsyncMock,
    )
    @pytest.mark.asyncio
    async def test_short_answer_falls_back(self, mock_generate, caplog):
        mock_generate.return_value = MessageSentimentBatch(
            sentiments=[MessageSentiment(score=0.2, emotion="neutral")]
        )

        result = await analyze_message_sentiment(MESSAGES)

        assert result.ai_generated is False
        assert len(result.sentiments) == 3
        assert "using fallback" in caplog.text

    @patch(
        "app.services.call_analysis_service.generate_structured_output",
        new_callable=AsyncMock,
    )
    @pytest.mark.asyncio
    async def test_llm_error_falls_back(self, mock_generate):
        mock_generate.side_effect = RuntimeError("upstream 500")

        result = await analyze_message_sentiment(MESSAGES)

        assert result.ai_generated is False
        assert result.sentiments[0].emotion == "negative"

    @patch(
        "app.services.call_analysis_service.generate_structured_output",
        new_callable=AsyncMock,
    )
    @pytest.mark.asyncio
    async def test_missing_key_propagates(self, mock_generate):
        mock_generate.side_effect = LLMNotConfiguredError("LLM API key not configured")

        with pytest.raises(LLMNotConfiguredError):
            await analyze_message_sentiment(MESSAGES)


# ── Call scorecard ──────────────────────────────────────────────────


class TestAnalyzeCall:
    @patch(
        "app.services.call_analysis_service.generate_structured_output",
        new_callable=AsyncMock,
    )
    @pytest.mark.asyncio
    async def test_scorecard(self, mock_generate, history):
        mock_generate.return_value = ANALYSIS
        request = CallAnalysisRequest(
            messages=MESSAGES,
            metadata=CallMetadata(agent_name="Maria Rivera"),
            message_sentiments=[
                MessageSentiment(score=-0.75, emotion="frustrated"),
                MessageSentiment(score=0.5, emotion="helpful"),
                MessageSentiment(score=0.25, emotion="grateful"),
            ],
        )

        analysis = await analyze_call(request, history)

        assert analysis.overall_scores.customer_satisfaction == 4
        kwargs = mock_generate.call_args.kwargs
        assert kwargs["output_schema"] is CallAnalysis
        assert kwargs["temperature"] == 0.1
        assert "- Agent: Maria Rivera" in kwargs["prompt"]
        assert "PROCESSED TRANSCRIPT DATA FOR CONSISTENCY:" in kwargs["system_prompt"]
        assert "- Customer average sentiment: -0.25 (negative)" in kwargs["system_prompt"]

    @patch(
        "app.services.call_analysis_service.generate_structured_output",
        new_callable=AsyncMock,
    )
    @pytest.mark.asyncio
    async def test_explicit_context_wins(self, mock_generate):
        mock_generate.return_value = ANALYSIS
        request = CallAnalysisRequest(
            messages=MESSAGES,
            sentiment_context="Customer was calm throughout.",
            message_sentiments=[MessageSentiment(score=-0.9, emotion="angry")] * 3,
        )

        await analyze_call(request, [])

        system_prompt = mock_generate.call_args.kwargs["system_prompt"]
        assert "Customer was calm throughout." in system_prompt
        assert "Sentence-level sentiment" not in system_prompt
        assert "PROCESSED TRANSCRIPT DATA" not in system_prompt

    @patch(
        "app.services.call_analysis_service.generate_structured_output",
        new_callable=AsyncMock,
    )
    @pytest.mark.asyncio
    async def test_llm_errors_propagate(self, mock_generate):
        mock_generate.side_effect = RuntimeError("invalid structured output")

        with pytest.raises(RuntimeError):
            await analyze_call(CallAnalysisRequest(messages=MESSAGES), [])
