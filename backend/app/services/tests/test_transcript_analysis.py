"""Tests for the keyword heuristics in app.services.transcript_analysis."""

from app.services.transcript_analysis import (
    analyze_customer_sentiment,
    analyze_sentiment,
    analyze_transcript,
    assess_transcript_quality,
    calculate_call_quality_score,
    count_speaker_turns,
    detect_resolution_status,
    detect_self_service_opportunities,
    detect_topics,
    extract_named_entities,
    insight_for,
    normalize_speaker_labels,
    parse_conversation,
    score_call,
    transcript_text,
)


# ── Speaker handling ────────────────────────────────────────────────


class TestSpeakerLabels:
    def test_normalize_rewrites_alternate_labels(self):
        assert normalize_speaker_labels("Rep: hi\nCaller:  hello") == "agent: hi customer: hello"

    def test_parse_conversation(self):
        messages = parse_conversation("Rep: Hello there. Caller: I need help.")
        assert [(m.role, m.text) for m in messages] == [
            ("agent", "Hello there."),
            ("customer", "I need help."),
        ]

    def test_count_speaker_turns(self):
        turns = count_speaker_turns("agent: a customer: b agent: c")
        assert (turns.agent_turns, turns.customer_turns, turns.total_messages) == (2, 1, 3)

    def test_transcript_text(self, transcript_factory):
        record = transcript_factory()
        assert transcript_text(record) == (
            "customer: I have a question about my loan.\n"
            "agent: Sure, I can help with that."
        )


# ── Resolution ──────────────────────────────────────────────────────


class TestDetectResolutionStatus:
    def test_escalation_beats_resolution(self):
        result = detect_resolution_status(
            "customer: I want to speak to a supervisor. agent: you're all set"
        )
        assert result.resolution_status == "Escalated"
        assert result.was_escalated
        assert result.escalation_reason == "Requested supervisor/manager"

    def test_resolved(self):
        result = detect_resolution_status("agent: you're all set")
        assert result.resolution_status == "Resolved"
        assert result.was_resolved
        assert not result.requires_followup

    def test_followup(self):
        result = detect_resolution_status("agent: I will call you back tomorrow")
        assert result.resolution_status == "Follow-up Required"
        assert result.requires_followup

    def test_unknown(self):
        assert detect_resolution_status("hello").resolution_status == "Unknown"


# ── Sentiment ───────────────────────────────────────────────────────


class TestAnalyzeSentiment:
    def test_positive(self):
        result = analyze_sentiment("thank you, this is great")
        assert result.sentiment == "positive"
        assert result.score == 1.0

    def test_negative_is_clamped(self):
        result = analyze_sentiment("I am frustrated")
        assert result.sentiment == "negative"
        assert result.score == -1.0

    def test_mixed_when_both_present_but_diluted(self):
        text = "thank you, great, but frustrated " + "ok " * 130
        result = analyze_sentiment(text)
        assert result.sentiment == "mixed"
        assert -0.2 <= result.score <= 0.2

    def test_neutral(self):
        assert analyze_sentiment("the loan number is on file").sentiment == "neutral"

    def test_customer_sentiment_ignores_agent(self):
        result = analyze_customer_sentiment("agent: thank you, great, wonderful customer: hello")
        assert result.sentiment == "neutral"

    def test_customer_mixed_becomes_neutral(self):
        text = "agent: hi customer: thank you, great, but frustrated " + "ok " * 130
        assert analyze_customer_sentiment(text).sentiment == "neutral"

    def test_customer_sentiment_without_customer_turns(self):
        result = analyze_customer_sentiment("agent: thanks")
        assert result.sentiment == "neutral"
        assert result.score == 0.0


# ── Quality ─────────────────────────────────────────────────────────


class TestQuality:
    def test_short_unlabelled_transcript_is_low(self):
        result = assess_transcript_quality("hello there")
        assert result.quality == "low"
        assert "Missing speaker labels" in result.issues

    def test_labelled_long_transcript_is_high(self):
        text = "agent: " + "hello there friend " * 20 + "customer: thanks"
        assert assess_transcript_quality(text).quality == "high"

    def test_call_quality_caps_at_100(self):
        assert calculate_call_quality_score(300, 10, "Resolved", "positive") == 100

    def test_call_quality_floors_at_0(self):
        assert calculate_call_quality_score(30, 2, "Escalated", "negative") == 0

    def test_call_quality_without_duration(self):
        assert calculate_call_quality_score(None, 5, "Unknown", "neutral") == 55


# ── Topics, entities, self-service ──────────────────────────────────


class TestExtraction:
    def test_detect_topics(self):
        result = detect_topics("I need a payoff quote and my escrow shortage")
        assert result.primary_topic == "payoff"
        assert result.topic_scores["payoff"] == 2
        assert {"escrow", "escrow_shortage"} <= set(result.topics)

    def test_detect_topics_default(self):
        result = detect_topics("")
        assert result.topics == []
        assert result.primary_topic == "general"

    def test_extract_named_entities(self):
        text = (
            "Loan 1234567890 for John Smith, email john@example.com, call 555-123-4567, "
            "owes $1,250.00 due 10/15/2026 at 123 Main Street."
        )
        entities = extract_named_entities(text)
        assert entities.loan_numbers == ["1234567890"]
        assert "John Smith" in entities.customer_names
        assert entities.email_addresses == ["john@example.com"]
        assert "5551234567" in entities.phone_numbers
        assert entities.amounts == ["$1,250.00"]
        assert entities.dates == ["10/15/2026"]
        assert "123 Main Street" in entities.addresses

    def test_self_service_high_potential(self):
        result = detect_self_service_opportunities(
            "how do i pay and I forgot password and need a copy"
        )
        assert result.opportunities == ["Online Payment Setup", "Password Reset", "Document Download"]
        assert result.automation_potential == "high"

    def test_self_service_none(self):
        result = detect_self_service_opportunities("")
        assert not result.has_self_service_opportunity
        assert result.automation_potential == "low"


class TestAnalyzeTranscript:
    def test_combines_heuristics(self):
        text = "customer: how do i pay my bill? agent: you can pay online. you're all set."
        insight = analyze_transcript(text, duration_seconds=300)
        assert insight.customer_intent == "make_payment"
        assert insight.resolution.resolution_status == "Resolved"
        assert (insight.agent_turns, insight.customer_turns, insight.total_messages) == (1, 1, 2)
        assert insight.overall_sentiment == "neutral"
        assert insight.call_quality_score == 80
        assert insight.primary_topic == "payment"
        assert "Online Payment Setup" in insight.self_service.opportunities
        assert insight.all_issues == ["Payment Issues"]
        assert insight.quality_issues == ["Short transcript (< 50 words)"]

    def test_score_call_matches_full_analysis(self):
        text = "customer: how do i pay my bill? agent: you can pay online. you're all set."
        resolution, quality = score_call(text, duration_seconds=300)
        insight = analyze_transcript(text, duration_seconds=300)
        assert resolution == insight.resolution
        assert quality == insight.call_quality_score == 80

    def test_insight_for_record(self, transcript_factory):
        record = transcript_factory(
            duration_seconds=300,
            messages=[
                {"role": "customer", "text": "How do I pay my bill?"},
                {"role": "agent", "text": "You can pay online. You're all set."},
            ],
        )
        insight = insight_for(record)
        assert insight.resolution.was_resolved
        assert insight.customer_intent == "make_payment"
