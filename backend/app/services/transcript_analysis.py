"""Keyword heuristics over call transcript text.

Transcripts are handled as flat ``agent: ... customer: ...`` text so the same
functions work on stored message lists and on raw exports with other speaker
labels (``rep:``, ``caller:`` and so on are normalised first).
"""

import re
from typing import Optional

from ..schemas.transcripts import (
    ConversationMessage,
    NamedEntities,
    QualityResult,
    ResolutionResult,
    SelfServiceResult,
    SentimentResult,
    SpeakerTurns,
    TopicResult,
    TranscriptInsight,
    TranscriptRecord,
)
from .categorization import detect_all_issues, detect_customer_intent

_SPEAKER_REWRITES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\brep:", re.I), "agent:"),
    (re.compile(r"\brepresentative:", re.I), "agent:"),
    (re.compile(r"\bagent\s+\d+:", re.I), "agent:"),
    (re.compile(r"\b[a-z]+\s+\(agent\):", re.I), "agent:"),
    (re.compile(r"\bcaller:", re.I), "customer:"),
    (re.compile(r"\bclient:", re.I), "customer:"),
    (re.compile(r"\buser:", re.I), "customer:"),
]

_SPEAKER_SPLIT = re.compile(r"\b(agent:|customer:)", re.I)

ESCALATION_PATTERNS = [
    "need to escalate", "transfer to supervisor", "speak to a manager",
    "talk to supervisor", "escalate this", "transfer to manager",
    "speak with supervisor", "i want to speak to", "let me talk to",
    "get me a supervisor",
]

RESOLUTION_PATTERNS = [
    "resolved", "all set", "that should do it", "you're all set",
    "is there anything else", "have i answered", "glad i could help",
    "problem solved", "issue resolved", "that takes care of",
    "you should be good", "everything is set",
]

FOLLOWUP_PATTERNS = [
    "call you back", "research this", "check and email", "need to investigate",
    "get back to you", "follow up", "look into this", "i'll check on",
    "let me find out", "need to verify",
]

POSITIVE_KEYWORDS = [
    "thank", "thanks", "appreciate", "helpful", "great", "excellent",
    "wonderful", "perfect", "good", "happy", "satisfied", "pleased", "awesome",
]

NEGATIVE_KEYWORDS = [
    "frustrated", "angry", "upset", "terrible", "awful", "horrible", "worst",
    "unacceptable", "ridiculous", "disappointed", "dissatisfied", "complaint",
    "furious", "outraged",
]

NEGATIVE_WEIGHT = 1.5

TOPIC_KEYWORDS: dict[str, list[str]] = {
    "payment": ["payment", "pay ", "paying", "paid"],
    "autopay": ["autopay", "automatic payment", "recurring payment"],
    "payment_failure": ["declined", "failed payment", "bounced", "nsf"],
    "first_payment": ["first payment", "initial payment", "where do i send"],
    "escrow": ["escrow", "impound"],
    "escrow_shortage": ["shortage", "escrow analysis", "escrow increase"],
    "property_tax": ["property tax", "tax bill", "taxes"],
    "insurance": ["insurance", "homeowner insurance", "hazard insurance"],
    "login": ["login", "log in", "sign in"],
    "password": ["password", "reset password", "forgot password"],
    "locked_account": ["locked", "locked out", "account locked"],
    "transfer": ["transfer", "sold my loan", "new servicer"],
    "boarding": ["boarding", "on-boarding", "welcome letter"],
    "subservicer": ["servicemac", "cenlar", "lakeview", "subservicer"],
    "payoff": ["payoff", "payoff quote", "payoff statement"],
    "statement": ["statement", "mortgage statement", "billing statement"],
    "tax_documents": ["1098", "tax form", "tax document"],
    "closing_documents": ["closing", "final bill", "satisfaction"],
    "balance": ["balance", "how much do i owe", "amount due"],
    "interest_rate": ["interest rate", "rate", "apr"],
    "loan_details": ["loan number", "loan information", "loan terms"],
    "modification": ["modification", "loan mod"],
    "forbearance": ["forbearance", "payment relief", "skip payment"],
    "hardship": ["hardship", "financial difficulty", "cant pay"],
    "complaint": ["complaint", "file a complaint", "better business bureau"],
    "escalation": ["supervisor", "manager", "escalate"],
    "legal": ["attorney", "lawyer", "legal"],
    "online_portal": ["website", "online", "portal", "app"],
    "voice_preference": ["call preference", "do not call", "text message"],
}

SELF_SERVICE_INDICATORS: dict[str, list[str]] = {
    "Online Payment Setup": ["where do i pay", "how do i pay", "payment address", "send payment"],
    "Password Reset": ["reset password", "forgot password", "cant log in", "locked out"],
    "Statement Request": ["need a statement", "mortgage statement", "billing statement"],
    "Balance Inquiry": ["how much do i owe", "current balance", "payoff amount"],
    "Payment History": ["payment history", "past payments", "what i paid"],
    "Account Setup": ["set up account", "register", "create account", "sign up"],
    "AutoPay Enrollment": ["set up autopay", "automatic payment", "recurring payment"],
    "Document Download": ["download", "need a copy", "send me", "email me"],
    "Tax Form Access": ["1098", "tax form", "tax document"],
    "Payoff Quote": ["payoff quote", "payoff statement", "payoff amount"],
}

# Entity patterns
_LOAN_NUMBER_PATTERNS = [
    re.compile(r"\b[0-9]{10,12}\b"),
    re.compile(r"\b[rR][a-zA-Z]{2}[0-9]{7,10}\b"),
    re.compile(r"\bloan\s*#?\s*[0-9]{7,12}\b", re.I),
]
_LOAN_PREFIX = re.compile(r"loan\s*#?\s*", re.I)
_NAME_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,2}\b")
_NAME_STOPWORDS = {
    "Customer", "Agent", "Representative", "Servicing", "Payment",
    "Escrow", "Loan", "Account", "Service", "Team",
}
_EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b")
_PHONE_PATTERN = re.compile(r"\b(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}\b")
_AMOUNT_PATTERN = re.compile(r"\$\s*[0-9]{1,3}(?:,?[0-9]{3})*(?:\.[0-9]{2})?\b")
_DATE_PATTERNS = [
    re.compile(r"\b(?:0?[1-9]|1[0-2])[/\-](?:0?[1-9]|[12][0-9]|3[01])[/\-][0-9]{2,4}\b"),
    re.compile(
        r"\b(?:January|February|March|April|May|June|July|August|September|October|November|December)"
        r"\s+[0-9]{1,2},?\s+[0-9]{4}\b",
        re.I,
    ),
]
_ADDRESS_PATTERN = re.compile(
    r"\b[0-9]+\s+[A-Za-z\s]+(?:Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|Boulevard|Blvd|Way|Court|Ct)\.?\b",
    re.I,
)
_SPECIAL_CHARS = re.compile(r"[^a-zA-Z0-9\s:.,!?-]")


def _unique(items) -> list[str]:
    return list(dict.fromkeys(items))


def _matches(pattern: re.Pattern, text: str) -> list[str]:
    return [m.group(0) for m in pattern.finditer(text)]


def transcript_text(record: TranscriptRecord) -> str:
    """Flatten a record's messages into ``role: text`` lines."""
    return "\n".join(f"{msg.role}: {msg.text}" for msg in record.messages)


def normalize_speaker_labels(text: str) -> str:
    normalized = text
    for pattern, replacement in _SPEAKER_REWRITES:
        normalized = pattern.sub(replacement, normalized)
    return re.sub(r"\s+", " ", normalized).strip()


def parse_conversation(text: str) -> list[ConversationMessage]:
    """Split labelled transcript text into speaker turns."""
    parts = _SPEAKER_SPLIT.split(normalize_speaker_labels(text))
    messages: list[ConversationMessage] = []
    role: Optional[str] = None
    for part in parts:
        stripped = part.strip()
        label = stripped.lower()
        if label == "agent:":
            role = "agent"
        elif label == "customer:":
            role = "customer"
        elif role and stripped:
            messages.append(ConversationMessage(role=role, text=stripped))
    return messages


def count_speaker_turns(text: str) -> SpeakerTurns:
    normalized = normalize_speaker_labels(text).lower()
    agent = normalized.count("agent:")
    customer = normalized.count("customer:")
    return SpeakerTurns(agent_turns=agent, customer_turns=customer, total_messages=agent + customer)


def detect_resolution_status(text: str) -> ResolutionResult:
    """Escalation beats resolution, which beats follow-up."""
    lowered = text.lower()

    if any(p in lowered for p in ESCALATION_PATTERNS):
        reason = "Customer requested escalation"
        if "supervisor" in lowered or "manager" in lowered:
            reason = "Requested supervisor/manager"
        return ResolutionResult(
            resolution_status="Escalated",
            was_resolved=False,
            was_escalated=True,
            requires_followup=True,
            escalation_reason=reason,
        )

    if any(p in lowered for p in RESOLUTION_PATTERNS):
        return ResolutionResult(
            resolution_status="Resolved",
            was_resolved=True,
            was_escalated=False,
            requires_followup=False,
        )

    if any(p in lowered for p in FOLLOWUP_PATTERNS):
        return ResolutionResult(
            resolution_status="Follow-up Required",
            was_resolved=False,
            was_escalated=False,
            requires_followup=True,
        )

    return ResolutionResult(
        resolution_status="Unknown",
        was_resolved=False,
        was_escalated=False,
        requires_followup=False,
    )


def analyze_sentiment(text: str) -> SentimentResult:
    """Keyword-density sentiment; score is clamped to [-1, 1]."""
    lowered = text.lower()
    positive = sum(lowered.count(kw) for kw in POSITIVE_KEYWORDS)
    negative = sum(lowered.count(kw) for kw in NEGATIVE_KEYWORDS) * NEGATIVE_WEIGHT

    total_words = len(re.split(r"\s+", text))
    density = (positive - negative) / max(total_words / 50, 1)
    score = max(-1.0, min(1.0, density))

    if score > 0.2:
        sentiment = "positive"
    elif score < -0.2:
        sentiment = "negative"
    elif positive > 0 and negative > 0:
        sentiment = "mixed"
    else:
        sentiment = "neutral"
    return SentimentResult(sentiment=sentiment, score=score)


def analyze_customer_sentiment(text: str) -> SentimentResult:
    customer_text = " ".join(m.text for m in parse_conversation(text) if m.role == "customer")
    if not customer_text:
        return SentimentResult(sentiment="neutral", score=0.0)
    result = analyze_sentiment(customer_text)
    if result.sentiment == "mixed":
        return SentimentResult(sentiment="neutral", score=result.score)
    return result


def assess_transcript_quality(text: str) -> QualityResult:
    issues: list[str] = []
    score = 100

    words = re.split(r"\s+", text)
    if len(words) < 10:
        issues.append("Very short transcript (< 10 words)")
        score -= 40
    elif len(words) < 50:
        issues.append("Short transcript (< 50 words)")
        score -= 20

    if not _SPEAKER_SPLIT.search(text):
        issues.append("Missing speaker labels")
        score -= 30

    avg_word_length = sum(len(w) for w in words) / len(words)
    if avg_word_length < 2:
        issues.append("Very short average word length (possible gibberish)")
        score -= 25
    elif avg_word_length > 15:
        issues.append("Very long average word length (possible encoding issues)")
        score -= 15

    if text and len(_SPECIAL_CHARS.findall(text)) / len(text) > 0.1:
        issues.append("Excessive special characters")
        score -= 15

    if score >= 80:
        quality = "high"
    elif score >= 50:
        quality = "medium"
    else:
        quality = "low"
    return QualityResult(quality=quality, score=max(0, score), issues=issues)


def calculate_call_quality_score(
    duration_seconds: Optional[float],
    turn_count: int,
    resolution_status: str,
    sentiment: str,
) -> int:
    """0-100 score from call length, back-and-forth, outcome and tone."""
    score = 50

    if duration_seconds:
        minutes = duration_seconds / 60
        if 3 <= minutes <= 10:
            score += 20
        elif 2 <= minutes <= 15:
            score += 10
        elif minutes < 1:
            score -= 20
        elif minutes > 30:
            score -= 10

    if 8 <= turn_count <= 30:
        score += 15
    elif 4 <= turn_count <= 40:
        score += 5
    elif turn_count < 4:
        score -= 10

    if resolution_status == "Resolved":
        score += 20
    elif resolution_status == "Escalated":
        score -= 15
    elif resolution_status == "Follow-up Required":
        score -= 5

    if sentiment == "positive":
        score += 15
    elif sentiment == "negative":
        score -= 20

    return max(0, min(100, score))


def detect_topics(text: str) -> TopicResult:
    lowered = text.lower()
    scores: dict[str, int] = {}
    for topic, keywords in TOPIC_KEYWORDS.items():
        count = sum(lowered.count(kw) for kw in keywords)
        if count > 0:
            scores[topic] = count

    ordered = sorted(scores, key=lambda t: scores[t], reverse=True)
    return TopicResult(
        topics=ordered,
        primary_topic=ordered[0] if ordered else "general",
        topic_scores=scores,
    )


def extract_named_entities(text: str) -> NamedEntities:
    loan_numbers: list[str] = []
    for pattern in _LOAN_NUMBER_PATTERNS:
        for match in _matches(pattern, text):
            cleaned = _LOAN_PREFIX.sub("", match).strip()
            if len(cleaned) >= 7:
                loan_numbers.append(cleaned)

    names = [
        name for name in _matches(_NAME_PATTERN, text)
        if not any(word in _NAME_STOPWORDS for word in name.split())
    ]

    dates: list[str] = []
    for pattern in _DATE_PATTERNS:
        dates.extend(_matches(pattern, text))

    return NamedEntities(
        loan_numbers=_unique(loan_numbers),
        customer_names=_unique(names)[:5],
        email_addresses=_unique(_matches(_EMAIL_PATTERN, text)),
        phone_numbers=_unique(re.sub(r"\D", "", p) for p in _matches(_PHONE_PATTERN, text)),
        addresses=_unique(_matches(_ADDRESS_PATTERN, text)),
        dates=_unique(dates),
        amounts=_unique(_matches(_AMOUNT_PATTERN, text)),
    )


def detect_self_service_opportunities(text: str) -> SelfServiceResult:
    lowered = text.lower()
    opportunities = [
        name for name, patterns in SELF_SERVICE_INDICATORS.items()
        if any(p in lowered for p in patterns)
    ]
    if len(opportunities) >= 3:
        potential = "high"
    elif opportunities:
        potential = "medium"
    else:
        potential = "low"
    return SelfServiceResult(
        has_self_service_opportunity=bool(opportunities),
        opportunities=opportunities,
        automation_potential=potential,
    )


def score_call(text: str, duration_seconds: Optional[float] = None) -> tuple[ResolutionResult, int]:
    """Resolution outcome and 0-100 quality score, without the topic and entity passes."""
    normalized = normalize_speaker_labels(text)
    turns = count_speaker_turns(normalized)
    resolution = detect_resolution_status(normalized)
    overall = analyze_sentiment(normalized)
    quality_score = calculate_call_quality_score(
        duration_seconds, turns.total_messages, resolution.resolution_status, overall.sentiment,
    )
    return resolution, quality_score


def analyze_transcript(text: str, duration_seconds: Optional[float] = None) -> TranscriptInsight:
    """Run every heuristic over one transcript."""
    normalized = normalize_speaker_labels(text)

    turns = count_speaker_turns(normalized)
    resolution = detect_resolution_status(normalized)
    overall = analyze_sentiment(normalized)
    customer = analyze_customer_sentiment(normalized)
    quality = assess_transcript_quality(normalized)
    topics = detect_topics(normalized)

    return TranscriptInsight(
        agent_turns=turns.agent_turns,
        customer_turns=turns.customer_turns,
        total_messages=turns.total_messages,
        resolution=resolution,
        overall_sentiment=overall.sentiment,
        sentiment_score=overall.score,
        customer_sentiment=customer.sentiment,
        customer_sentiment_score=customer.score,
        transcript_quality=quality.quality,
        quality_issues=quality.issues,
        call_quality_score=calculate_call_quality_score(
            duration_seconds, turns.total_messages, resolution.resolution_status, overall.sentiment,
        ),
        customer_intent=detect_customer_intent(normalized),
        all_issues=detect_all_issues(normalized),
        detected_topics=topics.topics,
        primary_topic=topics.primary_topic,
        topic_scores=topics.topic_scores,
        entities=extract_named_entities(text),
        self_service=detect_self_service_opportunities(normalized),
    )


def insight_for(record: TranscriptRecord) -> TranscriptInsight:
    return analyze_transcript(transcript_text(record), record.duration_seconds)
