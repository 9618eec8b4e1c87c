"""Transcript aggregations and drill-down filtering."""

import logging
from collections import Counter, defaultdict
from datetime import UTC, datetime
from typing import Optional

from ..schemas.transcripts import (
    AgentLeaderboardRow,
    CallDailyTrend,
    DailyTrend,
    DepartmentStat,
    HourVolume,
    SentimentCounts,
    SentimentSummary,
    SubcategoryStat,
    SummaryMetadata,
    TopicStat,
    TopicSummary,
    TranscriptListResponse,
    TranscriptPagination,
    TranscriptQuery,
    TranscriptRecord,
    TranscriptStats,
    TranscriptSummaryResponse,
)
from .metrics import DAY_NAMES, day_name, hour_label, mean, percent, round_half_up, round_int

logger = logging.getLogger(__name__)

SUMMARY_TOPIC_LIMIT = 50
SUMMARY_TREND_DAYS = 90
LEADERBOARD_SIZE = 15

_SENTIMENTS = ("positive", "neutral", "negative")
_DEPARTMENT_PREFIXES = ("SRVC - ", "SRVC/")


def call_sentiment(record: TranscriptRecord) -> str:
    """Customer sentiment from the AI analysis, else the basic keyword label."""
    if record.analysis and record.analysis.customer_sentiment:
        return record.analysis.customer_sentiment
    return record.basic_sentiment or "neutral"


def is_escalated(record: TranscriptRecord) -> bool:
    risk = record.analysis.escalation_risk if record.analysis else None
    if risk and risk.lower() == "high":
        return True
    return "escalat" in (record.disposition or "").lower()


def _newest_first(records: list[TranscriptRecord]) -> list[TranscriptRecord]:
    oldest = datetime.min.replace(tzinfo=UTC)
    return sorted(records, key=lambda r: r.call_start or oldest, reverse=True)


# ── Summary ──────────────────────────────────────────────────────────


def _sentiment_counts(values: list[Optional[str]]) -> SentimentCounts:
    counts = Counter(values)
    return SentimentCounts(**{s: counts[s] for s in _SENTIMENTS})


def _avg_or_zero(values: list[Optional[float]]) -> float:
    result = mean(v for v in values if v is not None)
    return result if result is not None else 0.0


def summarize_transcripts(transcripts: list[TranscriptRecord]) -> TranscriptSummaryResponse:
    """Sentiment, topic and daily-trend summary over analysed transcripts."""
    analysed = [t for t in transcripts if t.analysis is not None]
    analyses = [t.analysis for t in analysed]
    total = len(transcripts)

    by_topic: dict[str, list] = defaultdict(list)
    for a in analyses:
        if a.ai_discovered_topic:
            by_topic[a.ai_discovered_topic].append(a)
    topics = [
        TopicStat(
            name=name,
            count=len(group),
            avg_confidence=_avg_or_zero([a.topic_confidence for a in group]),
            avg_agent_score=_avg_or_zero([a.agent_sentiment_score for a in group]),
            avg_customer_score=_avg_or_zero([a.customer_sentiment_score for a in group]),
        )
        for name, group in by_topic.items()
    ]
    topics.sort(key=lambda t: t.count, reverse=True)

    subcategory_counts: Counter = Counter(
        (a.ai_discovered_subcategory, a.ai_discovered_topic or "Unknown")
        for a in analyses
        if a.ai_discovered_subcategory
    )
    subcategories = [
        SubcategoryStat(name=sub, count=count, parent_topic=parent)
        for (sub, parent), count in subcategory_counts.most_common(SUMMARY_TOPIC_LIMIT)
    ]

    daily: dict[str, DailyTrend] = {}
    for t in analysed:
        if t.call_start is None:
            continue
        key = t.call_start.date().isoformat()
        row = daily.setdefault(key, DailyTrend(date=key, total=0))
        row.total += 1
        if t.analysis.agent_sentiment in _SENTIMENTS:
            field = f"agent_{t.analysis.agent_sentiment}"
            setattr(row, field, getattr(row, field) + 1)
        if t.analysis.customer_sentiment in _SENTIMENTS:
            field = f"customer_{t.analysis.customer_sentiment}"
            setattr(row, field, getattr(row, field) + 1)
    trends = [daily[d] for d in sorted(daily, reverse=True)[:SUMMARY_TREND_DAYS]]

    return TranscriptSummaryResponse(
        metadata=SummaryMetadata(
            total_transcripts=total,
            analyzed_transcripts=len(analysed),
            analysis_progress=len(analysed) / total * 100 if total else 0,
        ),
        summary=SentimentSummary(
            agent_sentiment=_sentiment_counts([a.agent_sentiment for a in analyses]),
            customer_sentiment=_sentiment_counts([a.customer_sentiment for a in analyses]),
            avg_agent_score=_avg_or_zero([a.agent_sentiment_score for a in analyses]),
            avg_customer_score=_avg_or_zero([a.customer_sentiment_score for a in analyses]),
        ),
        topics=TopicSummary(main_topics=topics[:SUMMARY_TOPIC_LIMIT], subcategories=subcategories),
        daily_trends=trends,
    )


# ── Drill-down filtering ─────────────────────────────────────────────


def _ci_equal(value: Optional[str], other: str) -> bool:
    return value is not None and value.lower() == other.lower()


def _ci_contains(value: Optional[str], needle: str) -> bool:
    return value is not None and needle.lower() in value.lower()


def _matches_topic(record: TranscriptRecord, topic: str, no_subcategory: bool) -> bool:
    analysis = record.analysis
    if no_subcategory:
        return (
            analysis is not None
            and _ci_equal(analysis.ai_discovered_topic, topic)
            and not analysis.ai_discovered_subcategory
        )
    if any(_ci_equal(t, topic) for t in record.detected_topics):
        return True
    if analysis is None:
        return False
    return _ci_contains(analysis.ai_discovered_topic, topic) or _ci_equal(
        analysis.ai_discovered_subcategory, topic
    )


def _matches_search(record: TranscriptRecord, term: str) -> bool:
    summary = record.analysis.summary if record.analysis else None
    fields = [record.vendor_call_key, record.agent_name, record.department, record.disposition, summary]
    return (
        any(_ci_contains(f, term) for f in fields)
        or any(_ci_contains(t, term) for t in record.detected_topics)
        or any(_ci_contains(m.text, term) for m in record.messages)
    )


def _matches(record: TranscriptRecord, query: TranscriptQuery) -> bool:
    start = record.call_start
    analysis = record.analysis
    agent_sentiment = analysis.agent_sentiment if analysis else None
    customer_sentiment = analysis.customer_sentiment if analysis else None

    if query.date or query.start_date or query.end_date or query.hour or query.day_of_week:
        if start is None:
            return False
        day = start.date()
        if query.date and day != query.date:
            return False
        if query.start_date and day < query.start_date:
            return False
        if query.end_date and day > query.end_date:
            return False
        if query.hour and hour_label(start.hour) != query.hour:
            return False
        if query.day_of_week and day_name(start) != query.day_of_week:
            return False

    if query.sentiment and query.sentiment not in (agent_sentiment, customer_sentiment):
        return False
    if query.agent_sentiment and agent_sentiment != query.agent_sentiment:
        return False
    if query.customer_sentiment and query.customer_sentiment not in (
        customer_sentiment, record.basic_sentiment
    ):
        return False
    if query.topic and not _matches_topic(record, query.topic, query.no_subcategory):
        return False
    if query.department and not _ci_contains(record.department, query.department):
        return False
    if query.agent and not _ci_contains(record.agent_name, query.agent):
        return False
    if query.escalated is not None and is_escalated(record) != query.escalated:
        return False
    if query.search and not _matches_search(record, query.search):
        return False
    return True


def filter_transcripts(transcripts: list[TranscriptRecord], query: TranscriptQuery) -> list[TranscriptRecord]:
    """Apply every set filter in ``query``; newest calls first."""
    return _newest_first([t for t in transcripts if _matches(t, query)])


def list_transcripts(transcripts: list[TranscriptRecord], query: TranscriptQuery) -> TranscriptListResponse:
    matched = filter_transcripts(transcripts, query)
    page = matched[query.offset:query.offset + query.limit]
    return TranscriptListResponse(
        data=page,
        pagination=TranscriptPagination(
            total=len(matched),
            limit=query.limit,
            offset=query.offset,
            has_more=query.offset + query.limit < len(matched),
        ),
    )


# ── Dashboard stats ──────────────────────────────────────────────────


def _clean_department(name: str) -> str:
    for prefix in _DEPARTMENT_PREFIXES:
        name = name.replace(prefix, "")
    return name


def department_breakdown(transcripts: list[TranscriptRecord]) -> list[DepartmentStat]:
    """Per-department call counts with positive/negative rates (one decimal)."""
    groups: dict[str, Counter] = defaultdict(Counter)
    for t in transcripts:
        department = t.department or "NULL"
        groups[department]["count"] += 1
        groups[department][call_sentiment(t)] += 1

    rows = [
        DepartmentStat(
            name=_clean_department(name),
            count=c["count"],
            positive=c["positive"],
            negative=c["negative"],
            positive_rate=percent(c["positive"], c["count"], 1),
            negative_rate=percent(c["negative"], c["count"], 1),
        )
        for name, c in groups.items()
        if name != "NULL"
    ]
    rows.sort(key=lambda r: r.count, reverse=True)
    return rows


def hourly_volume(transcripts: list[TranscriptRecord]) -> list[HourVolume]:
    counts = Counter(t.call_start.hour for t in transcripts if t.call_start is not None)
    return [HourVolume(hour=hour_label(h), count=counts[h]) for h in sorted(counts)]


def agent_leaderboard(transcripts: list[TranscriptRecord], limit: int = LEADERBOARD_SIZE) -> list[AgentLeaderboardRow]:
    groups: dict[str, list[Optional[float]]] = defaultdict(list)
    for t in transcripts:
        if not t.agent_name:
            continue
        groups[t.agent_name].append(t.analysis.agent_performance if t.analysis else None)

    rows = []
    for name, scores in groups.items():
        avg = mean(s for s in scores if s is not None)
        rows.append(AgentLeaderboardRow(
            name=name,
            count=len(scores),
            avg_performance=round_half_up(avg, 1) if avg is not None else None,
        ))
    rows.sort(key=lambda r: r.count, reverse=True)
    return rows[:limit]


def _call_daily_trends(transcripts: list[TranscriptRecord]) -> list[CallDailyTrend]:
    daily: dict[str, CallDailyTrend] = {}
    for t in transcripts:
        if t.call_start is None:
            continue
        key = t.call_start.date().isoformat()
        row = daily.setdefault(key, CallDailyTrend(date=key, total=0))
        row.total += 1
        sentiment = call_sentiment(t)
        if sentiment in _SENTIMENTS:
            setattr(row, sentiment, getattr(row, sentiment) + 1)
    return [daily[d] for d in sorted(daily)]


def compute_transcript_stats(transcripts: list[TranscriptRecord]) -> TranscriptStats:
    """Dashboard statistics for the transcripts page."""
    total = len(transcripts)

    topics: Counter = Counter()
    for t in transcripts:
        if t.detected_topics:
            topics.update(t.detected_topics)
        elif t.analysis and t.analysis.ai_discovered_topic:
            topics[t.analysis.ai_discovered_topic] += 1

    weekday_counts = Counter(day_name(t.call_start) for t in transcripts if t.call_start is not None)
    durations = [t.duration_seconds for t in transcripts if t.duration_seconds is not None]
    performance = mean(
        t.analysis.agent_performance
        for t in transcripts
        if t.analysis and t.analysis.agent_performance is not None
    )

    logger.info("Computed transcript stats over %d calls", total)
    return TranscriptStats(
        total_calls=total,
        sentiment_distribution=dict(Counter(call_sentiment(t) for t in transcripts)),
        topic_distribution=dict(topics.most_common()),
        escalation_risk_distribution=dict(Counter(
            t.analysis.escalation_risk
            for t in transcripts
            if t.analysis and t.analysis.escalation_risk
        )),
        departments=department_breakdown(transcripts),
        agent_leaderboard=agent_leaderboard(transcripts),
        by_day_of_week={day: weekday_counts[day] for day in DAY_NAMES},
        hourly_volume=hourly_volume(transcripts),
        avg_duration=round_int(mean(durations) or 0),
        avg_hold_time=round_int(mean(t.hold_duration for t in transcripts) or 0),
        avg_messages_per_call=round_half_up(mean(len(t.messages) for t in transcripts) or 0, 1),
        avg_agent_performance=round_half_up(performance, 1) if performance is not None else None,
        daily_trends=_call_daily_trends(transcripts),
    )
