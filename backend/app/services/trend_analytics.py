"""Category trends across tickets and calls: baseline vs recent, monthly mix, agents."""

import calendar
import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Optional

from ..schemas.analytics import (
    AgentPerformance,
    BaselineComparison,
    CategoryStat,
    MonthlyBreakdown,
)
from ..schemas.tickets import TicketRecord
from ..schemas.transcripts import TranscriptRecord
from .categorization import categorize_text
from .metrics import percent, round_half_up
from .transcript_analysis import score_call, transcript_text
from .transcript_analytics import call_sentiment, is_escalated

logger = logging.getLogger(__name__)

DEFAULT_DAYS_RECENT = 21
TREND_THRESHOLD = 10
ANALYTICS_TYPES = ("baseline", "monthly", "agent", "categories", "all")


@dataclass(frozen=True)
class CategorizedRecord:
    """A ticket or call reduced to its date and category."""
    date: Optional[datetime]
    category: str
    subcategory: str
    confidence: float
    source: str


def categorize_records(
    tickets: list[TicketRecord],
    transcripts: list[TranscriptRecord],
) -> list[CategorizedRecord]:
    records: list[CategorizedRecord] = []
    for t in tickets:
        result = categorize_text(t.ticket_description or "", title=t.ticket_title)
        records.append(CategorizedRecord(
            date=t.ticket_created_at_utc,
            category=result.category,
            subcategory=result.subcategory,
            confidence=result.confidence,
            source="ticket",
        ))
    for t in transcripts:
        result = categorize_text(transcript_text(t))
        records.append(CategorizedRecord(
            date=t.call_start,
            category=result.category,
            subcategory=result.subcategory,
            confidence=result.confidence,
            source="transcript",
        ))
    return records


def _trend(percent_change: float) -> str:
    if percent_change > TREND_THRESHOLD:
        return "increasing"
    if percent_change < -TREND_THRESHOLD:
        return "decreasing"
    return "stable"


def baseline_comparison(
    records: list[CategorizedRecord],
    days_recent: int = DEFAULT_DAYS_RECENT,
    now: Optional[datetime] = None,
) -> list[BaselineComparison]:
    """Compare category volume in the last ``days_recent`` days with everything before.

    Records without a date are ignored. Categories that only appear in the
    recent window report a 0% change. Largest absolute changes come first.
    """
    recent_start = (now or datetime.now(UTC)) - timedelta(days=days_recent)
    baseline: Counter = Counter()
    recent: Counter = Counter()
    for r in records:
        if r.date is None:
            continue
        bucket = recent if r.date >= recent_start else baseline
        bucket[(r.category, r.subcategory)] += 1

    comparison = []
    for key in baseline.keys() | recent.keys():
        category, subcategory = key
        before, after = baseline[key], recent[key]
        change = after - before
        pct = change / before * 100 if before else 0.0
        comparison.append(BaselineComparison(
            category=category,
            subcategory=subcategory,
            baseline_count=before,
            recent_count=after,
            change=change,
            percent_change=round_half_up(pct, 1),
            trend=_trend(pct),
        ))
    comparison.sort(key=lambda c: (-abs(c.change), c.category, c.subcategory))
    return comparison


def monthly_breakdown(records: list[CategorizedRecord]) -> list[MonthlyBreakdown]:
    """Category counts per calendar month, each as a share of that month's total."""
    months: dict[tuple[int, int], Counter] = defaultdict(Counter)
    for r in records:
        if r.date is None:
            continue
        months[(r.date.year, r.date.month)][(r.category, r.subcategory)] += 1

    breakdown = []
    for (year, month) in sorted(months):
        counts = months[(year, month)]
        total = sum(counts.values())
        for (category, subcategory), count in counts.most_common():
            breakdown.append(MonthlyBreakdown(
                month=calendar.month_name[month],
                year=year,
                category=category,
                subcategory=subcategory,
                count=count,
                percentage=percent(count, total, 1),
            ))
    return breakdown


def agent_performance(transcripts: list[TranscriptRecord]) -> list[AgentPerformance]:
    """Resolution, escalation and quality figures per agent from the call heuristics."""
    groups: dict[str, list[TranscriptRecord]] = defaultdict(list)
    for t in transcripts:
        groups[t.agent_name or "Unknown"].append(t)

    performance = []
    for agent, calls in groups.items():
        total = len(calls)
        resolved = escalated = positive = 0
        quality = 0
        categories: Counter = Counter()
        for call in calls:
            text = transcript_text(call)
            resolution, call_quality = score_call(text, call.duration_seconds)
            resolved += resolution.was_resolved
            escalated += resolution.was_escalated or is_escalated(call)
            positive += call_sentiment(call) == "positive"
            quality += call_quality
            categories[categorize_text(text).category] += 1

        performance.append(AgentPerformance(
            agent_name=agent,
            total_calls=total,
            avg_duration=round_half_up(sum(c.duration_seconds or 0 for c in calls) / total, 1),
            resolution_rate=percent(resolved, total, 1),
            escalation_rate=percent(escalated, total, 1),
            avg_call_quality=round_half_up(quality / total, 1),
            positive_sentiment_rate=percent(positive, total, 1),
            category_distribution=dict(categories),
        ))
    performance.sort(key=lambda p: p.total_calls, reverse=True)
    return performance


def category_stats(records: list[CategorizedRecord]) -> list[CategoryStat]:
    counts: Counter = Counter()
    confidence: dict[tuple[str, str], float] = defaultdict(float)
    for r in records:
        key = (r.category, r.subcategory)
        counts[key] += 1
        confidence[key] += r.confidence

    total = len(records)
    return [
        CategoryStat(
            category=category,
            subcategory=subcategory,
            count=count,
            percentage=percent(count, total, 1),
            avg_confidence=round_half_up(confidence[(category, subcategory)] / count, 2),
        )
        for (category, subcategory), count in counts.most_common()
    ]


def compute_analytics(
    kind: str,
    tickets: list[TicketRecord],
    transcripts: list[TranscriptRecord],
    days_recent: int = DEFAULT_DAYS_RECENT,
    now: Optional[datetime] = None,
) -> Any:
    """
    Build one analytics view, or all of them for ``kind == "all"``.

    Raises:
        ValueError: ``kind`` is not one of ``ANALYTICS_TYPES``.
    """
    if kind not in ANALYTICS_TYPES:
        raise ValueError(f"Invalid type parameter: {kind}")

    logger.info("Computing %s analytics over %d tickets and %d calls", kind, len(tickets), len(transcripts))
    if kind == "agent":
        return agent_performance(transcripts)

    records = categorize_records(tickets, transcripts)
    if kind == "baseline":
        return baseline_comparison(records, days_recent, now)
    if kind == "monthly":
        return monthly_breakdown(records)
    if kind == "categories":
        return category_stats(records)
    return {
        "baseline": baseline_comparison(records, days_recent, now),
        "monthly": monthly_breakdown(records),
        "agent": agent_performance(transcripts),
        "categories": category_stats(records),
    }
