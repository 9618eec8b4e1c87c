"""Ticket dashboard aggregations.

Everything here is a pure function over a list of ``TicketRecord``; callers
pass in the servicing-scoped tickets (see ``data_source.servicing_tickets``).
"""

import logging
from collections import Counter, defaultdict
from typing import Any, Optional

from ..schemas.tickets import (
    AdvancedChartsResponse,
    AssigneeBreakdown,
    AssigneeRadar,
    DashboardStats,
    DayCount,
    Heatmap,
    HeatmapCell,
    Heatmaps,
    HourCount,
    Issue,
    MatrixCell,
    MonthCount,
    NameValue,
    ProjectBreakdown,
    ProjectWorkload,
    ScatterPoint,
    TicketRecord,
    TicketRow,
    TicketStats,
    VolumeTrends,
)
from .categorization import categorize_ticket_title
from .metrics import (
    DAY_NAMES,
    bounded_mean,
    day_name,
    hour_label,
    percent,
    round_half_up,
    round_int,
    top_counts,
    truncate_label,
)

logger = logging.getLogger(__name__)

MAX_RESPONSE_MINUTES = 1_000_000
MAX_RESOLUTION_MINUTES = 10_000_000

PRIORITIES = ["Critical", "High", "Medium", "Low"]
_PRIORITY_BUCKETS = {p.lower() for p in PRIORITIES}
HOUR_LABELS = [hour_label(h) for h in range(24)]

SAMPLE_FIELDS = {
    "ticket_key",
    "ticket_title",
    "ticket_status",
    "ticket_priority",
    "project_name",
    "assigned_user_name",
    "ticket_created_at_utc",
    "time_to_resolution_in_minutes",
    "is_ticket_complete",
}


def _valid_resolution(minutes: Optional[float]) -> bool:
    return minutes is not None and 0 < minutes < MAX_RESOLUTION_MINUTES


def to_ticket_row(ticket: TicketRecord) -> TicketRow:
    """Flatten a record into the shape the ticket table renders."""
    return TicketRow(
        key=ticket.ticket_key,
        title=ticket.ticket_title or "",
        status=ticket.ticket_status or "Unknown",
        priority=ticket.ticket_priority or "Unknown",
        project=ticket.project_name or "Unknown",
        assignee=ticket.assigned_user_name or "Unassigned",
        category=categorize_ticket_title(ticket.ticket_title),
        created=ticket.ticket_created_at_utc.isoformat() if ticket.ticket_created_at_utc else "",
        response_time=ticket.time_to_first_response_in_minutes,
        resolution_time=ticket.time_to_resolution_in_minutes,
        complete=ticket.is_ticket_complete,
    )


# ── Headline stats ───────────────────────────────────────────────────


def compute_ticket_stats(tickets: list[TicketRecord]) -> TicketStats:
    total = len(tickets)
    completed = sum(1 for t in tickets if t.is_ticket_complete)
    avg_response = bounded_mean(
        (t.time_to_first_response_in_minutes for t in tickets), MAX_RESPONSE_MINUTES
    )
    avg_resolution = bounded_mean(
        (t.time_to_resolution_in_minutes for t in tickets), MAX_RESOLUTION_MINUTES
    )
    return TicketStats(
        total_tickets=total,
        completed_tickets=completed,
        open_tickets=total - completed,
        avg_response_time_minutes=round_int(avg_response),
        avg_resolution_time_minutes=round_int(avg_resolution),
        completion_rate=percent(completed, total),
    )


def _month_counts(tickets: list[TicketRecord]) -> Counter:
    counts: Counter = Counter()
    for t in tickets:
        if t.ticket_created_at_utc is not None:
            counts[t.ticket_created_at_utc.strftime("%Y-%m")] += 1
    return counts


def tickets_by_month(tickets: list[TicketRecord]) -> list[MonthCount]:
    counts = _month_counts(tickets)
    return [MonthCount(date=month, count=counts[month]) for month in sorted(counts)]


# ── Breakdowns ───────────────────────────────────────────────────────


def _avg_hours(resolution_minutes: list[float]) -> int:
    if not resolution_minutes:
        return 0
    return round_int(sum(resolution_minutes) / len(resolution_minutes) / 60)


def project_breakdown(tickets: list[TicketRecord], limit: int = 10) -> list[ProjectBreakdown]:
    groups: dict[str, dict[str, Any]] = {}
    for t in tickets:
        project = t.project_name or "Unknown"
        g = groups.setdefault(project, {"total": 0, "completed": 0, "resolutions": []})
        g["total"] += 1
        if t.is_ticket_complete:
            g["completed"] += 1
        if _valid_resolution(t.time_to_resolution_in_minutes):
            g["resolutions"].append(t.time_to_resolution_in_minutes)

    rows = [
        ProjectBreakdown(
            project=project,
            total=g["total"],
            completed=g["completed"],
            open=g["total"] - g["completed"],
            open_rate=percent(g["total"] - g["completed"], g["total"]),
            avg_resolution_hours=_avg_hours(g["resolutions"]),
        )
        for project, g in groups.items()
    ]
    rows.sort(key=lambda r: r.total, reverse=True)
    return rows[:limit]


def assignee_breakdown(tickets: list[TicketRecord], limit: int = 15) -> list[AssigneeBreakdown]:
    """Per-assignee workload keyed by email; tickets without an email are skipped."""
    groups: dict[str, dict[str, Any]] = {}
    for t in tickets:
        email = t.assigned_user_email
        if not email:
            continue
        g = groups.setdefault(email, {
            "name": t.assigned_user_name or email,
            "total": 0,
            "completed": 0,
            "resolutions": [],
        })
        g["total"] += 1
        if t.is_ticket_complete:
            g["completed"] += 1
        if _valid_resolution(t.time_to_resolution_in_minutes):
            g["resolutions"].append(t.time_to_resolution_in_minutes)

    rows = [
        AssigneeBreakdown(
            email=email,
            name=g["name"],
            total=g["total"],
            completed=g["completed"],
            open=g["total"] - g["completed"],
            open_rate=percent(g["total"] - g["completed"], g["total"]),
            avg_resolution_hours=_avg_hours(g["resolutions"]),
        )
        for email, g in groups.items()
    ]
    rows.sort(key=lambda r: r.total, reverse=True)
    return rows[:limit]


def status_breakdown(tickets: list[TicketRecord], limit: int = 10) -> list[NameValue]:
    counts: Counter = Counter()
    for t in tickets:
        status = t.ticket_status or "Unknown"
        if len(status) > 50:
            continue
        counts[status] += 1
    return [NameValue(name=name, value=value) for name, value in top_counts(counts, limit)]


def priority_breakdown(tickets: list[TicketRecord]) -> list[NameValue]:
    counts: Counter = Counter(
        t.ticket_priority for t in tickets if t.ticket_priority in PRIORITIES
    )
    return [NameValue(name=name, value=value) for name, value in counts.items()]


# ── Heatmaps ─────────────────────────────────────────────────────────


def _day_hour_counts(tickets: list[TicketRecord]) -> Counter:
    counts: Counter = Counter()
    for t in tickets:
        created = t.ticket_created_at_utc
        if created is not None:
            counts[(hour_label(created.hour), day_name(created))] += 1
    return counts


def day_hour_heatmap(tickets: list[TicketRecord]) -> Heatmap:
    """7 x 24 grid of ticket creation times (UTC)."""
    counts = _day_hour_counts(tickets)
    cells = [
        HeatmapCell(x=hour, y=day, value=counts[(hour, day)])
        for day in DAY_NAMES
        for hour in HOUR_LABELS
    ]
    return Heatmap(data=cells, x_labels=HOUR_LABELS, y_labels=DAY_NAMES)


def project_status_heatmap(
    tickets: list[TicketRecord],
    projects: Optional[list[ProjectBreakdown]] = None,
    status_limit: int = 6,
) -> Heatmap:
    if projects is None:
        projects = project_breakdown(tickets)

    per_project: dict[str, Counter] = defaultdict(Counter)
    all_statuses: Counter = Counter()
    for t in tickets:
        status = t.ticket_status or "Unknown"
        if len(status) >= 30:
            continue
        per_project[t.project_name or "Unknown"][status] += 1
        all_statuses[status] += 1

    top_statuses = [s for s, _ in all_statuses.most_common(status_limit)]
    cells = [
        HeatmapCell(
            x=truncate_label(status, 12),
            y=truncate_label(proj.project, 15),
            value=per_project[proj.project][status],
        )
        for proj in projects
        for status in top_statuses
    ]
    return Heatmap(
        data=cells,
        x_labels=[truncate_label(s, 12) for s in top_statuses],
        y_labels=[truncate_label(p.project, 15) for p in projects],
    )


# ── Issues & trends ──────────────────────────────────────────────────


def detect_issues(
    tickets: list[TicketRecord],
    stats: Optional[TicketStats] = None,
    projects: Optional[list[ProjectBreakdown]] = None,
    assignees: Optional[list[AssigneeBreakdown]] = None,
) -> list[Issue]:
    """Alert rows for the dashboard's issue panel."""
    stats = stats or compute_ticket_stats(tickets)
    projects = projects if projects is not None else project_breakdown(tickets)
    assignees = assignees if assignees is not None else assignee_breakdown(tickets)
    issues: list[Issue] = []

    for proj in projects:
        if proj.open_rate > 80 and proj.total > 100:
            issues.append(Issue(
                category="Project Health",
                metric=proj.project[:20],
                value=proj.open_rate,
                severity="critical" if proj.open_rate == 100 else "warning",
                description=f"{proj.open:,} open of {proj.total:,} total",
            ))

    for a in assignees:
        if a.open > 1000:
            display = a.name.split(",")[0] or a.email.split("@")[0]
            issues.append(Issue(
                category="Workload",
                metric=display[:15],
                value=a.open,
                severity="critical" if a.open > 3000 else "warning",
                description=f"{a.open_rate}% of {a.total:,} assigned",
            ))

    slow = sum(
        1 for t in tickets
        if t.time_to_first_response_in_minutes
        and t.time_to_first_response_in_minutes > 1440
        and not t.is_ticket_complete
    )
    if slow:
        issues.append(Issue(
            category="Response Time",
            metric=">24h No Response",
            value=slow,
            severity="critical" if slow > 5000 else "warning",
            description="Open tickets waiting over 24 hours",
        ))

    months = sorted(_month_counts(tickets).items(), reverse=True)
    if len(months) >= 2:
        (latest_month, latest), (_, previous) = months[0], months[1]
        change = round_int((latest - previous) / previous * 100)
        if abs(change) > 20:
            sign = "+" if change > 0 else ""
            issues.append(Issue(
                category="Volume Trend",
                metric=latest_month,
                value=change,
                severity="warning" if change > 50 else "normal",
                description=f"{sign}{change}% vs previous month",
            ))

    if stats.open_tickets > 30000:
        open_severity = "critical"
    elif stats.open_tickets > 10000:
        open_severity = "warning"
    else:
        open_severity = "normal"
    issues.append(Issue(
        category="Summary",
        metric="Total Open",
        value=stats.open_tickets,
        severity=open_severity,
        description=f"{stats.completion_rate}% completion rate",
    ))

    avg_hours = round_int(stats.avg_resolution_time_minutes / 60)
    issues.append(Issue(
        category="Summary",
        metric="Avg Resolution",
        value=avg_hours,
        # more than a week
        severity="warning" if stats.avg_resolution_time_minutes > 10080 else "good",
        description=f"{avg_hours} hours average",
    ))
    return issues


def volume_trends(
    tickets: list[TicketRecord],
    projects: Optional[list[ProjectBreakdown]] = None,
    assignees: Optional[list[AssigneeBreakdown]] = None,
) -> VolumeTrends:
    projects = projects if projects is not None else project_breakdown(tickets)
    assignees = assignees if assignees is not None else assignee_breakdown(tickets)
    counts = _day_hour_counts(tickets)

    by_day = [
        DayCount(day=day, count=sum(counts[(hour, day)] for hour in HOUR_LABELS))
        for day in DAY_NAMES
    ]
    by_hour = [
        HourCount(hour=hour, count=sum(counts[(hour, day)] for day in DAY_NAMES))
        for hour in HOUR_LABELS
    ]
    by_hour.sort(key=lambda h: h.count, reverse=True)

    return VolumeTrends(
        volume_by_day_of_week=by_day,
        peak_hours=by_hour[:5],
        projects_at_risk=sum(1 for p in projects if p.open_rate > 50),
        overloaded_assignees=sum(1 for a in assignees if a.open > 500),
    )


def build_dashboard(tickets: list[TicketRecord]) -> DashboardStats:
    """Assemble the full ticket dashboard payload."""
    stats = compute_ticket_stats(tickets)
    projects = project_breakdown(tickets)
    assignees = assignee_breakdown(tickets)
    logger.info("Built ticket dashboard over %d tickets", stats.total_tickets)
    return DashboardStats(
        stats=stats,
        tickets_by_month=tickets_by_month(tickets),
        project_breakdown=projects,
        assignee_breakdown=assignees,
        status_breakdown=status_breakdown(tickets),
        priority_breakdown=priority_breakdown(tickets),
        heatmaps=Heatmaps(
            day_hour=day_hour_heatmap(tickets),
            project_status=project_status_heatmap(tickets, projects),
        ),
        issues=detect_issues(tickets, stats, projects, assignees),
        trends=volume_trends(tickets, projects, assignees),
    )


def ticket_sample(tickets: list[TicketRecord], limit: int = 100) -> list[dict[str, Any]]:
    """First ``limit`` tickets trimmed to the fields used as AI context."""
    return [t.model_dump(mode="json", include=SAMPLE_FIELDS) for t in tickets[:limit]]


# ── Advanced charts ──────────────────────────────────────────────────


def _scatter(rows: list[TicketRow]) -> list[ScatterPoint]:
    return [
        ScatterPoint(
            x=r.response_time / 60,
            y=r.resolution_time / 60,
            key=r.key,
            title=r.title,
            priority=r.priority,
            status=r.status,
            category=r.category,
            project=r.project,
            assignee=r.assignee,
        )
        for r in rows
        if (r.response_time or 0) > 0 and (r.resolution_time or 0) > 0
    ]


def _project_workload(rows: list[TicketRow]) -> list[ProjectWorkload]:
    groups: dict[str, dict[str, float]] = {}
    for r in rows:
        g = groups.setdefault(r.project, {
            "total": 0, "critical": 0, "high": 0, "medium": 0, "low": 0, "resolution": 0.0,
        })
        g["total"] += 1
        bucket = r.priority.lower()
        if bucket in _PRIORITY_BUCKETS:
            g[bucket] += 1
        if (r.resolution_time or 0) > 0:
            g["resolution"] += r.resolution_time

    return [
        ProjectWorkload(
            project=project,
            total=int(g["total"]),
            critical=int(g["critical"]),
            high=int(g["high"]),
            medium=int(g["medium"]),
            low=int(g["low"]),
            avg_resolution=g["resolution"] / g["total"] / 60 if g["resolution"] > 0 else 0.0,
        )
        for project, g in groups.items()
    ]


def _assignee_radar(rows: list[TicketRow], limit: int = 8) -> list[AssigneeRadar]:
    groups: dict[str, dict[str, float]] = {}
    for r in rows:
        g = groups.setdefault(r.assignee, {"volume": 0, "response": 0.0, "resolution": 0.0, "completed": 0})
        g["volume"] += 1
        if (r.response_time or 0) > 0:
            g["response"] += r.response_time
        if (r.resolution_time or 0) > 0:
            g["resolution"] += r.resolution_time
        if r.status in ("Request Complete", "Closed"):
            g["completed"] += 1

    ranked = sorted(groups.items(), key=lambda item: item[1]["volume"], reverse=True)[:limit]
    if not ranked:
        return []

    summaries = [
        (
            name,
            int(g["volume"]),
            round_half_up(g["response"] / g["volume"] / 60, 1),
            round_half_up(g["resolution"] / g["volume"] / 60, 1),
            round_half_up(g["completed"] / g["volume"] * 100, 1),
        )
        for name, g in ranked
    ]
    max_volume = max(s[1] for s in summaries)
    max_response = max(s[2] for s in summaries)
    max_resolution = max(s[3] for s in summaries)

    return [
        AssigneeRadar(
            assignee=name.split(",")[0],
            volume=volume,
            avg_response=avg_response,
            avg_resolution=avg_resolution,
            completion_rate=completion,
            volume_score=round_int(volume / max_volume * 100),
            fast_response_score=(
                round_int(100 - avg_response / max_response * 100) if max_response > 0 else 100
            ),
            fast_resolution_score=(
                round_int(100 - avg_resolution / max_resolution * 100) if max_resolution > 0 else 100
            ),
        )
        for name, volume, avg_response, avg_resolution, completion in summaries
    ]


def advanced_charts(tickets: list[TicketRecord]) -> AdvancedChartsResponse:
    rows = [to_ticket_row(t) for t in tickets]

    categories: Counter = Counter(r.category for r in rows)
    treemap = sorted(
        (NameValue(name=name, value=value) for name, value in categories.items()),
        key=lambda nv: nv.value,
        reverse=True,
    )

    matrix: Counter = Counter((r.priority, r.status) for r in rows)

    return AdvancedChartsResponse(
        scatter=_scatter(rows),
        project_workload=_project_workload(rows),
        category_distribution=treemap,
        priority_status_matrix=[
            MatrixCell(priority=p, status=s, count=c) for (p, s), c in matrix.items()
        ],
        assignee_radar=_assignee_radar(rows),
    )
