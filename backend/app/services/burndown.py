"""Backlog burndown: created-vs-completed series, open work and velocity."""

import math
from datetime import UTC, datetime, timedelta
from typing import Optional

from ..schemas.tickets import (
    BurndownPoint,
    BurndownResponse,
    PriorityWork,
    TicketRecord,
    WorkStats,
)
from .metrics import round_half_up, round_int
from .ticket_analytics import to_ticket_row

OPEN_STATUSES = ("New", "Assigned", "In Progress", "Reopened")

PRIORITY_ORDER = ["Critical", "High", "Medium", "Low"]
PRIORITY_POINTS = {"Critical": 8, "High": 5, "Medium": 3, "Low": 1}
DEFAULT_POINTS = 1

ALLOWED_RANGES = (30, 60, 90)
SAMPLE_POINTS = 20
VELOCITY_WINDOW_DAYS = 7


def _completed_by(ticket: TicketRecord, moment: datetime) -> bool:
    return ticket.ticket_completed_at_utc is not None and ticket.ticket_completed_at_utc <= moment


def burndown_series(
    tickets: list[TicketRecord],
    days: int = 30,
    now: Optional[datetime] = None,
) -> list[BurndownPoint]:
    """Sample roughly 20 points across the last ``days`` days.

    Each point counts tickets created and completed by that moment, the
    remaining backlog, an ideal straight-line burn from the total to zero,
    and how many Critical/High tickets were open.
    """
    if days not in ALLOWED_RANGES:
        raise ValueError(f"days must be one of {ALLOWED_RANGES}")

    end = now or datetime.now(UTC)
    start = end - timedelta(days=days)

    relevant = [
        t for t in tickets
        if t.ticket_created_at_utc is not None and t.ticket_created_at_utc <= end
    ]
    if not relevant:
        return []

    total = len(relevant)
    ideal_burn_per_day = total / days
    step = math.ceil(days / SAMPLE_POINTS)

    series: list[BurndownPoint] = []
    for offset in range(0, days + 1, step):
        moment = start + timedelta(days=offset)
        created = [t for t in relevant if t.ticket_created_at_utc <= moment]
        still_open = [t for t in created if not _completed_by(t, moment)]
        completed = sum(1 for t in relevant if _completed_by(t, moment))

        series.append(BurndownPoint(
            date=moment.date().isoformat(),
            total=len(created),
            remaining=len(created) - completed,
            completed=completed,
            ideal=round_int(max(0.0, total - ideal_burn_per_day * offset)),
            critical_open=sum(1 for t in still_open if t.ticket_priority == "Critical"),
            high_open=sum(1 for t in still_open if t.ticket_priority == "High"),
        ))
    return series


def _priority_rank(priority: Optional[str]) -> int:
    # Unknown priorities sort after Low
    try:
        return PRIORITY_ORDER.index(priority)
    except ValueError:
        return len(PRIORITY_ORDER)


def open_work(
    tickets: list[TicketRecord],
    priorities: Optional[list[str]] = None,
) -> list[TicketRecord]:
    """Open tickets, Critical first, oldest first within a priority."""
    selected = [t for t in tickets if t.ticket_status in OPEN_STATUSES]
    if priorities:
        selected = [t for t in selected if t.ticket_priority in priorities]

    far_future = datetime.max.replace(tzinfo=UTC)
    return sorted(
        selected,
        key=lambda t: (_priority_rank(t.ticket_priority), t.ticket_created_at_utc or far_future),
    )


def work_stats(open_tickets: list[TicketRecord]) -> WorkStats:
    by_priority: dict[str, PriorityWork] = {}
    total_points = 0
    for t in open_tickets:
        points = PRIORITY_POINTS.get(t.ticket_priority or "", DEFAULT_POINTS)
        total_points += points
        bucket = by_priority.setdefault(t.ticket_priority or "Unknown", PriorityWork())
        bucket.count += 1
        bucket.points += points
    return WorkStats(total_open=len(open_tickets), total_points=total_points, by_priority=by_priority)


def velocity(tickets: list[TicketRecord], now: Optional[datetime] = None) -> float:
    """Tickets completed per day over the last week, one decimal."""
    since = (now or datetime.now(UTC)) - timedelta(days=VELOCITY_WINDOW_DAYS)
    completed = sum(
        1 for t in tickets
        if t.ticket_completed_at_utc is not None and t.ticket_completed_at_utc >= since
    )
    return round_half_up(completed / VELOCITY_WINDOW_DAYS, 1)


def estimated_days_to_clear(open_count: int, per_day: float) -> Optional[int]:
    if per_day <= 0:
        return None
    return math.ceil(open_count / per_day)


def build_burndown(
    tickets: list[TicketRecord],
    days: int = 30,
    priorities: Optional[list[str]] = None,
    now: Optional[datetime] = None,
) -> BurndownResponse:
    now = now or datetime.now(UTC)
    open_tickets = open_work(tickets, priorities)
    per_day = velocity(tickets, now)
    return BurndownResponse(
        series=burndown_series(tickets, days, now),
        open_tickets=[to_ticket_row(t) for t in open_tickets],
        work=work_stats(open_tickets),
        velocity=per_day,
        estimated_days_to_clear=estimated_days_to_clear(len(open_tickets), per_day),
    )
