"""Filtering, sorting, paging and grouping for the ticket table."""

import math
from collections import Counter
from typing import Any, Callable, Optional

from ..core.config import get_settings
from ..schemas.tickets import (
    FilterOptions,
    GroupResponse,
    GroupRow,
    Pagination,
    TicketListResponse,
    TicketQuery,
    TicketRecord,
)
from .categorization import categorize_ticket_title, title_categories
from .metrics import percent, round_int, top_counts
from .ticket_analytics import to_ticket_row

_SORT_KEYS: dict[str, Callable[[TicketRecord], Any]] = {
    "key": lambda t: t.ticket_key,
    "title": lambda t: t.ticket_title,
    "status": lambda t: t.ticket_status,
    "priority": lambda t: t.ticket_priority,
    "project": lambda t: t.project_name,
    "assignee": lambda t: t.assigned_user_name,
    "created": lambda t: t.ticket_created_at_utc,
    "resolutionTime": lambda t: t.time_to_resolution_in_minutes,
}

_GROUP_KEYS: dict[str, Callable[[TicketRecord], Optional[str]]] = {
    "project": lambda t: t.project_name,
    "status": lambda t: t.ticket_status,
    "priority": lambda t: t.ticket_priority,
    "assignee": lambda t: t.assigned_user_name,
}


def _contains(value: Optional[str], needle: str) -> bool:
    return value is not None and needle in value.lower()


def _matches(ticket: TicketRecord, query: TicketQuery, projects: set[str]) -> bool:
    if ticket.project_name not in projects:
        return False
    if query.search:
        needle = query.search.lower()
        if not (
            _contains(ticket.ticket_title, needle)
            or _contains(ticket.ticket_key, needle)
            or _contains(ticket.assigned_user_name, needle)
        ):
            return False
    if query.statuses and ticket.ticket_status not in query.statuses:
        return False
    if query.priorities and ticket.ticket_priority not in query.priorities:
        return False
    if query.assignees and ticket.assigned_user_name not in query.assignees:
        return False
    if query.category and categorize_ticket_title(ticket.ticket_title) != query.category:
        return False
    return True


def sort_tickets(tickets: list[TicketRecord], field: str, order: str) -> list[TicketRecord]:
    """Sort on one column; missing values always go last."""
    key = _SORT_KEYS.get(field, _SORT_KEYS["created"])
    present = [t for t in tickets if key(t) is not None]
    missing = [t for t in tickets if key(t) is None]
    present.sort(key=key, reverse=order == "desc")
    return present + missing


def _top_values(tickets: list[TicketRecord], getter: Callable[[TicketRecord], Optional[str]],
                limit: Optional[int] = None) -> list[str]:
    counts = Counter(v for v in map(getter, tickets) if v)
    return [value for value, _ in top_counts(counts, limit)]


def filter_options(tickets: list[TicketRecord]) -> FilterOptions:
    """Dropdown values for the ticket table, most frequent first."""
    projects = set(get_settings().servicing_projects)
    scoped = [t for t in tickets if t.project_name in projects]
    return FilterOptions(
        statuses=_top_values(scoped, _GROUP_KEYS["status"], 20),
        projects=_top_values(scoped, _GROUP_KEYS["project"], 20),
        priorities=_top_values(scoped, _GROUP_KEYS["priority"]),
        assignees=_top_values(scoped, _GROUP_KEYS["assignee"], 100),
        categories=title_categories(),
    )


def list_tickets(tickets: list[TicketRecord], query: TicketQuery) -> TicketListResponse:
    """One page of the ticket table.

    Tickets are scoped to the servicing projects unless ``query.projects``
    names specific projects, which replaces the scope.
    """
    projects = set(query.projects) if query.projects else set(get_settings().servicing_projects)
    matched = [t for t in tickets if _matches(t, query, projects)]
    ordered = sort_tickets(matched, query.sort_field, query.sort_order)

    start = (query.page - 1) * query.limit
    page = ordered[start:start + query.limit]
    total = len(ordered)

    return TicketListResponse(
        tickets=[to_ticket_row(t) for t in page],
        pagination=Pagination(
            page=query.page,
            limit=query.limit,
            total=total,
            total_pages=math.ceil(total / query.limit),
        ),
        filter_options=filter_options(tickets) if query.page == 1 else None,
    )


def group_tickets(tickets: list[TicketRecord], group_by: str, limit: int = 50) -> GroupResponse:
    """Aggregate servicing tickets by one column; unknown columns group by project."""
    key = _GROUP_KEYS.get(group_by, _GROUP_KEYS["project"])
    projects = set(get_settings().servicing_projects)

    groups: dict[str, dict[str, Any]] = {}
    for t in tickets:
        if t.project_name not in projects:
            continue
        name = key(t)
        if name is None:
            continue
        g = groups.setdefault(name, {"count": 0, "completed": 0, "resolutions": []})
        g["count"] += 1
        if t.is_ticket_complete:
            g["completed"] += 1
        if t.time_to_resolution_in_minutes is not None:
            g["resolutions"].append(t.time_to_resolution_in_minutes)

    rows = []
    for name, g in groups.items():
        resolutions = g["resolutions"]
        avg_hours = sum(resolutions) / len(resolutions) / 60 if resolutions else 0
        rows.append(GroupRow(
            name=name or "Unknown",
            count=g["count"],
            completed=g["completed"],
            avg_resolution=round_int(avg_hours),
            completion_rate=percent(g["completed"], g["count"]),
        ))
    rows.sort(key=lambda r: r.count, reverse=True)
    return GroupResponse(groups=rows[:limit])
