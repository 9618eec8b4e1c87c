"""Ticket dashboard API endpoints.

All views are computed in memory over the servicing-project tickets loaded
from the configured data source.
"""

import asyncio
import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query
from postgrest.exceptions import APIError

from ..schemas.tickets import (
    AdvancedChartsResponse,
    BurndownResponse,
    DashboardStats,
    GroupRequest,
    GroupResponse,
    SortField,
    TicketListResponse,
    TicketQuery,
)
from ..services.burndown import ALLOWED_RANGES, build_burndown
from ..services.data_source import DataSourceError, load_tickets, servicing_tickets
from ..services.ticket_analytics import advanced_charts, build_dashboard
from ..services.ticket_queries import group_tickets, list_tickets

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tickets"])


@router.get("/stats", response_model=DashboardStats)
async def get_stats() -> DashboardStats:
    """Dashboard payload: stats, breakdowns, heatmaps, issues and trends."""
    try:
        tickets = servicing_tickets(await asyncio.to_thread(load_tickets))
        return build_dashboard(tickets)
    except APIError as exc:
        logger.exception("Supabase error building ticket dashboard")
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Ticket data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error building ticket dashboard")
        raise HTTPException(status_code=500, detail="Failed to load stats") from exc


@router.get("/tickets", response_model=TicketListResponse)
async def get_tickets(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=100, ge=1, le=500),
    search: str = Query(default="", max_length=200),
    statuses: list[str] = Query(default=[], alias="status"),
    projects: list[str] = Query(default=[], alias="project"),
    priorities: list[str] = Query(default=[], alias="priority"),
    assignees: list[str] = Query(default=[], alias="assignee"),
    category: str = Query(default=""),
    sort_field: SortField = Query(default="created", alias="sortField"),
    sort_order: Literal["asc", "desc"] = Query(default="desc", alias="sortOrder"),
) -> TicketListResponse:
    """Search, filter, sort and page the ticket table."""
    query = TicketQuery(
        page=page,
        limit=limit,
        search=search,
        statuses=statuses,
        projects=projects,
        priorities=priorities,
        assignees=assignees,
        category=category,
        sort_field=sort_field,
        sort_order=sort_order,
    )
    try:
        tickets = await asyncio.to_thread(load_tickets)
        return list_tickets(tickets, query)
    except APIError as exc:
        logger.exception("Supabase error listing tickets")
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Ticket data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error listing tickets")
        raise HTTPException(status_code=500, detail="Failed to fetch tickets") from exc


@router.post("/tickets/group", response_model=GroupResponse)
async def post_group_tickets(body: GroupRequest) -> GroupResponse:
    """Aggregate tickets by project, status, priority or assignee."""
    try:
        tickets = await asyncio.to_thread(load_tickets)
        return group_tickets(tickets, body.group_by)
    except APIError as exc:
        logger.exception("Supabase error grouping tickets by %s", body.group_by)
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Ticket data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error grouping tickets by %s", body.group_by)
        raise HTTPException(status_code=500, detail="Failed to group tickets") from exc


@router.get("/tickets/burndown", response_model=BurndownResponse)
async def get_burndown(
    days: int = Query(default=30),
    priorities: list[str] = Query(default=[]),
) -> BurndownResponse:
    """Created-vs-completed series, prioritized open work and velocity."""
    if days not in ALLOWED_RANGES:
        raise HTTPException(status_code=400, detail=f"days must be one of {list(ALLOWED_RANGES)}")
    try:
        tickets = servicing_tickets(await asyncio.to_thread(load_tickets))
        return build_burndown(tickets, days=days, priorities=priorities or None)
    except APIError as exc:
        logger.exception("Supabase error building burndown")
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Ticket data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error building burndown")
        raise HTTPException(status_code=500, detail="Failed to build burndown") from exc


@router.get("/tickets/advanced", response_model=AdvancedChartsResponse)
async def get_advanced_charts() -> AdvancedChartsResponse:
    try:
        tickets = servicing_tickets(await asyncio.to_thread(load_tickets))
        return advanced_charts(tickets)
    except APIError as exc:
        logger.exception("Supabase error building advanced charts")
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Ticket data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error building advanced charts")
        raise HTTPException(status_code=500, detail="Failed to build charts") from exc
