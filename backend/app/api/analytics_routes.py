"""AI analysis, category trend analytics and the category catalogue."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query
from postgrest.exceptions import APIError

from ..core.llm import LLMNotConfiguredError
from ..schemas.analytics import AnalyticsResponse, AnalyzeRequest, AnalyzeResponse, CategoryTree
from ..services import insights_service
from ..services.categorization import get_all_categories
from ..services.data_source import DataSourceError, load_tickets, load_transcripts, servicing_tickets
from ..services.trend_analytics import ANALYTICS_TYPES, DEFAULT_DAYS_RECENT, compute_analytics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analytics"])


@router.post("/analyze", response_model=AnalyzeResponse)
async def post_analyze(body: AnalyzeRequest) -> AnalyzeResponse:
    """Answer a free-form question about the servicing tickets."""
    try:
        tickets = servicing_tickets(await asyncio.to_thread(load_tickets))
    except APIError as exc:
        logger.exception("Supabase error loading tickets for analysis")
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Ticket data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc

    try:
        analysis = await insights_service.analyze(body.prompt, tickets)
    except LLMNotConfiguredError as exc:
        logger.error("Analysis requested but no LLM API key is configured")
        raise HTTPException(status_code=500, detail="LLM API key not configured") from exc
    except Exception as exc:
        logger.exception("LLM analysis failed")
        raise HTTPException(status_code=500, detail="AI analysis failed") from exc
    return AnalyzeResponse(analysis=analysis)


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    type: str = Query(default="baseline"),
    days_recent: int = Query(default=DEFAULT_DAYS_RECENT, ge=1, le=365, alias="daysRecent"),
) -> AnalyticsResponse:
    """Category trends over tickets and calls.

    ``baseline`` recent-vs-baseline comparison, ``monthly`` category mix per
    month, ``agent`` per-agent heuristic performance, ``categories`` overall
    distribution, ``all`` every view at once.
    """
    if type not in ANALYTICS_TYPES:
        raise HTTPException(status_code=400, detail="Invalid type parameter")
    try:
        tickets, transcripts = await asyncio.gather(
            asyncio.to_thread(load_tickets),
            asyncio.to_thread(load_transcripts),
        )
        data = compute_analytics(type, servicing_tickets(tickets), transcripts, days_recent)
        return AnalyticsResponse(type=type, data=data)
    except APIError as exc:
        logger.exception("Supabase error building %s analytics", type)
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Analytics data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error building %s analytics", type)
        raise HTTPException(status_code=500, detail="Error generating analytics") from exc


@router.get("/categories", response_model=list[CategoryTree])
async def get_categories() -> list[CategoryTree]:
    """Every category with its subcategories."""
    return get_all_categories()
