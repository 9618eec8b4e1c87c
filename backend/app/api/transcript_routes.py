"""Call transcript API endpoints: drill-down listing and transcript analytics."""

import asyncio
import logging
from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from postgrest.exceptions import APIError

from ..schemas.transcripts import DayName, TranscriptInsight, TranscriptListResponse, TranscriptQuery
from ..services.agent_analytics import build_agent_rankings, build_agent_stats
from ..services.data_source import DataSourceError, load_transcripts
from ..services.transcript_analysis import insight_for
from ..services.transcript_analytics import (
    compute_transcript_stats,
    list_transcripts,
    summarize_transcripts,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transcripts"])

ANALYTICS_VIEWS = ("summary", "transcripts", "agents", "stats")


def transcript_query(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    date: Optional[date_type] = Query(default=None),
    start_date: Optional[date_type] = Query(default=None, alias="startDate"),
    end_date: Optional[date_type] = Query(default=None, alias="endDate"),
    sentiment: Optional[str] = Query(default=None),
    agent_sentiment: Optional[str] = Query(default=None, alias="agentSentiment"),
    customer_sentiment: Optional[str] = Query(default=None, alias="customerSentiment"),
    topic: Optional[str] = Query(default=None),
    no_subcategory: bool = Query(default=False),
    department: Optional[str] = Query(default=None),
    agent: Optional[str] = Query(default=None),
    hour: Optional[str] = Query(default=None, pattern=r"^([01]\d|2[0-3]):00$"),
    day_of_week: Optional[DayName] = Query(default=None),
    escalated: Optional[bool] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=200),
) -> TranscriptQuery:
    """Collect the drill-down query string into a ``TranscriptQuery``."""
    return TranscriptQuery(
        limit=limit,
        offset=offset,
        date=date,
        start_date=start_date,
        end_date=end_date,
        sentiment=sentiment,
        agent_sentiment=agent_sentiment,
        customer_sentiment=customer_sentiment,
        topic=topic,
        no_subcategory=no_subcategory,
        department=department,
        agent=agent,
        hour=hour,
        day_of_week=day_of_week,
        escalated=escalated,
        search=search,
    )


@router.get("/transcripts", response_model=TranscriptListResponse)
async def get_transcripts(query: TranscriptQuery = Depends(transcript_query)) -> TranscriptListResponse:
    """Filtered, newest-first page of call transcripts."""
    try:
        transcripts = await asyncio.to_thread(load_transcripts)
        return list_transcripts(transcripts, query)
    except APIError as exc:
        logger.exception("Supabase error listing transcripts")
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Transcript data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error listing transcripts")
        raise HTTPException(status_code=500, detail="Failed to fetch transcripts") from exc


@router.get("/transcripts/{transcript_id}/insight", response_model=TranscriptInsight)
async def get_transcript_insight(transcript_id: str) -> TranscriptInsight:
    """Rule-based analysis of one call: outcome, tone, topics, entities, self-service."""
    try:
        transcripts = await asyncio.to_thread(load_transcripts)
    except APIError as exc:
        logger.exception("Supabase error loading transcript %s", transcript_id)
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Transcript data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error loading transcript %s", transcript_id)
        raise HTTPException(status_code=500, detail="Failed to fetch transcripts") from exc

    record = next((t for t in transcripts if t.id == transcript_id), None)
    if record is None:
        raise HTTPException(status_code=404, detail="Transcript not found")
    return insight_for(record)


@router.get("/transcript-analytics", response_model=None)
async def get_transcript_analytics(
    type: str = Query(default="summary"),
    query: TranscriptQuery = Depends(transcript_query),
):
    """
    One transcript analytics view.

    ``summary`` sentiment/topic overview, ``transcripts`` filtered listing,
    ``agents`` rankings with tier distribution, ``stats`` call dashboard.
    """
    if type not in ANALYTICS_VIEWS:
        raise HTTPException(status_code=400, detail="Invalid type parameter")
    try:
        transcripts = await asyncio.to_thread(load_transcripts)
        if type == "summary":
            return summarize_transcripts(transcripts)
        if type == "transcripts":
            return list_transcripts(transcripts, query)
        if type == "agents":
            return build_agent_rankings(build_agent_stats(transcripts), len(transcripts))
        return compute_transcript_stats(transcripts)
    except APIError as exc:
        logger.exception("Supabase error building %s transcript analytics", type)
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Transcript data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error building %s transcript analytics", type)
        raise HTTPException(status_code=500, detail="Failed to load transcript analytics") from exc
