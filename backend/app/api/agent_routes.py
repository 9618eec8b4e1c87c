"""Agent performance API endpoints: searchable agent list and AI coaching profiles."""

import asyncio
import logging
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query
from postgrest.exceptions import APIError

from ..core.llm import LLMNotConfiguredError
from ..schemas.agents import AgentProfileRequest, AgentProfileResponse, AgentStats, PerformanceTier
from ..services.agent_analytics import DISPLAY_MIN_CALLS, build_agent_stats, search_agents
from ..services.agent_profile_service import generate_agent_profile
from ..services.data_source import DataSourceError, load_transcripts

logger = logging.getLogger(__name__)

router = APIRouter(tags=["agents"])


@router.get("/agents", response_model=list[AgentStats])
async def get_agents(
    search: Optional[str] = Query(default=None, max_length=100),
    sort_by: Literal["performance", "calls"] = Query(default="performance"),
    tier: Optional[PerformanceTier] = Query(default=None),
    min_calls: int = Query(default=DISPLAY_MIN_CALLS, ge=0),
) -> list[AgentStats]:
    """Agents with at least ``min_calls`` calls, filtered and sorted for the agent table."""
    try:
        transcripts = await asyncio.to_thread(load_transcripts)
        return search_agents(build_agent_stats(transcripts), search, sort_by, min_calls, tier)
    except APIError as exc:
        logger.exception("Supabase error listing agents")
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Transcript data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except Exception as exc:
        logger.exception("Unexpected error listing agents")
        raise HTTPException(status_code=500, detail="Failed to load agents") from exc


@router.post("/agent-profile", response_model=AgentProfileResponse)
async def post_agent_profile(body: AgentProfileRequest) -> AgentProfileResponse:
    """Generate a coaching profile for one agent from their call statistics.

    LLM failures fall back to rule-based insights (``ai_generated`` is false).
    """
    try:
        profile = await generate_agent_profile(body.agent_stats)
        return AgentProfileResponse(profile=profile)
    except LLMNotConfiguredError as exc:
        logger.error("Agent profile requested but no LLM API key is configured")
        raise HTTPException(status_code=500, detail="LLM API key not configured") from exc
    except Exception as exc:
        logger.exception("Unexpected error generating profile for %s", body.agent_stats.name)
        raise HTTPException(status_code=500, detail="Failed to generate agent profile") from exc
