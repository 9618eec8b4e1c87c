"""Single-call drill-down endpoints: per-message sentiment and the AI call scorecard."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException
from postgrest.exceptions import APIError

from ..core.llm import LLMNotConfiguredError
from ..schemas.calls import CallAnalysisRequest, CallAnalysisResponse, SentimentRequest, SentimentResponse
from ..services.call_analysis_service import analyze_call, analyze_message_sentiment
from ..services.data_source import DataSourceError, load_transcripts

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calls"])


@router.post("/sentiment", response_model=SentimentResponse)
async def post_sentiment(body: SentimentRequest) -> SentimentResponse:
    """Sentiment score and emotion for every message of one call."""
    try:
        return await analyze_message_sentiment(body.messages)
    except LLMNotConfiguredError as exc:
        logger.error("Sentiment requested but no LLM API key is configured")
        raise HTTPException(status_code=500, detail="LLM API key not configured") from exc
    except Exception as exc:
        logger.exception("Unexpected error analysing message sentiment")
        raise HTTPException(status_code=500, detail="Sentiment analysis failed") from exc


@router.post("/call-analysis", response_model=CallAnalysisResponse)
async def post_call_analysis(body: CallAnalysisRequest) -> CallAnalysisResponse:
    """Scorecard for one call, calibrated against the analysed transcripts."""
    try:
        transcripts = await asyncio.to_thread(load_transcripts)
        analysis = await analyze_call(body, transcripts)
        return CallAnalysisResponse(analysis=analysis)
    except APIError as exc:
        logger.exception("Supabase error loading scoring context")
        raise HTTPException(status_code=502, detail="Database error") from exc
    except DataSourceError as exc:
        logger.exception("Transcript data unavailable")
        raise HTTPException(status_code=503, detail="Data source unavailable") from exc
    except LLMNotConfiguredError as exc:
        logger.error("Call analysis requested but no LLM API key is configured")
        raise HTTPException(status_code=500, detail="LLM API key not configured") from exc
    except Exception as exc:
        logger.exception("Call analysis failed")
        raise HTTPException(status_code=500, detail="Call analysis failed") from exc
