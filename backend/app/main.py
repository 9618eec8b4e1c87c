"""FastAPI application entry point.

Configures logging and CORS middleware and registers the ticket, transcript,
agent, call-analysis and analytics routers under the /api prefix. Health check at GET /.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import agent_routes, analytics_routes, call_analysis_routes, ticket_routes, transcript_routes
from .core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=settings.app_name, debug=settings.debug)

origins = [o.strip() for o in settings.cors_origins.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(ticket_routes.router, prefix="/api")
app.include_router(transcript_routes.router, prefix="/api")
app.include_router(agent_routes.router, prefix="/api")
app.include_router(call_analysis_routes.router, prefix="/api")
app.include_router(analytics_routes.router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Service is running", "data_source": settings.data_source}
