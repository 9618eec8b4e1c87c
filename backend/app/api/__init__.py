"""API module - FastAPI route handlers."""

from . import agent_routes, analytics_routes, call_analysis_routes, ticket_routes, transcript_routes

__all__ = ["agent_routes", "analytics_routes", "call_analysis_routes", "ticket_routes", "transcript_routes"]
