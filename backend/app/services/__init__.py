"""Services module - analytics computations and LLM-backed insights."""

from . import agent_profile_service, call_analysis_service, insights_service
from .data_source import DataSourceError, load_tickets, load_transcripts

__all__ = [
    "agent_profile_service",
    "call_analysis_service",
    "insights_service",
    "DataSourceError",
    "load_tickets",
    "load_transcripts",
]
