"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

# .env lives at the project root (one level above backend/)
_ENV_FILE = Path(__file__).resolve().parents[3] / ".env"

DEFAULT_SERVICING_PROJECTS = [
    "Servicing Help",
    "Servicing Escalations WG",
    "ServApp Support",
    "CMG Servicing Oversight",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Servicing Analytics Backend"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000"

    # Record source
    data_source: Literal["mock", "json", "supabase"] = "mock"
    data_dir: str = "data"
    cache_ttl_seconds: int = 300

    # Supabase (only needed when data_source == "supabase")
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    tickets_table: str = "tickets"
    transcripts_table: str = "transcripts"

    # LLM configuration (OpenAI-compatible endpoint)
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None

    # Ticket views are scoped to these projects
    servicing_projects: list[str] = DEFAULT_SERVICING_PROJECTS

    class Config:
        env_file = str(_ENV_FILE)
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
