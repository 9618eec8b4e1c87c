"""Supabase client singleton."""

import threading

from supabase import Client, create_client

from app.core.config import get_settings

_supabase_instance: Client | None = None
_lock = threading.Lock()

PAGE_SIZE = 1000


def get_supabase() -> Client:
    """Get or create the Supabase client singleton (thread-safe)."""
    global _supabase_instance
    if _supabase_instance is None:
        with _lock:
            if _supabase_instance is None:
                settings = get_settings()
                if not settings.supabase_url or not settings.supabase_service_role_key:
                    raise RuntimeError("Supabase credentials are not configured")
                _supabase_instance = create_client(
                    settings.supabase_url,
                    settings.supabase_service_role_key,
                )
    return _supabase_instance


def fetch_all_rows(table: str, columns: str = "*") -> list[dict]:
    """Read every row of ``table``, paging through PostgREST's row limit."""
    sb = get_supabase()
    rows: list[dict] = []
    offset = 0
    while True:
        result = (
            sb.table(table)
            .select(columns)
            .range(offset, offset + PAGE_SIZE - 1)
            .execute()
        )
        batch = result.data or []
        rows.extend(batch)
        if len(batch) < PAGE_SIZE:
            break
        offset += PAGE_SIZE
    return rows
