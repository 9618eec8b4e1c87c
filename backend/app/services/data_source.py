"""Record loading for tickets and transcripts.

Records come from one of three sources, picked by ``settings.data_source``:

- ``mock``: the bundled sample rows in ``app/data``
- ``json``: ``tickets.json`` / ``transcripts.json`` exports under ``data_dir``
- ``supabase``: the configured tables, read page by page

Loaded records are cached in-process for ``cache_ttl_seconds``.
"""

import json
import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.config import get_settings
from ..data import MOCK_TICKET_ROWS, MOCK_TRANSCRIPT_ROWS
from ..db.client import fetch_all_rows
from ..schemas.tickets import TicketRecord
from ..schemas.transcripts import TranscriptRecord

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_cache: dict[str, tuple[float, list]] = {}
_cache_lock = threading.Lock()


class DataSourceError(RuntimeError):
    """Raised when the configured record source cannot be read."""


def clear_cache() -> None:
    with _cache_lock:
        _cache.clear()


def _validate_rows(rows: list[dict[str, Any]], model: type[T], kind: str) -> list[T]:
    records: list[T] = []
    skipped = 0
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.warning("Skipped %d malformed %s row(s)", skipped, kind)
    return records


def _read_json(filename: str) -> list[dict[str, Any]]:
    settings = get_settings()
    path = Path(settings.data_dir) / filename
    try:
        with path.open(encoding="utf-8") as fh:
            payload = json.load(fh)
    except FileNotFoundError as exc:
        raise DataSourceError(f"Data file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise DataSourceError(f"Invalid JSON in {path}: {exc}") from exc

    # Exports are either a bare list or {"data": [...]}
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    if not isinstance(payload, list):
        raise DataSourceError(f"Expected a list of records in {path}")
    return payload


def _read_table(table: str) -> list[dict[str, Any]]:
    try:
        return fetch_all_rows(table)
    except RuntimeError as exc:
        # Missing credentials surface from get_supabase() as RuntimeError
        raise DataSourceError(str(exc)) from exc


def _raw_rows(kind: str) -> list[dict[str, Any]]:
    settings = get_settings()
    if settings.data_source == "mock":
        return MOCK_TICKET_ROWS if kind == "tickets" else MOCK_TRANSCRIPT_ROWS
    if settings.data_source == "json":
        return _read_json(f"{kind}.json")
    table = settings.tickets_table if kind == "tickets" else settings.transcripts_table
    return _read_table(table)


def _cached(kind: str, loader: Callable[[], list]) -> list:
    ttl = get_settings().cache_ttl_seconds
    now = time.monotonic()
    with _cache_lock:
        hit = _cache.get(kind)
        if hit is not None and now - hit[0] < ttl:
            return hit[1]

    records = loader()
    with _cache_lock:
        _cache[kind] = (now, records)
    return records


def load_tickets() -> list[TicketRecord]:
    """All ticket records from the configured source."""
    def _load() -> list[TicketRecord]:
        rows = _raw_rows("tickets")
        records = _validate_rows(rows, TicketRecord, "ticket")
        logger.info("Loaded %d tickets from %s", len(records), get_settings().data_source)
        return records

    return _cached("tickets", _load)


def load_transcripts() -> list[TranscriptRecord]:
    """All transcript records from the configured source."""
    def _load() -> list[TranscriptRecord]:
        rows = _raw_rows("transcripts")
        records = _validate_rows(rows, TranscriptRecord, "transcript")
        logger.info("Loaded %d transcripts from %s", len(records), get_settings().data_source)
        return records

    return _cached("transcripts", _load)


def servicing_tickets(tickets: list[TicketRecord]) -> list[TicketRecord]:
    """Tickets belonging to the configured servicing projects."""
    projects = set(get_settings().servicing_projects)
    return [t for t in tickets if t.project_name in projects]
