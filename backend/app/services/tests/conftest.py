"""Shared fixtures for the analytics service tests."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from app.data import MOCK_TICKET_ROWS, MOCK_TRANSCRIPT_ROWS
from app.schemas.tickets import TicketRecord
from app.schemas.transcripts import TranscriptRecord


# ── Supabase fluent-API mock ────────────────────────────────────────


def _chain_mock() -> MagicMock:
    """Return a MagicMock where every method returns self (chainable)."""
    m = MagicMock()
    for method in ("select", "eq", "in_", "order", "range", "upsert"):
        getattr(m, method).return_value = m
    m.execute.return_value = MagicMock(data=[])
    return m


@pytest.fixture
def mock_supabase():
    """Supabase client mock with chainable table API.

    Usage in tests:
        mock_supabase.table("tickets") returns a chainable mock.
        Assign `.execute.side_effect` to return successive pages.
    """
    sb = MagicMock()
    _tables: dict[str, MagicMock] = {}

    def _table(name: str) -> MagicMock:
        if name not in _tables:
            _tables[name] = _chain_mock()
        return _tables[name]

    sb.table.side_effect = _table
    sb._tables = _tables  # expose for assertions
    return sb


@pytest.fixture
def mock_settings():
    """Settings mock pointing at the bundled mock records."""
    s = MagicMock()
    s.data_source = "mock"
    s.data_dir = "data"
    s.cache_ttl_seconds = 300
    s.tickets_table = "tickets"
    s.transcripts_table = "transcripts"
    s.servicing_projects = [
        "Servicing Help",
        "Servicing Escalations WG",
        "ServApp Support",
        "CMG Servicing Oversight",
    ]
    return s


# ── Sample data fixtures ────────────────────────────────────────────

NOW = datetime(2026, 10, 15, 12, 0, tzinfo=UTC)


def make_ticket(**overrides) -> TicketRecord:
    row = {
        "ticket_key": "SH-9000",
        "ticket_title": "General question",
        "ticket_status": "New",
        "ticket_priority": "Medium",
        "project_name": "Servicing Help",
        "assigned_user_name": "Rivera, Maria",
        "assigned_user_email": "mrivera@example.com",
        "ticket_created_at_utc": "2026-10-01T12:00:00Z",
        "is_ticket_complete": "FALSE",
    }
    row.update(overrides)
    return TicketRecord.model_validate(row)


def make_transcript(**overrides) -> TranscriptRecord:
    row = {
        "id": "T-1",
        "call_start": "2026-10-01T14:00:00Z",
        "duration_seconds": 300,
        "department": "Customer Service",
        "agent_name": "Maria Rivera",
        "basic_sentiment": "neutral",
        "messages": [
            {"role": "customer", "text": "I have a question about my loan."},
            {"role": "agent", "text": "Sure, I can help with that."},
        ],
    }
    row.update(overrides)
    return TranscriptRecord.model_validate(row)


@pytest.fixture
def all_tickets() -> list[TicketRecord]:
    return [TicketRecord.model_validate(r) for r in MOCK_TICKET_ROWS]


@pytest.fixture
def tickets(all_tickets) -> list[TicketRecord]:
    """The twelve servicing-project tickets (excludes the origination one)."""
    return [t for t in all_tickets if t.project_name != "Origination Ops"]


@pytest.fixture
def transcripts() -> list[TranscriptRecord]:
    return [TranscriptRecord.model_validate(r) for r in MOCK_TRANSCRIPT_ROWS]


@pytest.fixture
def ticket_factory():
    """Build a single TicketRecord; keyword arguments override export columns."""
    return make_ticket


@pytest.fixture
def transcript_factory():
    """Build a single TranscriptRecord; keyword arguments override row fields."""
    return make_transcript
