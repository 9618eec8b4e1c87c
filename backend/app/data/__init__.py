"""Data module - bundled mock ticket and transcript rows."""

from .tickets import MOCK_TICKET_ROWS
from .transcripts import MOCK_TRANSCRIPT_ROWS

__all__ = ["MOCK_TICKET_ROWS", "MOCK_TRANSCRIPT_ROWS"]
