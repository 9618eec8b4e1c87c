"""Core module - configuration and LLM utilities."""

from .config import get_settings, Settings
from .llm import LLMNotConfiguredError, generate_structured_output, generate_text, get_llm

__all__ = [
    "get_settings",
    "Settings",
    "get_llm",
    "generate_structured_output",
    "generate_text",
    "LLMNotConfiguredError",
]
