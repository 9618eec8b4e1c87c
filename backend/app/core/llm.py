"""LangChain-based LLM access for coaching profiles and ad-hoc analysis."""

from typing import TypeVar

from langchain_openai import ChatOpenAI
from pydantic import BaseModel

from .config import get_settings

T = TypeVar("T", bound=BaseModel)

_llm_instance: ChatOpenAI | None = None


class LLMNotConfiguredError(RuntimeError):
    """Raised when no API key is available for the LLM endpoint."""


def _build_llm(**overrides) -> ChatOpenAI:
    settings = get_settings()
    if not settings.openai_api_key:
        raise LLMNotConfiguredError("LLM API key not configured")
    kwargs = {"model": settings.openai_model, "api_key": settings.openai_api_key}
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    kwargs.update(overrides)
    return ChatOpenAI(**kwargs)


def get_llm() -> ChatOpenAI:
    """Get or create the shared ChatOpenAI instance."""
    global _llm_instance
    if _llm_instance is None:
        _llm_instance = _build_llm()
    return _llm_instance


def _messages(prompt: str, system_prompt: str | None) -> list[tuple[str, str]]:
    messages: list[tuple[str, str]] = []
    if system_prompt:
        messages.append(("system", system_prompt))
    messages.append(("user", prompt))
    return messages


async def generate_structured_output(
    prompt: str,
    output_schema: type[T],
    system_prompt: str | None = None,
    temperature: float | None = None,
) -> T:
    """Ask the LLM for a response validated against ``output_schema``."""
    if temperature is None:
        llm = get_llm()
    else:
        llm = _build_llm(temperature=temperature)
    structured_llm = llm.with_structured_output(output_schema)
    result = await structured_llm.ainvoke(_messages(prompt, system_prompt))
    return result  # type: ignore[return-value]


async def generate_text(
    prompt: str,
    system_prompt: str | None = None,
    temperature: float = 0.7,
    max_tokens: int = 2000,
) -> str:
    """Free-form completion; returns the message content as a string."""
    llm = _build_llm(temperature=temperature, max_tokens=max_tokens)
    message = await llm.ainvoke(_messages(prompt, system_prompt))
    content = message.content
    if isinstance(content, list):
        content = "".join(
            part.get("text", "") if isinstance(part, dict) else str(part)
            for part in content
        )
    return content
