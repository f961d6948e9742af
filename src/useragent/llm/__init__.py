"""LLM providers and the factory that selects one from settings."""

from __future__ import annotations

from useragent.config import Settings
from useragent.errors import ConfigurationError
from useragent.llm.base import PromptedProvider
from useragent.llm.claude_cli import ClaudeCliProvider
from useragent.llm.republic_provider import RepublicProvider
from useragent.llm.types import Decision, LLMProvider, LLMResponse

PROVIDER_NAMES = ("republic", "claude-cli")


def create_llm_provider(settings: Settings, name: str | None = None) -> LLMProvider:
    """Build the provider named by `name`, falling back to `settings.llm_provider`."""
    resolved = name or settings.llm_provider
    if resolved == "republic":
        return RepublicProvider(
            settings.model,
            api_key=settings.api_key,
            api_base=settings.api_base,
            max_tokens=settings.max_tokens,
            attempts=settings.model_attempts,
        )
    if resolved == "claude-cli":
        return ClaudeCliProvider(
            command=settings.claude_cli_command,
            timeout_seconds=settings.claude_cli_timeout_seconds,
            attempts=settings.model_attempts,
        )
    raise ConfigurationError(f"unknown LLM provider: {resolved!r} (expected one of {', '.join(PROVIDER_NAMES)})")


__all__ = [
    "PROVIDER_NAMES",
    "ClaudeCliProvider",
    "Decision",
    "LLMProvider",
    "LLMResponse",
    "PromptedProvider",
    "RepublicProvider",
    "create_llm_provider",
]
