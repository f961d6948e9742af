"""Configuration management for UserAgent."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DebugLevel = Literal["off", "debug", "ultra"]
ProviderName = Literal["republic", "claude-cli"]

DEFAULT_MAX_STEPS = 10
DEFAULT_TIMEOUT_SECONDS = 300
DEFAULT_WAIT_BETWEEN_ACTIONS = 3.0
DEFAULT_BUDGET_CZK = 5.0
DEFAULT_CZK_PER_USD = 23.5
DEFAULT_OUTPUT_PATH = "./report.md"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="USERAGENT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM configuration
    llm_provider: ProviderName = Field(default="claude-cli", description="LLM provider backend")
    model: str = Field(default="anthropic:claude-sonnet-4-20250514", description="provider:model for Republic")
    api_key: str | None = Field(default=None, description="API key for the LLM provider")
    api_base: str | None = Field(default=None, description="Optional API base URL")
    max_tokens: int = Field(default=1024, description="Maximum tokens per model response")
    model_attempts: int = Field(default=3, ge=1, description="Attempts per call on unparseable model output")
    claude_cli_command: str = Field(default="claude", description="Executable used by the claude-cli provider")
    claude_cli_timeout_seconds: float = Field(default=60.0, description="Timeout for one claude-cli call")

    # Pricing
    price_per_input_token_usd: float = Field(default=3 / 1_000_000)
    price_per_output_token_usd: float = Field(default=15 / 1_000_000)
    czk_per_usd: float = Field(default=DEFAULT_CZK_PER_USD)

    # Session defaults
    max_steps: int = Field(default=DEFAULT_MAX_STEPS, ge=1)
    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1)
    wait_between_actions: float = Field(default=DEFAULT_WAIT_BETWEEN_ACTIONS, ge=0)
    budget_czk: float = Field(default=DEFAULT_BUDGET_CZK, gt=0)

    # Browser
    headless: bool = Field(default=True)
    viewport_width: int = Field(default=1280)
    viewport_height: int = Field(default=720)
    artifacts_dir: str = Field(default="./tmp", description="Directory for videos and debug dumps")

    # Server
    server_api_key: str | None = Field(default=None, description="API key required by the HTTP server")
    reports_dir: str = Field(default="./tmp/reports")
    session_ttl_seconds: int = Field(default=24 * 60 * 60)

    # Logging
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings loaded from env and `.env`."""
    return Settings()
