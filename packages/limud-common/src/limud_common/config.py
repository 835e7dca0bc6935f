"""
Environment-based configuration management for Limud.

Uses pydantic-settings to load configuration values from environment
variables and .env files. The search and status services import their
settings from this module to ensure consistent configuration handling.

All environment variables are prefixed with ``LIMUD_`` to avoid collisions.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from ``LIMUD_``-prefixed environment variables.

    Attributes:
        api_base_url: Base URL of the Limud backend (recordings API).
        api_token: Bearer token sent with every recordings API call.
        http_timeout_s: Per-request HTTP timeout in seconds.
        http_max_attempts: Attempts for idempotent GET requests.
        search_debounce_ms: Quiet period before a search intent executes.
        search_context_chars: Characters of context kept on each side of a match.
        search_preview_matches: Highlighted previews rendered per result.
        status_poll_interval_s: Interval between transcription status polls.
        transcription_provider: Provider requested when retrying a job.
        use_enhanced_processing: Whether retried jobs use enhanced processing.
        search_host: Bind address for the search service.
        search_port: Bind port for the search service.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    model_config = SettingsConfigDict(
        env_prefix="LIMUD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Recordings API ──
    api_base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the Limud backend.",
    )
    api_token: str = Field(default="", description="Bearer token for the recordings API.")
    http_timeout_s: float = Field(default=10.0, gt=0.0, description="HTTP timeout in seconds.")
    http_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for idempotent GET requests.",
    )

    # ── Search ──
    search_debounce_ms: int = Field(
        default=300,
        ge=0,
        description="Quiet period before a search executes.",
    )
    search_context_chars: int = Field(
        default=50,
        ge=0,
        description="Context characters kept on each side of a match.",
    )
    search_preview_matches: int = Field(
        default=2,
        ge=1,
        description="Highlighted previews rendered per result.",
    )

    # ── Transcription status ──
    status_poll_interval_s: float = Field(
        default=5.0,
        gt=0.0,
        description="Interval between transcription status polls.",
    )
    transcription_provider: str = Field(
        default="openai",
        description="Provider requested when retrying a transcription.",
    )
    use_enhanced_processing: bool = Field(
        default=True,
        description="Request enhanced processing on retry.",
    )

    # ── Search service ──
    search_host: str = Field(default="0.0.0.0", description="Search service bind address.")
    search_port: int = Field(default=8010, ge=1, le=65535, description="Search service bind port.")

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Logging level.")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Returns:
        The global ``Settings`` instance.
    """
    return Settings()
