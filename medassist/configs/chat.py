"""
Chat session engine configuration.

Context window, upstream timeouts, input limits, title rules and the
optional idle-expiry policy for assistant sessions.

Dependencies: pydantic, pydantic_settings
System role: Conversation engine tuning
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from medassist.configs.base import BaseSettings


class ChatSettings(BaseSettings):
    """Conversation engine configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHAT_",
        case_sensitive=False,
        extra="ignore",
    )

    context_window_size: int = Field(
        default=8,
        ge=1,
        description="Number of recent transcript messages sent to the reasoning engine",
    )
    reasoning_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for one reasoning engine call",
    )
    analysis_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound for one report analysis call",
    )
    max_message_length: int = Field(default=4000, ge=1, description="Maximum user message length")
    max_upload_bytes: int = Field(
        default=15 * 1024 * 1024,
        description="Maximum uploaded report size in bytes",
    )
    default_list_limit: int = Field(default=10, ge=1, description="Default session list size")
    max_list_limit: int = Field(default=50, ge=1, description="Upper clamp for session list size")
    preview_length: int = Field(default=100, ge=1, description="Last-message preview length")
    title_mutable_turns: int = Field(
        default=3,
        ge=0,
        description="User turns during which the session title may still be derived",
    )
    title_max_length: int = Field(default=60, ge=8, description="Maximum derived title length")
    follow_up_limit: int = Field(default=3, ge=0, description="Maximum follow-up suggestions")
    report_context_length: int = Field(
        default=1000,
        ge=0,
        description="Characters of the latest report analysis given to the reasoning engine",
    )
    max_list_page: int = Field(
        default=10_000,
        ge=1,
        description="Highest page number a session listing accepts",
    )

    idle_expiry_minutes: int | None = Field(
        default=None,
        description="End sessions idle for this long; disabled when unset",
    )
    idle_sweep_seconds: int = Field(
        default=300,
        ge=1,
        description="Interval between idle-expiry sweeps",
    )
