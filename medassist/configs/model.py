"""
Language model configuration settings.

Gemini model selection for the reasoning engine and the report analyzer.

Dependencies: pydantic, pydantic_settings
System role: LLM provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from medassist.configs.base import BaseSettings


class ModelSettings(BaseSettings):
    """Gemini configuration shared by the assistant and the analyzer."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Google AI API key")
    chat_model: str = Field(default="gemini-2.5-flash", description="Model for chat replies")
    analysis_model: str = Field(
        default="gemini-2.5-flash",
        description="Model for uploaded report analysis",
    )
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Sampling temperature")
