"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from medassist.configs.auth import AuthSettings
from medassist.configs.base import BaseSettings
from medassist.configs.chat import ChatSettings
from medassist.configs.database import DatabaseSettings
from medassist.configs.model import ModelSettings
from medassist.configs.observability import ObservabilitySettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    chat: ChatSettings = ChatSettings()
    model: ModelSettings = ModelSettings()
    auth: AuthSettings = AuthSettings()
    observability: ObservabilitySettings = ObservabilitySettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from medassist.configs import get_settings
        settings = get_settings()
    """
    return Settings()
