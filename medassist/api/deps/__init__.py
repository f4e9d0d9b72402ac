"""API-specific dependencies."""

# Re-export common dependencies
from .auth import get_current_user_id
from .dependencies import (
    get_chat_service,
    get_file_intake_service,
    get_history_service,
    get_lifecycle_service,
    get_reasoning_engine,
    get_report_analyzer,
    get_service_cache,
    get_session_store,
    get_settings_dependency,
)

__all__ = [
    "get_chat_service",
    "get_current_user_id",
    "get_file_intake_service",
    "get_history_service",
    "get_lifecycle_service",
    "get_reasoning_engine",
    "get_report_analyzer",
    "get_service_cache",
    "get_session_store",
    "get_settings_dependency",
]
