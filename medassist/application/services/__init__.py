"""Service orchestrators."""

from .chat_service import ChatService, TurnResult
from .file_intake_service import FileIntakeService, ReportUpload, UploadResult
from .history_service import HistoryService, SessionHistory, SessionPage, SessionSummary
from .lifecycle_service import SessionLifecycleService

__all__ = [
    "ChatService",
    "FileIntakeService",
    "HistoryService",
    "ReportUpload",
    "SessionHistory",
    "SessionLifecycleService",
    "SessionPage",
    "SessionSummary",
    "TurnResult",
    "UploadResult",
]
