"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), create_tables(): Async connection management
  - ChatSessionModel, ChatMessageModel, ReportModel: Core domain entities
  - SessionStatus, MessageRole, MessageType, AnalysisStatus: Enum types
  - chat_session_crud, chat_message_crud, report_crud: CRUD operation singletons

The transactional SessionStore lives in medassist.boundary.db.session_store
and is imported from there directly.

Dependencies: sqlalchemy, medassist.configs
System role: Database adapter providing persistent storage for chat sessions,
their transcripts and uploaded report metadata.
"""

from medassist.boundary.db.base import Base, TimestampMixin, UUIDMixin
from medassist.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from medassist.boundary.db.models import (
    AnalysisStatus,
    ChatMessageModel,
    ChatSessionModel,
    MessageRole,
    MessageType,
    ReportModel,
    SessionStatus,
)
from medassist.boundary.db.CRUD import (
    BaseCRUD,
    ChatMessageCRUD,
    ChatSessionCRUD,
    ReportCRUD,
    chat_message_crud,
    chat_session_crud,
    report_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "AnalysisStatus",
    "ChatMessageModel",
    "ChatSessionModel",
    "MessageRole",
    "MessageType",
    "ReportModel",
    "SessionStatus",
    # CRUD classes
    "BaseCRUD",
    "ChatMessageCRUD",
    "ChatSessionCRUD",
    "ReportCRUD",
    # CRUD singletons
    "chat_message_crud",
    "chat_session_crud",
    "report_crud",
]
