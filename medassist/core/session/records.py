"""
Session engine records.

Immutable snapshots passed between the session store, the services and the
API layer. ORM instances never leave the store's transaction scope.

Dependencies: dataclasses, medassist.boundary.db.models
System role: Explicit session/message records shared across layers
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from medassist.boundary.db.base import as_utc
from medassist.boundary.db.models import (
    AnalysisStatus,
    ChatMessageModel,
    ChatSessionModel,
    MessageRole,
    MessageType,
    ReportModel,
    SessionStatus,
)


@dataclass(frozen=True)
class SessionRecord:
    """Snapshot of a chat session row."""

    id: UUID
    user_id: str
    status: SessionStatus
    title: str
    created_at: datetime
    last_activity_at: datetime
    ended_at: datetime | None
    message_count: int
    report_count: int

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @classmethod
    def from_model(cls, model: ChatSessionModel) -> "SessionRecord":
        return cls(
            id=model.id,
            user_id=model.user_id,
            status=model.status,
            title=model.title,
            created_at=as_utc(model.created_at),
            last_activity_at=as_utc(model.last_activity_at),
            ended_at=as_utc(model.ended_at) if model.ended_at else None,
            message_count=model.message_count,
            report_count=model.report_count,
        )


@dataclass(frozen=True)
class MessageRecord:
    """Snapshot of one transcript entry."""

    id: UUID
    session_id: UUID
    position: int
    role: MessageRole
    message_type: MessageType
    content: str
    created_at: datetime

    @classmethod
    def from_model(cls, model: ChatMessageModel) -> "MessageRecord":
        return cls(
            id=model.id,
            session_id=model.session_id,
            position=model.position,
            role=model.role,
            message_type=model.message_type,
            content=model.content,
            created_at=as_utc(model.created_at),
        )


@dataclass(frozen=True)
class ReportRecord:
    """Snapshot of an uploaded report's metadata."""

    id: UUID
    file_name: str
    mime_type: str
    file_size: int
    analysis_status: AnalysisStatus
    uploaded_at: datetime

    @classmethod
    def from_model(cls, model: ReportModel) -> "ReportRecord":
        return cls(
            id=model.id,
            file_name=model.file_name,
            mime_type=model.mime_type,
            file_size=model.file_size,
            analysis_status=model.analysis_status,
            uploaded_at=as_utc(model.created_at),
        )


@dataclass(frozen=True)
class NewMessage:
    """A message to append; position and id are assigned by the store."""

    role: MessageRole
    content: str
    message_type: MessageType = MessageType.TEXT
    created_at: datetime | None = None


@dataclass(frozen=True)
class NewReport:
    """Report metadata to record alongside an upload message pair."""

    file_name: str
    mime_type: str
    file_size: int
