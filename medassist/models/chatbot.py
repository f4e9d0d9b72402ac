"""
Chatbot API models and schemas.

Request/response schemas for the medical assistant session endpoints.
Field names travel as camelCase on the wire.

Dependencies: pydantic
System role: Chatbot API contracts
"""

import uuid
from datetime import datetime

from pydantic import Field

from medassist.boundary.db.models import MessageRole, MessageType
from medassist.models.common import CamelModel


class SendMessageRequest(CamelModel):
    """Request schema for sending a chat message."""

    session_id: uuid.UUID = Field(..., description="Target session")
    message: str = Field(..., description="User message text")


class StartSessionResponse(CamelModel):
    session_id: uuid.UUID
    session_title: str
    initial_message: str


class SendMessageResponse(CamelModel):
    response: str
    message_type: MessageType
    follow_up_questions: list[str] = Field(default_factory=list)
    timestamp: datetime


class UploadReportResponse(CamelModel):
    file_name: str
    analysis: str
    report_count: int
    timestamp: datetime


class EndSessionResponse(CamelModel):
    session_id: uuid.UUID
    is_active: bool


class MessageItem(CamelModel):
    """One transcript entry."""

    position: int
    role: MessageRole
    content: str
    message_type: MessageType
    timestamp: datetime


class ReportItem(CamelModel):
    """Metadata of an uploaded report."""

    file_name: str
    mime_type: str
    file_size: int
    analysis_status: str
    uploaded_at: datetime


class SessionHistoryResponse(CamelModel):
    """Full session transcript."""

    session_id: uuid.UUID
    session_title: str
    is_active: bool
    created_at: datetime
    last_activity: datetime
    ended_at: datetime | None = None
    message_count: int
    report_count: int
    messages: list[MessageItem]
    uploaded_reports: list[ReportItem]


class SessionSummaryItem(CamelModel):
    """One row of a session listing."""

    session_id: uuid.UUID
    session_title: str
    created_at: datetime
    last_activity: datetime
    is_active: bool
    message_count: int
    report_count: int
    last_message: str


class PaginationInfo(CamelModel):
    current_page: int
    total_pages: int
    total_sessions: int
    has_next: bool
    has_prev: bool


class SessionListResponse(CamelModel):
    sessions: list[SessionSummaryItem]
    pagination: PaginationInfo


class HealthResponse(CamelModel):
    status: str
    message: str
