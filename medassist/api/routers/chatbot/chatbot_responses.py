"""
Chatbot response mapping utilities.

Transforms service results and session records into Pydantic response models.
Centralizes response construction logic.

Dependencies: medassist.models.chatbot, medassist.application.services
System role: Chatbot response transformation
"""

from medassist.application.services import (
    SessionHistory,
    SessionPage,
    TurnResult,
    UploadResult,
)
from medassist.core.session.records import MessageRecord, ReportRecord, SessionRecord
from medassist.models.chatbot import (
    EndSessionResponse,
    MessageItem,
    PaginationInfo,
    ReportItem,
    SendMessageResponse,
    SessionHistoryResponse,
    SessionListResponse,
    SessionSummaryItem,
    StartSessionResponse,
    UploadReportResponse,
)


def map_start_to_response(session: SessionRecord, greeting: MessageRecord) -> StartSessionResponse:
    return StartSessionResponse(
        session_id=session.id,
        session_title=session.title,
        initial_message=greeting.content,
    )


def map_turn_to_response(result: TurnResult) -> SendMessageResponse:
    return SendMessageResponse(
        response=result.reply,
        message_type=result.message_type,
        follow_up_questions=result.follow_up_questions,
        timestamp=result.timestamp,
    )


def map_upload_to_response(result: UploadResult) -> UploadReportResponse:
    return UploadReportResponse(
        file_name=result.file_name,
        analysis=result.analysis,
        report_count=result.report_count,
        timestamp=result.timestamp,
    )


def map_end_to_response(session: SessionRecord) -> EndSessionResponse:
    return EndSessionResponse(session_id=session.id, is_active=session.is_active)


def map_message_to_item(message: MessageRecord) -> MessageItem:
    return MessageItem(
        position=message.position,
        role=message.role,
        content=message.content,
        message_type=message.message_type,
        timestamp=message.created_at,
    )


def map_report_to_item(report: ReportRecord) -> ReportItem:
    return ReportItem(
        file_name=report.file_name,
        mime_type=report.mime_type,
        file_size=report.file_size,
        analysis_status=report.analysis_status.value,
        uploaded_at=report.uploaded_at,
    )


def map_history_to_response(history: SessionHistory) -> SessionHistoryResponse:
    """
    Transform a session history into SessionHistoryResponse.

    Args:
        history: Session with transcript and report metadata

    Returns:
        SessionHistoryResponse: Pydantic model for API response
    """
    session = history.session
    return SessionHistoryResponse(
        session_id=session.id,
        session_title=session.title,
        is_active=session.is_active,
        created_at=session.created_at,
        last_activity=session.last_activity_at,
        ended_at=session.ended_at,
        message_count=session.message_count,
        report_count=session.report_count,
        messages=[map_message_to_item(m) for m in history.messages],
        uploaded_reports=[map_report_to_item(r) for r in history.reports],
    )


def map_page_to_response(page: SessionPage) -> SessionListResponse:
    """
    Transform a session page into SessionListResponse.

    Args:
        page: Session summaries with pagination info

    Returns:
        SessionListResponse: Pydantic model for API response
    """
    return SessionListResponse(
        sessions=[
            SessionSummaryItem(
                session_id=summary.session_id,
                session_title=summary.title,
                created_at=summary.created_at,
                last_activity=summary.last_activity_at,
                is_active=summary.is_active,
                message_count=summary.message_count,
                report_count=summary.report_count,
                last_message=summary.last_message,
            )
            for summary in page.sessions
        ],
        pagination=PaginationInfo(
            current_page=page.pagination.current_page,
            total_pages=page.pagination.total_pages,
            total_sessions=page.pagination.total_sessions,
            has_next=page.pagination.has_next,
            has_prev=page.pagination.has_prev,
        ),
    )
