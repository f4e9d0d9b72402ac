"""
Chatbot API endpoints.

Routes:
- POST /chatbot/start - Start a new consultation session
- GET /chatbot/sessions - List the caller's sessions
- GET /chatbot/history/{session_id} - Full transcript of one session
- POST /chatbot/message - Send a message and get the assistant reply
- POST /chatbot/upload - Upload a medical report for analysis
- PATCH /chatbot/end/{session_id} - End a session

All routes require a bearer token.

Dependencies: medassist.application.services, medassist.models
System role: Medical assistant conversation HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from medassist.api.deps.auth import get_current_user_id
from medassist.api.deps.dependencies import (
    get_chat_service,
    get_file_intake_service,
    get_history_service,
    get_lifecycle_service,
    get_settings_dependency,
)
from medassist.application.services import (
    ChatService,
    FileIntakeService,
    HistoryService,
    ReportUpload,
    SessionLifecycleService,
)
from medassist.configs import Settings
from medassist.models.chatbot import (
    EndSessionResponse,
    SendMessageRequest,
    SendMessageResponse,
    SessionHistoryResponse,
    SessionListResponse,
    StartSessionResponse,
    UploadReportResponse,
)
from medassist.models.common import SuccessResponse

from .chatbot_error_handling import handle_chatbot_errors
from .chatbot_responses import (
    map_end_to_response,
    map_history_to_response,
    map_page_to_response,
    map_start_to_response,
    map_turn_to_response,
    map_upload_to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chatbot", tags=["chatbot"])


@router.post("/start", response_model=SuccessResponse[StartSessionResponse])
@handle_chatbot_errors
async def start_session(
    user_id: str = Depends(get_current_user_id),
    lifecycle_service: SessionLifecycleService = Depends(get_lifecycle_service),
) -> SuccessResponse[StartSessionResponse]:
    """
    Start a new consultation session opened by the assistant greeting.

    Raises:
        HTTPException(401): Missing or invalid token
        HTTPException(500): Creation failed
    """
    session, greeting = await lifecycle_service.start_session(user_id)
    return SuccessResponse(data=map_start_to_response(session, greeting))


@router.get("/sessions", response_model=SuccessResponse[SessionListResponse])
@handle_chatbot_errors
async def list_sessions(
    limit: int | None = Query(None, description="Page size (default 10, max 50)"),
    page: int = Query(1, description="1-based page number"),
    active: bool | None = Query(None, description="Filter by active status"),
    user_id: str = Depends(get_current_user_id),
    history_service: HistoryService = Depends(get_history_service),
) -> SuccessResponse[SessionListResponse]:
    """
    List the caller's sessions, most recently active first.

    Args:
        limit: Page size, clamped to the configured bounds
        page: Page number
        active: Only active (true) or only ended (false) sessions
    """
    result = await history_service.list_sessions(user_id, limit=limit, page=page, active=active)
    return SuccessResponse(data=map_page_to_response(result))


@router.get("/history/{session_id}", response_model=SuccessResponse[SessionHistoryResponse])
@handle_chatbot_errors
async def get_history(
    session_id: UUID,
    user_id: str = Depends(get_current_user_id),
    history_service: HistoryService = Depends(get_history_service),
) -> SuccessResponse[SessionHistoryResponse]:
    """
    Get the full ordered transcript of one session.

    Raises:
        HTTPException(404): Session not found or not owned by the caller
    """
    history = await history_service.get_history(session_id, user_id)
    return SuccessResponse(data=map_history_to_response(history))


@router.post("/message", response_model=SuccessResponse[SendMessageResponse])
@handle_chatbot_errors
async def send_message(
    request: SendMessageRequest,
    user_id: str = Depends(get_current_user_id),
    chat_service: ChatService = Depends(get_chat_service),
) -> SuccessResponse[SendMessageResponse]:
    """
    Send a message and receive the assistant reply.

    Reasoning engine failures still succeed with a fallback reply.

    Raises:
        HTTPException(400): Empty or too long message
        HTTPException(404): Session not found
        HTTPException(409): Session ended or concurrently modified
    """
    logger.info(
        "Processing chat message",
        extra={"session_id": str(request.session_id), "message_length": len(request.message)},
    )
    result = await chat_service.send_message(request.session_id, user_id, request.message)
    return SuccessResponse(data=map_turn_to_response(result))


@router.post("/upload", response_model=SuccessResponse[UploadReportResponse])
@handle_chatbot_errors
async def upload_report(
    session_id: UUID = Form(..., alias="sessionId"),
    file: UploadFile | None = File(None),
    user_id: str = Depends(get_current_user_id),
    file_intake_service: FileIntakeService = Depends(get_file_intake_service),
    settings: Settings = Depends(get_settings_dependency),
) -> SuccessResponse[UploadReportResponse]:
    """
    Upload a medical report and record its analysis in the conversation.

    Raises:
        HTTPException(400): Missing, empty, oversized or unsupported file
        HTTPException(404): Session not found
        HTTPException(409): Session ended
        HTTPException(502): Analysis failed
    """
    upload = None
    if file is not None:
        # One byte past the limit is enough to reject oversized files
        data = await file.read(settings.chat.max_upload_bytes + 1)
        upload = ReportUpload(
            file_name=file.filename or "",
            mime_type=file.content_type or "",
            data=data,
        )

    result = await file_intake_service.upload_and_analyze(session_id, user_id, upload)
    return SuccessResponse(data=map_upload_to_response(result))


@router.patch("/end/{session_id}", response_model=SuccessResponse[EndSessionResponse])
@handle_chatbot_errors
async def end_session(
    session_id: UUID,
    user_id: str = Depends(get_current_user_id),
    lifecycle_service: SessionLifecycleService = Depends(get_lifecycle_service),
) -> SuccessResponse[EndSessionResponse]:
    """
    End a session. Ending an already ended session succeeds.

    Raises:
        HTTPException(404): Session not found
    """
    session = await lifecycle_service.end_session(session_id, user_id)
    return SuccessResponse(data=map_end_to_response(session))
