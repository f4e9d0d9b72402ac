"""
File intake service.

Validates an uploaded medical report, has it analyzed and records the
upload notice with the analysis as one atomic pair. Analyzer failures
abort the upload without touching the transcript.

Dependencies: medassist.boundary.db.session_store, medassist.core.agentic_system
System role: Report upload orchestration
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePath
from uuid import UUID

from medassist.boundary.db.models import MessageRole, MessageType
from medassist.boundary.db.session_store import SessionStore
from medassist.configs.chat import ChatSettings
from medassist.core.agentic_system.agent.engine_protocols import ReportAnalyzer
from medassist.core.exceptions import UpstreamAnalysisError, ValidationError
from medassist.core.session.detached import run_detached
from medassist.core.session.records import NewMessage, NewReport
from medassist.core.session.templates import upload_notice

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "application/rtf",
    "text/rtf",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/bmp",
    "image/tiff",
    "image/tif",
    "image/webp",
})


@dataclass(frozen=True)
class ReportUpload:
    """An uploaded file as received from the client."""

    file_name: str
    mime_type: str
    data: bytes


@dataclass(frozen=True)
class UploadResult:
    file_name: str
    analysis: str
    timestamp: datetime
    report_count: int


def normalize_mime_type(mime_type: str | None) -> str:
    """Lower-case the media type and drop parameters such as charset."""
    return (mime_type or "").split(";", 1)[0].strip().lower()


class FileIntakeService:
    """Report upload orchestrator."""

    def __init__(
        self,
        store: SessionStore,
        analyzer: ReportAnalyzer,
        settings: ChatSettings,
    ) -> None:
        self.store = store
        self.analyzer = analyzer
        self.settings = settings

    def validate_upload(self, upload: ReportUpload | None) -> ReportUpload:
        """
        Check an upload before any work is done.

        Returns:
            ReportUpload: Upload with a clean file name and normalized mime type

        Raises:
            ValidationError: Missing, empty, too large or unsupported file
        """
        if upload is None:
            raise ValidationError("No file uploaded", field="file")
        if not upload.data:
            raise ValidationError("Uploaded file is empty", field="file")
        if len(upload.data) > self.settings.max_upload_bytes:
            limit_mb = self.settings.max_upload_bytes // (1024 * 1024)
            raise ValidationError(f"File too large. Maximum size is {limit_mb}MB", field="file")

        mime_type = normalize_mime_type(upload.mime_type)
        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                "Invalid file type. Only PDF, Word, text, RTF and image files are allowed",
                field="file",
                details={"mime_type": mime_type},
            )

        file_name = PurePath((upload.file_name or "").replace("\\", "/")).name.strip() or "report"
        return ReportUpload(file_name=file_name, mime_type=mime_type, data=upload.data)

    async def upload_and_analyze(
        self,
        session_id: UUID,
        user_id: str,
        upload: ReportUpload | None,
    ) -> UploadResult:
        """
        Analyze an uploaded report and record it in the conversation.

        Args:
            session_id: Target session
            user_id: Caller identity
            upload: Uploaded file

        Returns:
            UploadResult: File name and analysis text

        Raises:
            ValidationError: Invalid upload
            SessionNotFoundError: Missing or not owned
            SessionEndedError: Session has ended
            UpstreamAnalysisError: Analyzer failed, timed out or returned nothing
            StorageError: Persisting the upload failed
        """
        upload = self.validate_upload(upload)
        return await run_detached(
            self._run_upload(session_id, user_id, upload),
            name=f"report-upload-{session_id}",
        )

    async def _run_upload(self, session_id: UUID, user_id: str, upload: ReportUpload) -> UploadResult:
        async with self.store.lock(session_id):
            await self.store.get_active_session(session_id, user_id)
            analysis = await self._analyze(upload)

            session, stored = await self.store.append_messages(
                session_id,
                user_id,
                [
                    NewMessage(
                        role=MessageRole.SYSTEM,
                        content=upload_notice(upload.file_name, len(upload.data)),
                    ),
                    NewMessage(
                        role=MessageRole.ASSISTANT,
                        content=analysis,
                        message_type=MessageType.FILE_ANALYSIS,
                    ),
                ],
                report=NewReport(
                    file_name=upload.file_name,
                    mime_type=upload.mime_type,
                    file_size=len(upload.data),
                ),
            )

        logger.info(
            "Report analyzed",
            extra={
                "session_id": str(session_id),
                "mime_type": upload.mime_type,
                "file_size": len(upload.data),
                "report_count": session.report_count,
            },
        )
        return UploadResult(
            file_name=upload.file_name,
            analysis=stored[-1].content,
            timestamp=stored[-1].created_at,
            report_count=session.report_count,
        )

    async def _analyze(self, upload: ReportUpload) -> str:
        timeout = self.settings.analysis_timeout_seconds
        try:
            analysis = await asyncio.wait_for(
                self.analyzer.analyze(upload.file_name, upload.mime_type, upload.data),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                "Report analysis timed out",
                extra={"file_name": upload.file_name, "timeout_seconds": timeout},
            )
            raise UpstreamAnalysisError("Report analysis timed out", file_name=upload.file_name) from e
        except Exception as e:
            logger.error(
                "Report analysis failed",
                exc_info=e,
                extra={"file_name": upload.file_name, "error_type": type(e).__name__},
            )
            raise UpstreamAnalysisError(file_name=upload.file_name) from e

        if not analysis or not analysis.strip():
            raise UpstreamAnalysisError("Report analysis came back empty", file_name=upload.file_name)
        return analysis
