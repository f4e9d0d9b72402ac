"""
History index service.

Read side of the session engine: paginated per-user session listings with
last-message previews, and full transcripts with uploaded report metadata.

Dependencies: medassist.boundary.db.session_store, medassist.configs
System role: Session browsing use cases
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from medassist.boundary.db.models import SessionStatus
from medassist.boundary.db.session_store import SessionStore
from medassist.configs.chat import ChatSettings
from medassist.core.exceptions import ValidationError
from medassist.core.session.records import MessageRecord, ReportRecord, SessionRecord
from medassist.core.session.templates import preview

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSummary:
    """One row of a session listing."""

    session_id: UUID
    title: str
    status: SessionStatus
    created_at: datetime
    last_activity_at: datetime
    message_count: int
    report_count: int
    last_message: str

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_sessions: int
    has_next: bool
    has_prev: bool


@dataclass(frozen=True)
class SessionPage:
    sessions: list[SessionSummary]
    pagination: Pagination


@dataclass(frozen=True)
class SessionHistory:
    """A session with its full transcript."""

    session: SessionRecord
    messages: list[MessageRecord]
    reports: list[ReportRecord]


class HistoryService:
    """Session listing and transcript retrieval."""

    def __init__(self, store: SessionStore, settings: ChatSettings) -> None:
        """
        Initialize history service.

        Args:
            store: Session store
            settings: Conversation engine settings (list limits, preview length)
        """
        self.store = store
        self.settings = settings

    def clamp_limit(self, limit: int | None) -> int:
        """Apply the default list size and clamp to [1, max_list_limit]."""
        if limit is None:
            limit = self.settings.default_list_limit
        return max(1, min(limit, self.settings.max_list_limit))

    async def list_sessions(
        self,
        user_id: str,
        limit: int | None = None,
        page: int = 1,
        active: bool | None = None,
    ) -> SessionPage:
        """
        List a user's sessions, most recently active first.

        Args:
            user_id: Owner identity
            limit: Page size; default and clamping from settings
            page: 1-based page number (values below 1 mean the first page)
            active: Only active (True) or only ended (False) sessions; all when None

        Returns:
            SessionPage: Summaries plus pagination info

        Raises:
            ValidationError: Page number above the configured maximum
        """
        limit = self.clamp_limit(limit)
        page = max(1, page)
        if page > self.settings.max_list_page:
            raise ValidationError(
                f"Page must not exceed {self.settings.max_list_page}",
                field="page",
            )
        status = None
        if active is not None:
            status = SessionStatus.ACTIVE if active else SessionStatus.ENDED

        records, last_messages, total = await self.store.list_sessions(
            user_id,
            limit=limit,
            offset=(page - 1) * limit,
            status=status,
        )

        summaries = []
        for record in records:
            last = last_messages.get(record.id)
            summaries.append(
                SessionSummary(
                    session_id=record.id,
                    title=record.title,
                    status=record.status,
                    created_at=record.created_at,
                    last_activity_at=record.last_activity_at,
                    message_count=record.message_count,
                    report_count=record.report_count,
                    last_message=preview(last.content if last else None, self.settings.preview_length),
                )
            )

        total_pages = math.ceil(total / limit) if total else 0
        logger.debug(
            "Listed sessions",
            extra={"user_id": user_id, "returned": len(summaries), "total": total, "page": page},
        )
        return SessionPage(
            sessions=summaries,
            pagination=Pagination(
                current_page=page,
                total_pages=total_pages,
                total_sessions=total,
                has_next=page < total_pages,
                has_prev=page > 1,
            ),
        )

    async def get_history(self, session_id: UUID, user_id: str) -> SessionHistory:
        """
        Full ordered transcript of one owned session.

        Raises:
            SessionNotFoundError: Missing or owned by someone else
        """
        session, messages, reports = await self.store.get_transcript(session_id, user_id)
        return SessionHistory(session=session, messages=messages, reports=reports)
