"""
Session lifecycle service.

Starts and ends sessions and runs the optional idle-expiry policy. Listing
is delegated to the history service, which owns the read side.

Dependencies: medassist.boundary.db.session_store, medassist.configs
System role: Session lifecycle use cases
"""

import logging
from datetime import datetime, timedelta
from uuid import UUID

from medassist.application.services.history_service import HistoryService, SessionPage
from medassist.boundary.db.base import utc_now
from medassist.boundary.db.models import MessageRole
from medassist.boundary.db.session_store import SessionStore
from medassist.configs.chat import ChatSettings
from medassist.core.exceptions import MedAssistException, ValidationError
from medassist.core.session.records import MessageRecord, NewMessage, SessionRecord
from medassist.core.session.templates import GREETING_MESSAGE, default_title
from medassist.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class SessionLifecycleService:
    """Session lifecycle orchestrator."""

    def __init__(
        self,
        store: SessionStore,
        settings: ChatSettings,
        history: HistoryService | None = None,
    ) -> None:
        """
        Initialize lifecycle service.

        Args:
            store: Session store
            settings: Conversation engine settings
            history: History service used for listings
        """
        self.store = store
        self.settings = settings
        self.history = history or HistoryService(store, settings)

    async def start_session(self, user_id: str) -> tuple[SessionRecord, MessageRecord]:
        """
        Create an active session opened by the assistant greeting.

        Args:
            user_id: Owner identity

        Returns:
            tuple: (session, greeting message)

        Raises:
            ValidationError: Blank user id
            StorageError: Persistence failed
        """
        if not user_id or not user_id.strip():
            raise ValidationError("User identity is required", field="user_id")

        now = utc_now()
        session, greeting = await self.store.create_session(
            user_id,
            title=default_title(now),
            greeting=NewMessage(role=MessageRole.ASSISTANT, content=GREETING_MESSAGE, created_at=now),
        )
        logger.info("Chat session started", extra={"session_id": str(session.id), "user_id": user_id})
        return session, greeting

    async def end_session(self, session_id: UUID, user_id: str) -> SessionRecord:
        """
        End a session. Ending an already ended session succeeds without changes.

        Raises:
            SessionNotFoundError: Missing or owned by someone else
        """
        async with self.store.lock(session_id):
            session, changed = await self.store.end_session(session_id, user_id)

        if changed:
            logger.info("Chat session ended", extra={"session_id": str(session_id)})
        return session

    async def list_sessions(
        self,
        user_id: str,
        limit: int | None = None,
        page: int = 1,
        active: bool | None = None,
    ) -> SessionPage:
        """List a user's sessions by recency (see HistoryService.list_sessions)."""
        return await self.history.list_sessions(user_id, limit=limit, page=page, active=active)

    async def expire_idle_sessions(self, now: datetime | None = None) -> int:
        """
        End active sessions idle for longer than the configured threshold.

        Each candidate is re-read under its lock, so a session that received a
        message after the scan is left alone.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            int: Number of sessions ended; 0 when the policy is disabled
        """
        minutes = self.settings.idle_expiry_minutes
        if not minutes:
            return 0

        cutoff = (now or utc_now()) - timedelta(minutes=minutes)
        candidates = await self.store.find_idle_sessions(cutoff)

        expired = 0
        for session_id, user_id in candidates:
            try:
                async with self.store.lock(session_id):
                    session = await self.store.get_session(session_id, user_id)
                    if not session.is_active or session.last_activity_at >= cutoff:
                        continue
                    _, changed = await self.store.end_session(session_id, user_id)
            except MedAssistException as e:
                log_exception_with_context(
                    logger, "Failed to expire idle session", e, session_id=str(session_id)
                )
                continue
            if changed:
                expired += 1

        if expired:
            logger.info("Expired idle sessions", extra={"count": expired, "cutoff": cutoff.isoformat()})
        return expired
