"""
Session store.

The only writer of chat sessions, transcripts and report metadata. Every
operation runs in its own transaction from the store's session factory, so
the outcome of a turn does not depend on the HTTP request that started it.

Guarantees:
- a batch of messages is appended in one transaction together with the
  session counters, so readers never see half a turn or half an upload;
- positions are gap-free, message_count matches the transcript length;
- ended sessions reject appends (re-checked inside the write transaction);
- last_activity_at never decreases.

Mutations on one session are serialized by `lock(session_id)` within the
process and by the mapper version counter across processes.

Dependencies: sqlalchemy, medassist.boundary.db.CRUD, medassist.core.session
System role: Durable record of sessions and their ordered messages
"""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from medassist.boundary.db.base import as_utc, utc_now
from medassist.boundary.db.CRUD import chat_message_crud, chat_session_crud, report_crud
from medassist.boundary.db.models import (
    ChatSessionModel,
    MessageRole,
    MessageType,
    SessionStatus,
)
from medassist.core.exceptions import (
    SessionConflictError,
    SessionEndedError,
    SessionNotFoundError,
    StorageError,
    ValidationError,
)
from medassist.core.session.locks import SessionLockRegistry
from medassist.core.session.records import (
    MessageRecord,
    NewMessage,
    NewReport,
    ReportRecord,
    SessionRecord,
)

logger = logging.getLogger(__name__)


class SessionStore:
    """Transactional access to chat sessions and transcripts."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        locks: SessionLockRegistry | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            session_factory: Async session factory bound to the database engine
            locks: Per-session lock registry (a private one when omitted)
        """
        self._session_factory = session_factory
        self.locks = locks or SessionLockRegistry()

    def lock(self, session_id: UUID):
        """Serialize mutating operations on one session (async context manager)."""
        return self.locks.hold(session_id)

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Open a session and transaction, translating database failures.

        Domain exceptions raised inside the block roll back and propagate as-is.
        """
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    yield db
        except StaleDataError as e:
            raise SessionConflictError(
                "Chat session was modified concurrently, please retry",
                operation=operation,
            ) from e
        except IntegrityError as e:
            raise SessionConflictError(
                "Chat session was modified concurrently, please retry",
                operation=operation,
            ) from e
        except SQLAlchemyError as e:
            logger.exception(
                "Session store operation failed",
                extra={"operation": operation, "error_type": type(e).__name__},
            )
            raise StorageError("Failed to access chat session storage", operation=operation) from e

    async def _load_owned(
        self,
        db: AsyncSession,
        session_id: UUID,
        user_id: str,
    ) -> ChatSessionModel:
        model = await chat_session_crud.get_owned(db, session_id, user_id)
        if model is None:
            raise SessionNotFoundError(session_id)
        return model

    @staticmethod
    def _touch(model: ChatSessionModel, at: datetime) -> None:
        previous = as_utc(model.last_activity_at)
        model.last_activity_at = max(previous, at)

    async def create_session(
        self,
        user_id: str,
        title: str,
        greeting: NewMessage,
    ) -> tuple[SessionRecord, MessageRecord]:
        """
        Create an active session holding a single opening message.

        Args:
            user_id: Owner identity
            title: Initial title
            greeting: First transcript entry

        Returns:
            tuple: (created session, stored greeting)
        """
        now = greeting.created_at or utc_now()
        async with self._transaction("create_session") as db:
            model = await chat_session_crud.create(
                db,
                user_id=user_id,
                status=SessionStatus.ACTIVE,
                title=title,
                created_at=now,
                updated_at=now,
                last_activity_at=now,
                message_count=1,
                report_count=0,
            )
            message = await chat_message_crud.append(
                db,
                session_id=model.id,
                position=1,
                role=greeting.role,
                content=greeting.content,
                message_type=greeting.message_type,
                created_at=now,
            )
            return SessionRecord.from_model(model), MessageRecord.from_model(message)

    async def get_session(self, session_id: UUID, user_id: str) -> SessionRecord:
        """
        Read a session owned by the caller.

        Raises:
            SessionNotFoundError: Missing or owned by someone else
        """
        async with self._transaction("get_session") as db:
            model = await self._load_owned(db, session_id, user_id)
            return SessionRecord.from_model(model)

    async def get_active_session(self, session_id: UUID, user_id: str) -> SessionRecord:
        """
        Read a session that must still accept messages.

        Raises:
            SessionNotFoundError: Missing or owned by someone else
            SessionEndedError: Session is ended
        """
        record = await self.get_session(session_id, user_id)
        if not record.is_active:
            raise SessionEndedError(session_id)
        return record

    async def recent_messages(self, session_id: UUID, limit: int) -> list[MessageRecord]:
        """Last `limit` transcript entries in transcript order."""
        async with self._transaction("recent_messages") as db:
            messages = await chat_message_crud.get_recent(db, session_id, limit)
            return [MessageRecord.from_model(m) for m in messages]

    async def latest_report_analysis(self, session_id: UUID) -> MessageRecord | None:
        """Most recent report analysis in the transcript, if any."""
        async with self._transaction("latest_report_analysis") as db:
            message = await chat_message_crud.get_latest_of_type(db, session_id, MessageType.FILE_ANALYSIS)
            return MessageRecord.from_model(message) if message else None

    async def count_user_messages(self, session_id: UUID) -> int:
        """Number of user-authored messages in the transcript."""
        async with self._transaction("count_user_messages") as db:
            return await chat_message_crud.count_by_role(db, session_id, MessageRole.USER)

    async def append_messages(
        self,
        session_id: UUID,
        user_id: str,
        messages: Sequence[NewMessage],
        report: NewReport | None = None,
        title: str | None = None,
    ) -> tuple[SessionRecord, list[MessageRecord]]:
        """
        Append messages atomically and update the session counters once.

        Args:
            session_id: Target session
            user_id: Caller identity
            messages: Entries to append, in order
            report: Report metadata to record with the batch (upload path)
            title: Replacement title, if the caller derived one

        Returns:
            tuple: (updated session, stored messages)

        Raises:
            ValidationError: Empty batch
            SessionNotFoundError: Missing or not owned
            SessionEndedError: Session was ended
            SessionConflictError: Concurrent writer won the race
            StorageError: Any other persistence failure
        """
        if not messages:
            raise ValidationError("At least one message is required", field="messages")

        async with self._transaction("append_messages") as db:
            model = await self._load_owned(db, session_id, user_id)
            if model.status != SessionStatus.ACTIVE:
                raise SessionEndedError(session_id)

            now = utc_now()
            stored = []
            position = model.message_count
            for entry in messages:
                position += 1
                stored.append(
                    await chat_message_crud.append(
                        db,
                        session_id=model.id,
                        position=position,
                        role=entry.role,
                        content=entry.content,
                        message_type=entry.message_type,
                        created_at=entry.created_at or now,
                    )
                )

            if report is not None:
                await report_crud.create(
                    db,
                    session_id=model.id,
                    file_name=report.file_name,
                    mime_type=report.mime_type,
                    file_size=report.file_size,
                )
                model.report_count += 1

            model.message_count = position
            if title:
                model.title = title
            self._touch(model, now)
            await db.flush()

            logger.debug(
                "Appended messages",
                extra={
                    "session_id": str(session_id),
                    "count": len(stored),
                    "message_count": model.message_count,
                },
            )
            return SessionRecord.from_model(model), [MessageRecord.from_model(m) for m in stored]

    async def end_session(self, session_id: UUID, user_id: str) -> tuple[SessionRecord, bool]:
        """
        Move a session to ENDED.

        Returns:
            tuple: (session, changed) where changed is False when it was already ended

        Raises:
            SessionNotFoundError: Missing or not owned
        """
        async with self._transaction("end_session") as db:
            model = await self._load_owned(db, session_id, user_id)
            if model.status == SessionStatus.ENDED:
                return SessionRecord.from_model(model), False

            now = utc_now()
            model.status = SessionStatus.ENDED
            model.ended_at = now
            self._touch(model, now)
            await db.flush()
            return SessionRecord.from_model(model), True

    async def list_sessions(
        self,
        user_id: str,
        limit: int,
        offset: int = 0,
        status: SessionStatus | None = None,
    ) -> tuple[list[SessionRecord], dict[UUID, MessageRecord], int]:
        """
        List a user's sessions by recency with their last messages.

        Returns:
            tuple: (sessions, last message per session id, total matching sessions)
        """
        async with self._transaction("list_sessions") as db:
            models = await chat_session_crud.list_for_user(db, user_id, limit, offset, status)
            total = await chat_session_crud.count_for_user(db, user_id, status)
            last = await chat_message_crud.get_last_for_sessions(
                db,
                {m.id: m.message_count for m in models if m.message_count > 0},
            )
            return (
                [SessionRecord.from_model(m) for m in models],
                {sid: MessageRecord.from_model(m) for sid, m in last.items()},
                total,
            )

    async def get_transcript(
        self,
        session_id: UUID,
        user_id: str,
    ) -> tuple[SessionRecord, list[MessageRecord], list[ReportRecord]]:
        """
        Read a session with its full ordered transcript and report metadata.

        Raises:
            SessionNotFoundError: Missing or not owned
        """
        async with self._transaction("get_transcript") as db:
            model = await self._load_owned(db, session_id, user_id)
            messages = await chat_message_crud.get_transcript(db, model.id)
            reports = await report_crud.list_for_session(db, model.id)
            return (
                SessionRecord.from_model(model),
                [MessageRecord.from_model(m) for m in messages],
                [ReportRecord.from_model(r) for r in reports],
            )

    async def find_idle_sessions(self, idle_before: datetime) -> list[tuple[UUID, str]]:
        """Active sessions whose last activity predates the cutoff, as (id, user_id)."""
        async with self._transaction("find_idle_sessions") as db:
            return await chat_session_crud.list_idle_ids(db, idle_before)
