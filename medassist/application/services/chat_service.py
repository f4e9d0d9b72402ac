"""
Chat service for conversation turns.

Orchestrates one turn: validation, context window retrieval, reasoning
engine invocation and persistence of the user message together with the
assistant reply. Engine failures are recovered with a fixed fallback reply
so the transcript always receives a complete pair.

The turn runs detached from the calling request; a client disconnect does
not cancel a turn that already started.

Dependencies: medassist.boundary.db.session_store, medassist.core.agentic_system
System role: Conversation turn orchestration
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from medassist.boundary.db.base import utc_now
from medassist.boundary.db.models import MessageRole, MessageType
from medassist.boundary.db.session_store import SessionStore
from medassist.configs.chat import ChatSettings
from medassist.core.agentic_system.agent.engine_protocols import ReasoningEngine
from medassist.core.exceptions import UpstreamAIError, ValidationError
from medassist.core.follow_up import suggest_follow_ups
from medassist.core.session.detached import run_detached
from medassist.core.session.records import MessageRecord, NewMessage
from medassist.core.session.templates import FALLBACK_REPLY, derive_title, report_excerpt
from medassist.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnResult:
    """Outcome of one conversation turn."""

    reply: str
    message_type: MessageType
    timestamp: datetime
    follow_up_questions: list[str] = field(default_factory=list)
    fallback: bool = False


class ChatService:
    """
    Chat service for multi-turn conversations.

    Coordinates session validation, context retrieval, reasoning engine
    invocation and atomic persistence of each turn.
    """

    def __init__(
        self,
        store: SessionStore,
        engine: ReasoningEngine,
        settings: ChatSettings,
    ) -> None:
        """
        Initialize chat service.

        Args:
            store: Session store
            engine: Reasoning engine producing assistant replies
            settings: Conversation engine settings
        """
        self.store = store
        self.engine = engine
        self.settings = settings

    def validate_message(self, text: str | None) -> str:
        """
        Check a user message before any work is done.

        Returns:
            str: The message, unmodified

        Raises:
            ValidationError: Empty, whitespace-only or too long
        """
        if text is None or not text.strip():
            raise ValidationError("Message is required", field="message")
        if len(text) > self.settings.max_message_length:
            raise ValidationError(
                f"Message exceeds {self.settings.max_message_length} characters",
                field="message",
            )
        return text

    async def send_message(self, session_id: UUID, user_id: str, text: str) -> TurnResult:
        """
        Process one user message and persist the resulting turn.

        Flow:
        1. Validate the message
        2. Under the session lock, check ownership and status
        3. Load the recent context window and the latest report analysis
        4. Call the reasoning engine (bounded; failures become the fallback reply)
        5. Append user message and reply in one transaction, deriving the title
        6. Compute follow-up suggestions from the reply

        Args:
            session_id: Target session
            user_id: Caller identity
            text: User message

        Returns:
            TurnResult: Reply, message type, timestamp and follow-up questions

        Raises:
            ValidationError: Invalid message
            SessionNotFoundError: Missing or not owned
            SessionEndedError: Session has ended
            StorageError: Persisting the turn failed
        """
        text = self.validate_message(text)
        return await run_detached(
            self._run_turn(session_id, user_id, text),
            name=f"chat-turn-{session_id}",
        )

    async def _run_turn(self, session_id: UUID, user_id: str, text: str) -> TurnResult:
        async with self.store.lock(session_id):
            session = await self.store.get_active_session(session_id, user_id)
            received_at = utc_now()
            history = await self.store.recent_messages(session_id, self.settings.context_window_size)
            user_turns = await self.store.count_user_messages(session_id)
            latest_report = await self.store.latest_report_analysis(session_id)
            report_context = report_excerpt(
                latest_report.content if latest_report else None,
                self.settings.report_context_length,
            )

            fallback = False
            try:
                reply = await self._generate_reply(session_id, history, text, report_context)
            except UpstreamAIError as e:
                log_exception_with_context(
                    logger,
                    "Reasoning engine failed, using fallback reply",
                    e,
                    session_id=str(session_id),
                )
                reply = FALLBACK_REPLY
                fallback = True

            title = derive_title(
                session.title,
                session.created_at,
                user_turns,
                text,
                self.settings.title_mutable_turns,
                self.settings.title_max_length,
            )
            _, stored = await self.store.append_messages(
                session_id,
                user_id,
                [
                    NewMessage(role=MessageRole.USER, content=text, created_at=received_at),
                    NewMessage(role=MessageRole.ASSISTANT, content=reply),
                ],
                title=title,
            )

        assistant = stored[-1]
        logger.info(
            "Chat turn completed",
            extra={
                "session_id": str(session_id),
                "position": assistant.position,
                "fallback": fallback,
            },
        )
        return TurnResult(
            reply=assistant.content,
            message_type=assistant.message_type,
            timestamp=assistant.created_at,
            follow_up_questions=[] if fallback else suggest_follow_ups(
                assistant.content, self.settings.follow_up_limit
            ),
            fallback=fallback,
        )

    async def _generate_reply(
        self,
        session_id: UUID,
        history: Sequence[MessageRecord],
        text: str,
        report_context: str | None = None,
    ) -> str:
        """
        Call the reasoning engine within the configured timeout.

        Raises:
            UpstreamAIError: Timeout, engine exception or empty reply
        """
        timeout = self.settings.reasoning_timeout_seconds
        try:
            reply = await asyncio.wait_for(
                self.engine.ainvoke(history, text, report_context=report_context),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamAIError(
                "Reasoning engine timed out",
                {"session_id": str(session_id), "timeout_seconds": timeout},
            ) from e
        except Exception as e:
            raise UpstreamAIError(
                "Reasoning engine failed",
                {"session_id": str(session_id), "error_type": type(e).__name__},
            ) from e

        if not reply or not reply.strip():
            raise UpstreamAIError("Reasoning engine returned an empty reply", {"session_id": str(session_id)})
        return reply
