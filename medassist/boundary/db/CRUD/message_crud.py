"""
Chat message CRUD operations.

Append-only transcript access. Positions are assigned by the caller from
the session's message_count so the (session_id, position) unique constraint
rejects any writer that raced past the per-session lock.

Dependencies: sqlalchemy, medassist.boundary.db.models
System role: Transcript persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from medassist.boundary.db.CRUD.base_crud import BaseCRUD
from medassist.boundary.db.models.message_model import (
    ChatMessageModel,
    MessageRole,
    MessageType,
)


class ChatMessageCRUD(BaseCRUD[ChatMessageModel]):
    """CRUD operations for ChatMessageModel."""

    def __init__(self) -> None:
        """Initialize ChatMessageCRUD with ChatMessageModel."""
        super().__init__(ChatMessageModel)

    async def append(
        self,
        session: AsyncSession,
        session_id: UUID,
        position: int,
        role: MessageRole,
        content: str,
        message_type: MessageType = MessageType.TEXT,
        created_at: datetime | None = None,
    ) -> ChatMessageModel:
        """
        Insert one transcript entry.

        Args:
            session: Async database session
            session_id: Owning session UUID
            position: 1-based ordinal for the new entry
            role: Message author
            content: Message text
            message_type: TEXT or FILE_ANALYSIS
            created_at: Timestamp; defaults to now

        Returns:
            Created ChatMessageModel
        """
        fields = {
            "session_id": session_id,
            "position": position,
            "role": role,
            "message_type": message_type,
            "content": content,
        }
        if created_at is not None:
            fields["created_at"] = created_at
        return await self.create(session, **fields)

    async def get_transcript(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> Sequence[ChatMessageModel]:
        """Retrieve the full transcript ordered by position."""
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.session_id == session_id)
            .order_by(ChatMessageModel.position)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_recent(
        self,
        session: AsyncSession,
        session_id: UUID,
        limit: int,
    ) -> list[ChatMessageModel]:
        """
        Retrieve the most recent messages, returned oldest first.

        Args:
            session: Async database session
            session_id: Session UUID
            limit: Window size

        Returns:
            list of at most `limit` messages in transcript order
        """
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.session_id == session_id)
            .order_by(ChatMessageModel.position.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(reversed(result.scalars().all()))

    async def get_latest_of_type(
        self,
        session: AsyncSession,
        session_id: UUID,
        message_type: MessageType,
    ) -> ChatMessageModel | None:
        """Retrieve the most recent message of one type, if any."""
        stmt = (
            select(ChatMessageModel)
            .where(
                ChatMessageModel.session_id == session_id,
                ChatMessageModel.message_type == message_type,
            )
            .order_by(ChatMessageModel.position.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_role(
        self,
        session: AsyncSession,
        session_id: UUID,
        role: MessageRole,
    ) -> int:
        """Count a session's messages written by one role."""
        stmt = select(func.count()).select_from(ChatMessageModel).where(
            ChatMessageModel.session_id == session_id,
            ChatMessageModel.role == role,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def get_last_for_sessions(
        self,
        session: AsyncSession,
        last_positions: dict[UUID, int],
    ) -> dict[UUID, ChatMessageModel]:
        """
        Retrieve the last message of several sessions in one query.

        Args:
            session: Async database session
            last_positions: session_id -> message_count for sessions with messages

        Returns:
            dict mapping session_id to its last message
        """
        if not last_positions:
            return {}
        stmt = select(ChatMessageModel).where(
            or_(
                *(
                    and_(
                        ChatMessageModel.session_id == session_id,
                        ChatMessageModel.position == position,
                    )
                    for session_id, position in last_positions.items()
                )
            )
        )
        result = await session.execute(stmt)
        return {message.session_id: message for message in result.scalars()}


chat_message_crud = ChatMessageCRUD()
