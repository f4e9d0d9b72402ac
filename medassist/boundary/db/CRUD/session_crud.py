"""
Chat session CRUD operations.

Provides ownership-scoped reads and recency-ordered listing for
ChatSessionModel. Field mutations happen on loaded instances inside the
session store so the mapper's version counter is honored.

Dependencies: sqlalchemy, medassist.boundary.db.models
System role: Session persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from medassist.boundary.db.CRUD.base_crud import BaseCRUD
from medassist.boundary.db.models.session_model import ChatSessionModel, SessionStatus


class ChatSessionCRUD(BaseCRUD[ChatSessionModel]):
    """CRUD operations for ChatSessionModel."""

    def __init__(self) -> None:
        """Initialize ChatSessionCRUD with ChatSessionModel."""
        super().__init__(ChatSessionModel)

    async def get_owned(
        self,
        session: AsyncSession,
        id: UUID,
        user_id: str,
    ) -> ChatSessionModel | None:
        """
        Retrieve a session only if it belongs to the given user.

        Args:
            session: Async database session
            id: Session UUID
            user_id: Caller identity

        Returns:
            ChatSessionModel if found and owned, None otherwise
        """
        stmt = select(ChatSessionModel).where(
            ChatSessionModel.id == id,
            ChatSessionModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        limit: int,
        offset: int = 0,
        status: SessionStatus | None = None,
    ) -> Sequence[ChatSessionModel]:
        """
        Retrieve a user's sessions, most recently active first.

        Args:
            session: Async database session
            user_id: Owner identity
            limit: Maximum number of sessions to return
            offset: Number of sessions to skip
            status: Optional status filter

        Returns:
            Sequence of ChatSessionModels ordered by last_activity_at desc
        """
        stmt = select(ChatSessionModel).where(ChatSessionModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(ChatSessionModel.status == status)
        stmt = (
            stmt.order_by(
                ChatSessionModel.last_activity_at.desc(),
                ChatSessionModel.created_at.desc(),
            )
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        status: SessionStatus | None = None,
    ) -> int:
        """Count a user's sessions, optionally filtered by status."""
        stmt = select(func.count()).select_from(ChatSessionModel).where(
            ChatSessionModel.user_id == user_id
        )
        if status is not None:
            stmt = stmt.where(ChatSessionModel.status == status)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def list_idle_ids(
        self,
        session: AsyncSession,
        idle_before: datetime,
    ) -> list[tuple[UUID, str]]:
        """
        Find active sessions whose last activity is older than a cutoff.

        Args:
            session: Async database session
            idle_before: Cutoff timestamp (UTC)

        Returns:
            list of (session_id, user_id) pairs
        """
        stmt = select(ChatSessionModel.id, ChatSessionModel.user_id).where(
            ChatSessionModel.status == SessionStatus.ACTIVE,
            ChatSessionModel.last_activity_at < idle_before,
        )
        result = await session.execute(stmt)
        return [(row.id, row.user_id) for row in result.all()]


chat_session_crud = ChatSessionCRUD()
