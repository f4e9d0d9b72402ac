"""
Chat message ORM model.

One immutable transcript entry. Rows are only ever inserted; there is no
update or delete path anywhere in the CRUD layer.

Dependencies: sqlalchemy, medassist.boundary.db.base
System role: Transcript persistence
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medassist.boundary.db.base import Base, UUIDMixin, utc_now


class MessageRole(str, enum.Enum):
    """Author of a transcript entry."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageType(str, enum.Enum):
    """
    Kind of transcript entry.

    TEXT: Regular conversational message
    FILE_ANALYSIS: Assistant analysis of an uploaded report
    """

    TEXT = "text"
    FILE_ANALYSIS = "file_analysis"


class ChatMessageModel(Base, UUIDMixin):
    """
    Chat message ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Owning session
        position: 1-based ordinal inside the session, gap-free
        role: USER, ASSISTANT or SYSTEM
        message_type: TEXT or FILE_ANALYSIS
        content: Message text
        created_at: Message timestamp (UTC)

    Constraints:
        (session_id, position): UNIQUE; a second writer racing for the same
        ordinal fails instead of interleaving
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        UniqueConstraint("session_id", "position", name="uq_chat_messages_session_position"),
    )

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("chat_sessions.id"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    role: Mapped[MessageRole] = mapped_column(
        Enum(
            MessageRole,
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    message_type: Mapped[MessageType] = mapped_column(
        Enum(
            MessageType,
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=MessageType.TEXT,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    session = relationship("ChatSessionModel", back_populates="messages")
