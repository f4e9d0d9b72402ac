"""
Chat session ORM model.

Represents one conversation between a user and the medical assistant.
The row carries the denormalized counters the session list needs
(message_count, report_count, last_activity_at) so listing never has
to aggregate over the transcript.

Dependencies: sqlalchemy, medassist.boundary.db.base
System role: Session persistence for the conversation engine
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medassist.boundary.db.base import Base, TimestampMixin, UUIDMixin, utc_now


class SessionStatus(str, enum.Enum):
    """
    Session lifecycle states.

    ACTIVE: Accepts messages and uploads
    ENDED: Terminal; history stays readable, no further mutation
    """

    ACTIVE = "active"
    ENDED = "ended"


class ChatSessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Chat session ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        user_id: Opaque identifier of the owning user
        status: ACTIVE or ENDED
        title: Display title, derived from the first user turns
        last_activity_at: Time of the last accepted mutation (never decreases)
        ended_at: Time the session was ended, None while active
        message_count: Number of transcript rows for this session
        report_count: Number of uploaded-and-analyzed reports
        version: Optimistic concurrency counter maintained by the mapper

    Relationships:
        messages: One-to-many with ChatMessageModel ordered by position
        reports: One-to-many with ReportModel
    """

    __tablename__ = "chat_sessions"
    __table_args__ = (
        Index("ix_chat_sessions_user_activity", "user_id", "last_activity_at"),
        Index("ix_chat_sessions_user_status", "user_id", "status"),
    )

    user_id: Mapped[str] = mapped_column(String(128), nullable=False)

    status: Mapped[SessionStatus] = mapped_column(
        Enum(
            SessionStatus,
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=SessionStatus.ACTIVE,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    ended_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    message_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    report_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    messages = relationship(
        "ChatMessageModel",
        back_populates="session",
        order_by="ChatMessageModel.position",
    )
    reports = relationship(
        "ReportModel",
        back_populates="session",
        order_by="ReportModel.created_at",
    )
