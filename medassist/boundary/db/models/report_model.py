"""
Uploaded report ORM model.

Metadata of a medical report that was uploaded into a session and analyzed.
The file bytes themselves are not stored; the analysis lives in the
transcript as a FILE_ANALYSIS message.

Dependencies: sqlalchemy, medassist.boundary.db.base
System role: Report metadata persistence
"""

import enum
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medassist.boundary.db.base import Base, TimestampMixin, UUIDMixin


class AnalysisStatus(str, enum.Enum):
    """
    Report analysis states.

    Reports are only persisted once analysis succeeded, so COMPLETED is the
    only state written today; FAILED is kept for imported legacy rows.
    """

    COMPLETED = "completed"
    FAILED = "failed"


class ReportModel(Base, UUIDMixin, TimestampMixin):
    """
    Uploaded report ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Session the report was uploaded into
        file_name: Original client-side file name
        mime_type: Declared content type
        file_size: Payload size in bytes
        analysis_status: Outcome of the analysis
        created_at: Upload timestamp (UTC)
    """

    __tablename__ = "chat_reports"

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("chat_sessions.id"),
        nullable=False,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(128), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)

    analysis_status: Mapped[AnalysisStatus] = mapped_column(
        Enum(
            AnalysisStatus,
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=AnalysisStatus.COMPLETED,
    )

    session = relationship("ChatSessionModel", back_populates="reports")
