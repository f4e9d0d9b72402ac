"""
Database models package.

Exports:
  - ChatSessionModel, SessionStatus: Session ORM model and lifecycle enum
  - ChatMessageModel, MessageRole, MessageType: Transcript ORM model and enums
  - ReportModel, AnalysisStatus: Uploaded report ORM model and status enum

Dependencies: sqlalchemy, medassist.boundary.db.base
System role: Database model definitions for domain entities
"""

from medassist.boundary.db.models.session_model import ChatSessionModel, SessionStatus
from medassist.boundary.db.models.message_model import ChatMessageModel, MessageRole, MessageType
from medassist.boundary.db.models.report_model import AnalysisStatus, ReportModel

__all__ = [
    "AnalysisStatus",
    "ChatMessageModel",
    "ChatSessionModel",
    "MessageRole",
    "MessageType",
    "ReportModel",
    "SessionStatus",
]
