"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from medassist.boundary.db.CRUD import chat_session_crud, chat_message_crud

    session = await chat_session_crud.get_owned(db, session_id, user_id)
"""

from medassist.boundary.db.CRUD.base_crud import BaseCRUD
from medassist.boundary.db.CRUD.message_crud import ChatMessageCRUD, chat_message_crud
from medassist.boundary.db.CRUD.report_crud import ReportCRUD, report_crud
from medassist.boundary.db.CRUD.session_crud import ChatSessionCRUD, chat_session_crud

__all__ = [
    "BaseCRUD",
    "ChatMessageCRUD",
    "ChatSessionCRUD",
    "ReportCRUD",
    "chat_message_crud",
    "chat_session_crud",
    "report_crud",
]
