"""
Session engine core.

Records, per-session locking, detached execution and fixed transcript texts.
"""

from medassist.core.session.detached import run_detached
from medassist.core.session.locks import SessionLockRegistry
from medassist.core.session.records import (
    MessageRecord,
    NewMessage,
    NewReport,
    ReportRecord,
    SessionRecord,
)

__all__ = [
    "MessageRecord",
    "NewMessage",
    "NewReport",
    "ReportRecord",
    "SessionLockRegistry",
    "SessionRecord",
    "run_detached",
]
