"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory session store, stand-in reasoning engine and report
analyzer, chat settings tuned for fast tests
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import asyncio
import uuid
from collections.abc import Sequence

import pytest


class FakeReasoningEngine:
    """Reasoning engine stand-in recording every call."""

    def __init__(self, reply: str = "Rest and drink plenty of fluids.") -> None:
        self.reply = reply
        self.error: Exception | None = None
        self.delay: float = 0.0
        self.calls: list[tuple[list, str]] = []
        self.report_contexts: list[str | None] = []

    async def ainvoke(self, history: Sequence, message: str, report_context: str | None = None) -> str:
        self.calls.append((list(history), message))
        self.report_contexts.append(report_context)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeReportAnalyzer:
    """Report analyzer stand-in recording every call."""

    def __init__(self, analysis: str = "Hemoglobin is within the normal range.") -> None:
        self.analysis = analysis
        self.error: Exception | None = None
        self.delay: float = 0.0
        self.calls: list[tuple[str, str, bytes]] = []

    async def analyze(self, file_name: str, mime_type: str, data: bytes) -> str:
        self.calls.append((file_name, mime_type, data))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.analysis


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from medassist.boundary.db.base import Base
    from medassist.boundary.db import models  # noqa: F401

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, autoflush=False, expire_on_commit=False)

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_async_db(session_factory):
    """
    Plain async session for CRUD-level tests.

    Yields:
        AsyncSession: Session with an open transaction, rolled back afterwards
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(session_factory):
    """Session store backed by the in-memory database."""
    from medassist.boundary.db.session_store import SessionStore

    return SessionStore(session_factory)


@pytest.fixture
def chat_settings():
    """Chat settings with short upstream timeouts."""
    from medassist.configs.chat import ChatSettings

    return ChatSettings(
        reasoning_timeout_seconds=0.2,
        analysis_timeout_seconds=0.2,
        idle_expiry_minutes=None,
    )


@pytest.fixture
def fake_engine() -> FakeReasoningEngine:
    return FakeReasoningEngine()


@pytest.fixture
def fake_analyzer() -> FakeReportAnalyzer:
    return FakeReportAnalyzer()


@pytest.fixture
def lifecycle_service(store, chat_settings):
    from medassist.application.services import SessionLifecycleService

    return SessionLifecycleService(store, chat_settings)


@pytest.fixture
def history_service(store, chat_settings):
    from medassist.application.services import HistoryService

    return HistoryService(store, chat_settings)


@pytest.fixture
def chat_service(store, fake_engine, chat_settings):
    from medassist.application.services import ChatService

    return ChatService(store, fake_engine, chat_settings)


@pytest.fixture
def file_intake_service(store, fake_analyzer, chat_settings):
    from medassist.application.services import FileIntakeService

    return FileIntakeService(store, fake_analyzer, chat_settings)


@pytest.fixture
def user_id() -> str:
    """Generate a test user ID."""
    return f"user-{uuid.uuid4().hex[:8]}"


@pytest.fixture
async def started_session(lifecycle_service, user_id):
    """An active session owned by `user_id`, holding only the greeting."""
    session, _ = await lifecycle_service.start_session(user_id)
    return session
