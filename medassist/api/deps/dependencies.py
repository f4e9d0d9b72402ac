"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: medassist.configs, medassist.application, medassist.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends

from medassist.application.services import (
    ChatService,
    FileIntakeService,
    HistoryService,
    SessionLifecycleService,
)
from medassist.boundary.db.session_store import SessionStore
from medassist.configs import Settings, get_settings
from medassist.core.agentic_system.agent.engine_protocols import ReasoningEngine, ReportAnalyzer
from medassist.core.session.locks import SessionLockRegistry


class ServiceCache:
    """Container for cached process-wide instances."""

    def __init__(self):
        self._engine = None
        self._session_factory = None
        self._locks = None
        self._session_store = None
        self._reasoning_engine = None
        self._report_analyzer = None

    @property
    def engine(self):
        """Get cached async database engine."""
        if self._engine is None:
            from medassist.boundary.db.connection import get_async_engine
            self._engine = get_async_engine()
        return self._engine

    @property
    def session_factory(self):
        """Get cached async session factory bound to the engine."""
        if self._session_factory is None:
            from medassist.boundary.db.connection import get_async_session_factory
            self._session_factory = get_async_session_factory(self.engine)
        return self._session_factory

    @property
    def locks(self) -> SessionLockRegistry:
        """Get the process-wide per-session lock registry."""
        if self._locks is None:
            self._locks = SessionLockRegistry()
        return self._locks

    @property
    def session_store(self) -> SessionStore:
        """Get cached session store."""
        if self._session_store is None:
            self._session_store = SessionStore(self.session_factory, self.locks)
        return self._session_store

    @property
    def reasoning_engine(self) -> ReasoningEngine:
        """Get cached medical assistant agent."""
        if self._reasoning_engine is None:
            from medassist.core.agentic_system.agent.medical_agent import MedicalAssistantAgent

            model = get_settings().model
            self._reasoning_engine = MedicalAssistantAgent(
                model_id=model.chat_model,
                temperature=model.temperature,
                api_key=model.api_key,
            )
        return self._reasoning_engine

    @property
    def report_analyzer(self) -> ReportAnalyzer:
        """Get cached report analyzer."""
        if self._report_analyzer is None:
            from medassist.core.agentic_system.agent.report_analyzer import GeminiReportAnalyzer

            model = get_settings().model
            self._report_analyzer = GeminiReportAnalyzer(
                model_id=model.analysis_model,
                temperature=model.temperature,
                api_key=model.api_key,
            )
        return self._report_analyzer

    async def aclose(self) -> None:
        """Dispose the engine and clear all cached instances."""
        if self._engine is not None:
            await self._engine.dispose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._engine = None
        self._session_factory = None
        self._locks = None
        self._session_store = None
        self._reasoning_engine = None
        self._report_analyzer = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_session_store(cache: ServiceCache = Depends(get_service_cache)) -> SessionStore:
    """Get the shared session store."""
    return cache.session_store


def get_reasoning_engine(cache: ServiceCache = Depends(get_service_cache)) -> ReasoningEngine:
    """Get the reasoning engine used for conversation turns."""
    return cache.reasoning_engine


def get_report_analyzer(cache: ServiceCache = Depends(get_service_cache)) -> ReportAnalyzer:
    """Get the analyzer used for uploaded reports."""
    return cache.report_analyzer


def get_history_service(
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings_dependency),
) -> HistoryService:
    """
    Get history service instance.

    Args:
        store: Session store (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        HistoryService: History service instance
    """
    return HistoryService(store, settings.chat)


def get_lifecycle_service(
    store: SessionStore = Depends(get_session_store),
    history: HistoryService = Depends(get_history_service),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionLifecycleService:
    """Get session lifecycle service instance."""
    return SessionLifecycleService(store, settings.chat, history=history)


def get_chat_service(
    store: SessionStore = Depends(get_session_store),
    engine: ReasoningEngine = Depends(get_reasoning_engine),
    settings: Settings = Depends(get_settings_dependency),
) -> ChatService:
    """
    Get chat service instance.

    Args:
        store: Session store (injected via Depends)
        engine: Reasoning engine (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        ChatService: Chat service instance
    """
    return ChatService(store, engine, settings.chat)


def get_file_intake_service(
    store: SessionStore = Depends(get_session_store),
    analyzer: ReportAnalyzer = Depends(get_report_analyzer),
    settings: Settings = Depends(get_settings_dependency),
) -> FileIntakeService:
    """Get file intake service instance."""
    return FileIntakeService(store, analyzer, settings.chat)
