"""
Test suite for SessionLifecycleService.

Tests session start, end (including idempotency) and the optional
idle-expiry policy.

System role: Verification of session lifecycle use cases
"""

import uuid
from datetime import timedelta

import pytest

from medassist.application.services import SessionLifecycleService
from medassist.boundary.db.base import utc_now
from medassist.boundary.db.models import MessageRole, SessionStatus
from medassist.core.exceptions import SessionNotFoundError, ValidationError
from medassist.core.session.templates import GREETING_MESSAGE, is_default_title


@pytest.mark.asyncio
async def test_start_session_creates_active_session_with_greeting(
    lifecycle_service, history_service, user_id
):
    # Act
    session, greeting = await lifecycle_service.start_session(user_id)

    # Assert
    history = await history_service.get_history(session.id, user_id)
    assert session.status == SessionStatus.ACTIVE
    assert session.message_count == 1
    assert is_default_title(session.title, session.created_at)
    assert greeting.content == GREETING_MESSAGE
    assert [(m.role, m.content) for m in history.messages] == [(MessageRole.ASSISTANT, GREETING_MESSAGE)]


@pytest.mark.asyncio
async def test_start_session_requires_user(lifecycle_service):
    with pytest.raises(ValidationError):
        await lifecycle_service.start_session("  ")


@pytest.mark.asyncio
async def test_end_session(lifecycle_service, started_session, user_id):
    ended = await lifecycle_service.end_session(started_session.id, user_id)

    assert ended.status == SessionStatus.ENDED
    assert ended.is_active is False


@pytest.mark.asyncio
async def test_end_session_twice_is_idempotent(lifecycle_service, started_session, user_id):
    first = await lifecycle_service.end_session(started_session.id, user_id)
    second = await lifecycle_service.end_session(started_session.id, user_id)

    assert second.status == SessionStatus.ENDED
    assert second.ended_at == first.ended_at


@pytest.mark.asyncio
async def test_end_unknown_session(lifecycle_service, user_id):
    with pytest.raises(SessionNotFoundError):
        await lifecycle_service.end_session(uuid.uuid4(), user_id)


@pytest.mark.asyncio
async def test_list_sessions_delegates_to_history(lifecycle_service, user_id):
    await lifecycle_service.start_session(user_id)

    page = await lifecycle_service.list_sessions(user_id)

    assert page.pagination.total_sessions == 1


@pytest.mark.asyncio
async def test_idle_expiry_disabled_by_default(lifecycle_service, started_session):
    assert await lifecycle_service.expire_idle_sessions(utc_now() + timedelta(days=1)) == 0


@pytest.mark.asyncio
async def test_idle_expiry_ends_only_idle_sessions(store, chat_settings, user_id):
    # Arrange
    settings = chat_settings.model_copy(update={"idle_expiry_minutes": 30})
    service = SessionLifecycleService(store, settings)
    session, _ = await service.start_session(user_id)

    # Act
    not_yet = await service.expire_idle_sessions(utc_now() + timedelta(minutes=10))
    expired = await service.expire_idle_sessions(utc_now() + timedelta(minutes=31))

    # Assert
    record = await store.get_session(session.id, user_id)
    assert not_yet == 0
    assert expired == 1
    assert record.status == SessionStatus.ENDED
