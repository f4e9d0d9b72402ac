"""
Test suite for HistoryService.

Tests session listings (bound, recency order, previews, pagination and
status filter) and transcript retrieval.

System role: Verification of session browsing use cases
"""

import uuid

import pytest

from medassist.core.exceptions import SessionNotFoundError, ValidationError


@pytest.mark.asyncio
async def test_list_returns_most_recent_first_within_limit(
    lifecycle_service, chat_service, history_service, user_id
):
    # Arrange
    sessions = [(await lifecycle_service.start_session(user_id))[0] for _ in range(8)]
    bumped = sessions[2]
    await chat_service.send_message(bumped.id, user_id, "follow up on my results")

    # Act
    page = await history_service.list_sessions(user_id, limit=5)

    # Assert
    assert len(page.sessions) == 5
    assert page.sessions[0].session_id == bumped.id
    activity = [s.last_activity_at for s in page.sessions]
    assert activity == sorted(activity, reverse=True)
    assert page.pagination.total_sessions == 8
    assert page.pagination.total_pages == 2
    assert page.pagination.has_next is True
    assert page.pagination.has_prev is False


@pytest.mark.asyncio
async def test_second_page(lifecycle_service, history_service, user_id):
    for _ in range(3):
        await lifecycle_service.start_session(user_id)

    page = await history_service.list_sessions(user_id, limit=2, page=2)

    assert len(page.sessions) == 1
    assert page.pagination.current_page == 2
    assert page.pagination.has_next is False
    assert page.pagination.has_prev is True


@pytest.mark.asyncio
async def test_limit_is_clamped(lifecycle_service, history_service, chat_settings, user_id):
    await lifecycle_service.start_session(user_id)

    assert history_service.clamp_limit(None) == chat_settings.default_list_limit
    assert history_service.clamp_limit(0) == 1
    assert history_service.clamp_limit(10_000) == chat_settings.max_list_limit
    page = await history_service.list_sessions(user_id, limit=-3)
    assert len(page.sessions) == 1


@pytest.mark.asyncio
async def test_summary_preview_and_counts(lifecycle_service, chat_service, fake_engine, history_service, user_id):
    # Arrange
    session, _ = await lifecycle_service.start_session(user_id)
    fake_engine.reply = "r" * 150
    await chat_service.send_message(session.id, user_id, "hello")

    # Act
    page = await history_service.list_sessions(user_id)

    # Assert
    summary = page.sessions[0]
    assert summary.message_count == 3
    assert summary.report_count == 0
    assert summary.last_message == "r" * 100 + "..."
    assert summary.is_active is True


@pytest.mark.asyncio
async def test_active_filter(lifecycle_service, history_service, user_id):
    open_session, _ = await lifecycle_service.start_session(user_id)
    closed_session, _ = await lifecycle_service.start_session(user_id)
    await lifecycle_service.end_session(closed_session.id, user_id)

    active = await history_service.list_sessions(user_id, active=True)
    ended = await history_service.list_sessions(user_id, active=False)

    assert [s.session_id for s in active.sessions] == [open_session.id]
    assert [s.session_id for s in ended.sessions] == [closed_session.id]


@pytest.mark.asyncio
async def test_empty_listing(history_service):
    page = await history_service.list_sessions("nobody")

    assert page.sessions == []
    assert page.pagination.total_pages == 0
    assert page.pagination.has_next is False


@pytest.mark.asyncio
async def test_other_users_sessions_are_invisible(lifecycle_service, history_service, started_session):
    page = await history_service.list_sessions("someone-else")

    assert page.sessions == []
    with pytest.raises(SessionNotFoundError):
        await history_service.get_history(started_session.id, "someone-else")


@pytest.mark.asyncio
async def test_get_history_unknown_session(history_service, user_id):
    with pytest.raises(SessionNotFoundError):
        await history_service.get_history(uuid.uuid4(), user_id)


@pytest.mark.asyncio
async def test_page_beyond_maximum_is_rejected(history_service, chat_settings, user_id):
    with pytest.raises(ValidationError):
        await history_service.list_sessions(user_id, limit=10, page=10**20)
    with pytest.raises(ValidationError):
        await history_service.list_sessions(user_id, page=chat_settings.max_list_page + 1)


@pytest.mark.asyncio
async def test_last_allowed_page_is_empty_not_an_error(history_service, chat_settings, user_id):
    page = await history_service.list_sessions(user_id, page=chat_settings.max_list_page)

    assert page.sessions == []
