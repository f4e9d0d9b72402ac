"""
Test suite for ChatService.

Tests conversation turns against the real session store with a stand-in
reasoning engine: turn completeness, fallback on engine failure, context
window, title derivation and rejection of invalid or ended sessions.

System role: Verification of chat service orchestration layer
"""

import asyncio
import uuid

import pytest

from medassist.application.services import ChatService, ReportUpload
from medassist.boundary.db.models import MessageRole, MessageType
from medassist.core.exceptions import SessionEndedError, SessionNotFoundError, ValidationError
from medassist.core.session.detached import drain_inflight
from medassist.core.session.templates import FALLBACK_REPLY


@pytest.mark.asyncio
async def test_send_message_appends_user_and_reply(chat_service, history_service, started_session, user_id):
    # Arrange
    session_id = started_session.id

    # Act
    result = await chat_service.send_message(session_id, user_id, "hello")

    # Assert
    history = await history_service.get_history(session_id, user_id)
    assert len(history.messages) == 3
    assert [m.role for m in history.messages] == [
        MessageRole.ASSISTANT,
        MessageRole.USER,
        MessageRole.ASSISTANT,
    ]
    assert history.messages[1].content == "hello"
    assert history.messages[2].content == result.reply
    assert result.message_type == MessageType.TEXT
    assert result.fallback is False
    assert history.session.last_activity_at >= started_session.last_activity_at
    assert history.session.message_count == 3


@pytest.mark.asyncio
async def test_user_content_round_trips_unmodified(chat_service, history_service, started_session, user_id):
    text = "  Sharp pain\n\tbelow the ribs  "

    await chat_service.send_message(started_session.id, user_id, text)

    history = await history_service.get_history(started_session.id, user_id)
    assert history.messages[1].content == text


@pytest.mark.asyncio
async def test_engine_timeout_persists_fallback(chat_service, fake_engine, history_service, started_session, user_id):
    # Arrange
    fake_engine.delay = 1.0

    # Act
    result = await chat_service.send_message(started_session.id, user_id, "are you there?")

    # Assert
    history = await history_service.get_history(started_session.id, user_id)
    assert result.fallback is True
    assert result.reply == FALLBACK_REPLY
    assert result.follow_up_questions == []
    assert len(history.messages) == 3
    assert history.messages[-1].content == FALLBACK_REPLY


@pytest.mark.asyncio
async def test_engine_error_persists_fallback(chat_service, fake_engine, history_service, started_session, user_id):
    fake_engine.error = RuntimeError("quota exceeded")

    result = await chat_service.send_message(started_session.id, user_id, "hi")

    history = await history_service.get_history(started_session.id, user_id)
    assert result.reply == FALLBACK_REPLY
    assert len(history.messages) == 3


@pytest.mark.asyncio
async def test_empty_engine_reply_uses_fallback(chat_service, fake_engine, started_session, user_id):
    fake_engine.reply = "   "

    result = await chat_service.send_message(started_session.id, user_id, "hi")

    assert result.fallback is True


@pytest.mark.asyncio
async def test_ended_session_rejects_message(
    chat_service, lifecycle_service, history_service, fake_engine, started_session, user_id
):
    # Arrange
    await lifecycle_service.end_session(started_session.id, user_id)

    # Act / Assert
    with pytest.raises(SessionEndedError):
        await chat_service.send_message(started_session.id, user_id, "hi")

    history = await history_service.get_history(started_session.id, user_id)
    assert len(history.messages) == 1
    assert fake_engine.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", None])
async def test_blank_message_rejected(chat_service, fake_engine, started_session, user_id, text):
    with pytest.raises(ValidationError):
        await chat_service.send_message(started_session.id, user_id, text)

    assert fake_engine.calls == []


@pytest.mark.asyncio
async def test_overlong_message_rejected(chat_service, chat_settings, started_session, user_id):
    with pytest.raises(ValidationError):
        await chat_service.send_message(
            started_session.id, user_id, "x" * (chat_settings.max_message_length + 1)
        )


@pytest.mark.asyncio
async def test_unknown_or_foreign_session_not_found(chat_service, started_session):
    with pytest.raises(SessionNotFoundError):
        await chat_service.send_message(uuid.uuid4(), "u1", "hi")
    with pytest.raises(SessionNotFoundError):
        await chat_service.send_message(started_session.id, "someone-else", "hi")


@pytest.mark.asyncio
async def test_engine_receives_context_window(
    chat_service, fake_engine, chat_settings, started_session, user_id
):
    # Arrange
    for index in range(6):
        await chat_service.send_message(started_session.id, user_id, f"message {index}")
    fake_engine.calls.clear()

    # Act
    await chat_service.send_message(started_session.id, user_id, "latest")

    # Assert
    history, message = fake_engine.calls[0]
    assert message == "latest"
    assert len(history) == chat_settings.context_window_size
    assert history[-2].content == "message 5"
    assert all(m.content != "latest" for m in history)


@pytest.mark.asyncio
async def test_title_derived_from_first_message_then_frozen(
    chat_service, history_service, started_session, user_id
):
    await chat_service.send_message(started_session.id, user_id, "Persistent dry cough")
    await chat_service.send_message(started_session.id, user_id, "It started last week")

    history = await history_service.get_history(started_session.id, user_id)
    assert history.session.title == "Persistent dry cough"


@pytest.mark.asyncio
async def test_follow_ups_come_from_reply(chat_service, fake_engine, started_session, user_id):
    fake_engine.reply = "A fever usually settles within three days."

    result = await chat_service.send_message(started_session.id, user_id, "I feel hot")

    assert "How long should a fever last before I see a doctor?" in result.follow_up_questions
    assert len(result.follow_up_questions) <= 3


@pytest.mark.asyncio
async def test_concurrent_turns_keep_positions_gap_free(
    chat_service, fake_engine, history_service, started_session, user_id
):
    # Arrange
    fake_engine.delay = 0.01

    # Act
    await asyncio.gather(*(
        chat_service.send_message(started_session.id, user_id, f"parallel {index}")
        for index in range(4)
    ))

    # Assert
    history = await history_service.get_history(started_session.id, user_id)
    assert [m.position for m in history.messages] == list(range(1, 10))
    assert history.session.message_count == 9
    for user_msg, reply in zip(history.messages[1::2], history.messages[2::2]):
        assert user_msg.role == MessageRole.USER
        assert reply.role == MessageRole.ASSISTANT


@pytest.mark.asyncio
async def test_cancelled_request_still_persists_turn(
    chat_service, fake_engine, history_service, started_session, user_id
):
    # Arrange
    fake_engine.delay = 0.05

    # Act
    request = asyncio.create_task(chat_service.send_message(started_session.id, user_id, "still there?"))
    await asyncio.sleep(0.01)
    request.cancel()
    with pytest.raises(asyncio.CancelledError):
        await request
    await drain_inflight(timeout=1)

    # Assert
    history = await history_service.get_history(started_session.id, user_id)
    assert len(history.messages) == 3
    assert history.messages[1].content == "still there?"


@pytest.mark.asyncio
async def test_report_analysis_reaches_engine_after_it_leaves_the_window(
    chat_service, file_intake_service, fake_engine, fake_analyzer, started_session, user_id
):
    # Arrange
    upload = ReportUpload(file_name="lipids.txt", mime_type="text/plain", data=b"LDL 190 mg/dL")
    fake_analyzer.analysis = "LDL cholesterol is high at 190 mg/dL."
    await file_intake_service.upload_and_analyze(started_session.id, user_id, upload)
    for index in range(4):
        await chat_service.send_message(started_session.id, user_id, f"unrelated question {index}")
    fake_engine.calls.clear()
    fake_engine.report_contexts.clear()

    # Act
    await chat_service.send_message(started_session.id, user_id, "What did my report say?")

    # Assert
    history, _ = fake_engine.calls[0]
    assert all(m.message_type != MessageType.FILE_ANALYSIS for m in history)
    assert fake_engine.report_contexts == ["LDL cholesterol is high at 190 mg/dL."]


@pytest.mark.asyncio
async def test_report_context_is_latest_analysis_truncated(
    store, fake_engine, file_intake_service, fake_analyzer, chat_settings, started_session, user_id
):
    # Arrange
    settings = chat_settings.model_copy(update={"report_context_length": 20})
    service = ChatService(store, fake_engine, settings)
    upload = ReportUpload(file_name="a.txt", mime_type="text/plain", data=b"x")
    fake_analyzer.analysis = "first analysis"
    await file_intake_service.upload_and_analyze(started_session.id, user_id, upload)
    fake_analyzer.analysis = "second analysis with a long tail of findings"
    await file_intake_service.upload_and_analyze(started_session.id, user_id, upload)

    # Act
    await service.send_message(started_session.id, user_id, "and now?")

    # Assert
    assert fake_engine.report_contexts[-1] == "second analysis with"


@pytest.mark.asyncio
async def test_no_report_context_without_uploads(chat_service, fake_engine, started_session, user_id):
    await chat_service.send_message(started_session.id, user_id, "hello")

    assert fake_engine.report_contexts == [None]
