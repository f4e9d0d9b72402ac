"""Tests for the medical assistant agent and report analyzer.

Tests all components:
- medical_agent_prompt.py: system prompt and chat template layout
- medical_agent.py: transcript mapping, content flattening, MedicalAssistantAgent
- report_analyzer.py: request building per media type, GeminiReportAnalyzer

Dependencies: pytest, unittest.mock, langchain_core
System role: Reasoning engine and report analyzer adapter verification
"""

import base64
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from medassist.boundary.db.base import utc_now
from medassist.boundary.db.models import MessageRole, MessageType
from medassist.core.agentic_system.agent import (
    GeminiReportAnalyzer,
    MedicalAssistantAgent,
    ReasoningEngine,
    ReportAnalyzer,
)
from medassist.core.agentic_system.agent.medical_agent import content_text, to_langchain_messages
from medassist.core.agentic_system.agent.medical_agent_prompt import (
    MEDICAL_AGENT_PROMPT,
    SYSTEM_PROMPT,
)
from medassist.core.session.records import MessageRecord
from medassist.core.session.templates import MEDICAL_DISCLAIMER


def record(role: MessageRole, content: str, position: int = 1) -> MessageRecord:
    return MessageRecord(
        id=uuid.uuid4(),
        session_id=uuid.uuid4(),
        position=position,
        role=role,
        message_type=MessageType.TEXT,
        content=content,
        created_at=utc_now(),
    )


def mock_model(content) -> MagicMock:
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=AIMessage(content=content))
    return model


# ============================================================================
# Prompt Tests
# ============================================================================


class TestMedicalAgentPrompt:
    """Test the chat prompt layout."""

    def test_prompt_places_history_between_system_and_message(self) -> None:
        """Should render system prompt, history, then the new message."""
        messages = MEDICAL_AGENT_PROMPT.invoke({
            "history": [HumanMessage(content="earlier"), AIMessage(content="answer")],
            "message": "new question",
        }).to_messages()

        assert isinstance(messages[0], SystemMessage)
        assert messages[0].content == SYSTEM_PROMPT
        assert [m.content for m in messages[1:]] == ["earlier", "answer", "new question"]
        assert isinstance(messages[-1], HumanMessage)


# ============================================================================
# Helper Tests
# ============================================================================


class TestMessageMapping:
    """Test transcript to LangChain message conversion."""

    def test_roles_map_to_message_classes(self) -> None:
        history = [
            record(MessageRole.ASSISTANT, "Hello!", 1),
            record(MessageRole.USER, "I have a rash", 2),
            record(MessageRole.SYSTEM, "Medical report uploaded: a.pdf (1KB)", 3),
        ]

        messages = to_langchain_messages(history)

        assert [type(m) for m in messages] == [AIMessage, HumanMessage, SystemMessage]
        assert messages[1].content == "I have a rash"

    def test_content_text_flattens_parts(self) -> None:
        assert content_text("plain") == "plain"
        assert content_text([{"type": "text", "text": "a"}, "b", {"type": "image"}]) == "ab"


# ============================================================================
# MedicalAssistantAgent Tests
# ============================================================================


class TestMedicalAssistantAgent:
    """Test reply generation with a mocked chat model."""

    def test_satisfies_reasoning_engine_protocol(self) -> None:
        assert isinstance(MedicalAssistantAgent(), ReasoningEngine)

    @pytest.mark.asyncio
    async def test_reply_gets_disclaimer(self) -> None:
        """Should return the model answer followed by the disclaimer."""
        agent = MedicalAssistantAgent()
        agent._model = mock_model("  Drink water and rest.  ")

        reply = await agent.ainvoke([record(MessageRole.ASSISTANT, "Hello!")], "I feel dizzy")

        assert reply == "Drink water and rest." + MEDICAL_DISCLAIMER
        sent = agent._model.ainvoke.call_args.args[0]
        assert sent[-1].content == "I feel dizzy"
        assert sent[1].content == "Hello!"

    @pytest.mark.asyncio
    async def test_report_context_extends_system_prompt(self) -> None:
        """Should append the latest report excerpt to the system message."""
        agent = MedicalAssistantAgent()
        agent._model = mock_model("Your LDL is above range.")

        await agent.ainvoke([], "what did my report say?", report_context="LDL 190 mg/dL")

        system = agent._model.ainvoke.call_args.args[0][0]
        assert system.content.startswith(SYSTEM_PROMPT)
        assert "Latest Uploaded Report" in system.content
        assert "LDL 190 mg/dL" in system.content

    @pytest.mark.asyncio
    async def test_no_report_context_keeps_plain_system_prompt(self) -> None:
        agent = MedicalAssistantAgent()
        agent._model = mock_model("Rest well.")

        await agent.ainvoke([], "I am tired")

        assert agent._model.ainvoke.call_args.args[0][0].content == SYSTEM_PROMPT

    @pytest.mark.asyncio
    async def test_empty_reply_raises(self) -> None:
        agent = MedicalAssistantAgent()
        agent._model = mock_model("   ")

        with pytest.raises(ValueError):
            await agent.ainvoke([], "hi")


# ============================================================================
# GeminiReportAnalyzer Tests
# ============================================================================


class TestGeminiReportAnalyzer:
    """Test analysis request building and result handling."""

    def test_satisfies_report_analyzer_protocol(self) -> None:
        assert isinstance(GeminiReportAnalyzer(), ReportAnalyzer)

    def test_text_reports_are_inlined(self) -> None:
        message = GeminiReportAnalyzer().build_message("labs.txt", "text/plain", b"LDL 130 mg/dL")

        assert isinstance(message.content, str)
        assert "labs.txt" in message.content
        assert "LDL 130 mg/dL" in message.content

    def test_binary_reports_are_media_parts(self) -> None:
        data = b"%PDF-1.7 fake"

        message = GeminiReportAnalyzer().build_message("scan.pdf", "application/pdf", data)

        text_part, media_part = message.content
        assert "scan.pdf" in text_part["text"]
        assert media_part == {
            "type": "media",
            "mime_type": "application/pdf",
            "data": base64.b64encode(data).decode("ascii"),
        }

    @pytest.mark.asyncio
    async def test_analysis_gets_disclaimer(self) -> None:
        analyzer = GeminiReportAnalyzer()
        analyzer._model = mock_model([{"type": "text", "text": "Values look normal."}])

        analysis = await analyzer.analyze("labs.txt", "text/plain", b"ok")

        assert analysis == "Values look normal." + MEDICAL_DISCLAIMER

    @pytest.mark.asyncio
    async def test_empty_analysis_raises(self) -> None:
        analyzer = GeminiReportAnalyzer()
        analyzer._model = mock_model("")

        with pytest.raises(ValueError):
            await analyzer.analyze("labs.txt", "text/plain", b"ok")
