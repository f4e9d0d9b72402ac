"""
Medical assistant agent implementation.

Reasoning engine for conversation turns. Maps the recent transcript to
LangChain messages, calls Gemini through ChatGoogleGenerativeAI and appends
the medical disclaimer to the answer.

Dependencies: langchain_core, langchain_google_genai
System role: Assistant reply generation
"""

import logging
from collections.abc import Sequence
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from medassist.boundary.db.models import MessageRole
from medassist.core.agentic_system.agent.medical_agent_prompt import (
    MEDICAL_AGENT_PROMPT,
    REPORT_CONTEXT_PROMPT,
)
from medassist.core.session.records import MessageRecord
from medassist.core.session.templates import MEDICAL_DISCLAIMER

logger = logging.getLogger(__name__)


def content_text(content: Any) -> str:
    """Flatten model output content (string or list of parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else str(item))
            for item in content
        )
    return str(content)


def to_langchain_messages(history: Sequence[MessageRecord]) -> list[BaseMessage]:
    """Convert transcript records to LangChain chat messages."""
    messages: list[BaseMessage] = []
    for record in history:
        if record.role == MessageRole.USER:
            messages.append(HumanMessage(content=record.content))
        elif record.role == MessageRole.ASSISTANT:
            messages.append(AIMessage(content=record.content))
        else:
            messages.append(SystemMessage(content=record.content))
    return messages


class MedicalAssistantAgent:
    """
    Conversational medical assistant backed by Gemini.

    The chat model is created on first use so the application can start
    without credentials (tests and local runs use stand-in engines).
    """

    def __init__(
        self,
        model_id: str = "gemini-2.5-flash",
        temperature: float = 0.3,
        api_key: str | None = None,
    ) -> None:
        """
        Initialize the agent.

        Args:
            model_id: Gemini model identifier
            temperature: Sampling temperature
            api_key: Google AI API key; falls back to GOOGLE_API_KEY when None
        """
        self._model_id = model_id
        self._temperature = temperature
        self._api_key = api_key
        self._model: ChatGoogleGenerativeAI | None = None

    @property
    def model(self) -> ChatGoogleGenerativeAI:
        if self._model is None:
            kwargs: dict[str, Any] = {"model": self._model_id, "temperature": self._temperature}
            if self._api_key:
                kwargs["google_api_key"] = self._api_key
            self._model = ChatGoogleGenerativeAI(**kwargs)
        return self._model

    async def ainvoke(
        self,
        history: Sequence[MessageRecord],
        message: str,
        report_context: str | None = None,
    ) -> str:
        """
        Generate the assistant reply for a new user message.

        Args:
            history: Recent transcript entries, oldest first
            message: New user message
            report_context: Excerpt of the latest report analysis, added to the system prompt

        Returns:
            str: Reply text with the medical disclaimer appended

        Raises:
            ValueError: If the model returned no text
        """
        messages = MEDICAL_AGENT_PROMPT.invoke({
            "history": to_langchain_messages(history),
            "message": message,
            "report_context": REPORT_CONTEXT_PROMPT.format(analysis=report_context) if report_context else "",
        }).to_messages()

        logger.debug(
            "Invoking medical agent",
            extra={
                "model": self._model_id,
                "history_len": len(history),
                "has_report_context": bool(report_context),
            },
        )
        result = await self.model.ainvoke(messages)
        answer = content_text(result.content).strip()
        if not answer:
            raise ValueError("Model returned an empty reply")

        return answer + MEDICAL_DISCLAIMER
