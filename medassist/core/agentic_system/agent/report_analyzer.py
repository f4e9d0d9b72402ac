"""
Uploaded report analyzer.

Sends an uploaded medical document to Gemini and returns the analysis text.
Plain-text and RTF payloads are decoded into the prompt; PDFs, images and
Word documents travel as inline base64 media parts.

Dependencies: langchain_core, langchain_google_genai
System role: Report analysis for the file intake flow
"""

import base64
import logging
from typing import Any

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from medassist.core.agentic_system.agent.medical_agent import content_text
from medassist.core.agentic_system.agent.medical_agent_prompt import REPORT_ANALYSIS_PROMPT
from medassist.core.session.templates import MEDICAL_DISCLAIMER

logger = logging.getLogger(__name__)

TEXT_MIME_TYPES = frozenset({"text/plain", "application/rtf", "text/rtf"})


class GeminiReportAnalyzer:
    """Medical report analysis backed by a multimodal Gemini model."""

    def __init__(
        self,
        model_id: str = "gemini-2.5-flash",
        temperature: float = 0.3,
        api_key: str | None = None,
    ) -> None:
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

    def build_message(self, file_name: str, mime_type: str, data: bytes) -> HumanMessage:
        """
        Build the analysis request for one document.

        Args:
            file_name: Original file name
            mime_type: Declared content type
            data: Raw file bytes

        Returns:
            HumanMessage: Prompt with the document attached
        """
        instructions = REPORT_ANALYSIS_PROMPT.format(file_name=file_name)

        if mime_type in TEXT_MIME_TYPES:
            text = data.decode("utf-8", errors="replace")
            return HumanMessage(content=f"{instructions}\n\nReport content:\n{text}")

        return HumanMessage(content=[
            {"type": "text", "text": instructions},
            {
                "type": "media",
                "mime_type": mime_type,
                "data": base64.b64encode(data).decode("ascii"),
            },
        ])

    async def analyze(self, file_name: str, mime_type: str, data: bytes) -> str:
        """
        Analyze an uploaded report.

        Returns:
            str: Analysis with the medical disclaimer appended

        Raises:
            ValueError: If the model returned no text
        """
        logger.info(
            "Analyzing uploaded report",
            extra={"mime_type": mime_type, "file_size": len(data), "model": self._model_id},
        )
        result = await self.model.ainvoke([self.build_message(file_name, mime_type, data)])
        analysis = content_text(result.content).strip()
        if not analysis:
            raise ValueError("Model returned an empty analysis")

        return analysis + MEDICAL_DISCLAIMER
