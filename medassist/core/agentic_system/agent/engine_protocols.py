"""
Upstream collaborator interfaces.

The services depend on these protocols only, so tests and alternative
providers can stand in for the Gemini adapters.

Dependencies: typing, medassist.core.session
System role: Seam between conversation services and language models
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from medassist.core.session.records import MessageRecord


@runtime_checkable
class ReasoningEngine(Protocol):
    """Produces the assistant reply for one conversation turn."""

    async def ainvoke(
        self,
        history: Sequence[MessageRecord],
        message: str,
        report_context: str | None = None,
    ) -> str:
        """
        Args:
            history: Most recent transcript entries, oldest first
            message: New user message (not yet part of history)
            report_context: Excerpt of the latest uploaded report analysis

        Returns:
            str: Assistant reply text
        """
        ...


@runtime_checkable
class ReportAnalyzer(Protocol):
    """Turns an uploaded medical document into analysis text."""

    async def analyze(self, file_name: str, mime_type: str, data: bytes) -> str:
        """
        Args:
            file_name: Original file name
            mime_type: Declared content type
            data: Raw file bytes

        Returns:
            str: Analysis text
        """
        ...
