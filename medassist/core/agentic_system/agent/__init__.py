"""
Medical assistant agent module.

Provides the Gemini-backed reasoning engine and report analyzer together
with the protocols the services depend on.

Dependencies: langchain_core, langchain_google_genai
System role: Agent module exports
"""

from medassist.core.agentic_system.agent.engine_protocols import ReasoningEngine, ReportAnalyzer
from medassist.core.agentic_system.agent.medical_agent import MedicalAssistantAgent
from medassist.core.agentic_system.agent.report_analyzer import GeminiReportAnalyzer

__all__ = ["GeminiReportAnalyzer", "MedicalAssistantAgent", "ReasoningEngine", "ReportAnalyzer"]
