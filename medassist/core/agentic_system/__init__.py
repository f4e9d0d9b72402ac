"""
Agentic system module.

Language model adapters used by the session engine: the medical assistant
reasoning engine and the uploaded report analyzer.
"""
