"""
Chatbot router package.

Exports the router for medical assistant conversation endpoints.
"""

from .chatbot_router import router

__all__ = ["router"]
