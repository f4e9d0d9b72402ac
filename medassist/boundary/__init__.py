"""
Boundary layer for external system integrations.

Handles all interactions with the database. The language model adapters
live with the agent in medassist.core.agentic_system.
"""
