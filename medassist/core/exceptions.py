"""
Exception hierarchy for the medical assistant session engine.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and a stable code
that the HTTP layer reports to clients.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any
from uuid import UUID


class MedAssistException(Exception):
    """Base exception for all session engine errors."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(MedAssistException):
    """Raised when input validation fails."""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class SessionNotFoundError(MedAssistException):
    """Raised when a session does not exist or is not owned by the caller."""

    code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: UUID | str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        The message never distinguishes "missing" from "owned by someone else".

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = str(session_id)
        super().__init__("Chat session not found", details)


class SessionEndedError(MedAssistException):
    """Raised when a mutation targets a session that has been ended."""

    code = "SESSION_ENDED"

    def __init__(self, session_id: UUID | str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["session_id"] = str(session_id)
        super().__init__("Chat session has ended and accepts no new messages", details)


class UpstreamAIError(MedAssistException):
    """Raised when the reasoning engine fails or times out during a text turn."""

    code = "UPSTREAM_AI_ERROR"


class UpstreamAnalysisError(MedAssistException):
    """Raised when the report analyzer fails or times out during an upload."""

    code = "UPSTREAM_ANALYSIS_ERROR"

    def __init__(
        self,
        message: str = "Failed to analyze the uploaded report",
        file_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_name:
            details["file_name"] = file_name
        super().__init__(message, details)


class StorageError(MedAssistException):
    """Raised when persistence fails."""

    code = "STORAGE_ERROR"

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize storage error.

        Args:
            message: Error message
            operation: Store operation that failed (start, append, end, ...)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class SessionConflictError(StorageError):
    """Raised when a concurrent writer modified the session first."""

    code = "SESSION_CONFLICT"


class AuthenticationError(MedAssistException):
    """Raised when the bearer token is missing, expired or invalid."""

    code = "UNAUTHORIZED"
