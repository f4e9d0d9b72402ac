"""
Chatbot error handling utilities.

Provides a decorator for consistent error handling across chatbot API
endpoints. Domain exceptions become HTTPExceptions whose detail carries the
envelope message and the stable error code.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from medassist.core.exceptions import (
    AuthenticationError,
    MedAssistException,
    SessionConflictError,
    SessionEndedError,
    SessionNotFoundError,
    StorageError,
    UpstreamAIError,
    UpstreamAnalysisError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

# Most specific classes first
STATUS_BY_EXCEPTION: tuple[tuple[type[MedAssistException], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND),
    (SessionEndedError, status.HTTP_409_CONFLICT),
    (SessionConflictError, status.HTTP_409_CONFLICT),
    (UpstreamAnalysisError, status.HTTP_502_BAD_GATEWAY),
    (UpstreamAIError, status.HTTP_502_BAD_GATEWAY),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: MedAssistException) -> int:
    """HTTP status code for a domain exception."""
    for exc_type, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: MedAssistException) -> HTTPException:
    return HTTPException(
        status_code=status_for(exc),
        detail={"message": exc.message, "error": exc.code},
    )


def handle_chatbot_errors(func: F) -> F:
    """
    Decorator to handle chatbot errors and transform them into HTTPExceptions.

    This centralizes:
    - Logging of errors with their context
    - Mapping domain exceptions to HTTP status codes
    - Ensuring uniform error response formats
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except MedAssistException as e:
            http_exc = to_http_exception(e)
            if http_exc.status_code >= 500:
                logger.error(
                    "Chatbot operation failed",
                    exc_info=e,
                    extra={"error_code": e.code, **e.details},
                )
            else:
                logger.warning(
                    "Chatbot request rejected",
                    extra={"error_code": e.code, "error": e.message, **e.details},
                )
            raise http_exc

        except Exception as e:
            logger.exception(
                "Unexpected failure in chatbot operation",
                extra={"error_type": type(e).__name__},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"message": "An internal error occurred", "error": "INTERNAL_ERROR"},
            )

    return wrapper  # type: ignore
