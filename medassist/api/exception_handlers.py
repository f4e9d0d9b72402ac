"""
Application-wide exception handlers.

Wrap every error response in the failure envelope
{success: false, message, error}. Request schema errors are reported as
400 validation failures.

Dependencies: fastapi, starlette, medassist.models.common
System role: Uniform error envelope for the HTTP surface
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from medassist.api.routers.chatbot.chatbot_error_handling import status_for
from medassist.core.exceptions import MedAssistException
from medassist.models.common import ErrorResponse

logger = logging.getLogger(__name__)

ERROR_CODE_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
}


def error_response(
    status_code: int,
    message: str,
    error: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, error=error).model_dump(),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Envelope HTTPExceptions raised by routers, dependencies and routing."""
    detail = exc.detail
    if isinstance(detail, dict) and "message" in detail:
        message = str(detail["message"])
        error = str(detail.get("error") or ERROR_CODE_BY_STATUS.get(exc.status_code, "INTERNAL_ERROR"))
    else:
        message = str(detail)
        error = ERROR_CODE_BY_STATUS.get(exc.status_code, "INTERNAL_ERROR")
    return error_response(exc.status_code, message, error, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request schema errors as 400 with the first offending field."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", message)
    logger.info(
        "Request validation failed",
        extra={"path": request.url.path, "error_count": len(errors)},
    )
    return error_response(status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR")


async def domain_exception_handler(request: Request, exc: MedAssistException) -> JSONResponse:
    """Domain errors that escaped a router without the chatbot decorator."""
    return error_response(status_for(exc), exc.message, exc.code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An internal error occurred",
        "INTERNAL_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all envelope handlers to an application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(MedAssistException, domain_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
