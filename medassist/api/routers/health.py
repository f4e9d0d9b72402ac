"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: medassist.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from medassist.api.deps.dependencies import ServiceCache, get_service_cache
from medassist.models.chatbot import HealthResponse
from medassist.models.common import SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=SuccessResponse[HealthResponse])
async def health_check() -> SuccessResponse[HealthResponse]:
    """Basic health check."""
    return SuccessResponse(data=HealthResponse(status="healthy", message="Server Healthy"))


@router.get("/db", response_model=SuccessResponse[HealthResponse])
async def health_check_db(
    cache: ServiceCache = Depends(get_service_cache),
) -> SuccessResponse[HealthResponse]:
    """Database health check."""
    try:
        async with cache.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Database health check failed", extra={"error_type": type(e).__name__})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": "Database unavailable", "error": "STORAGE_ERROR"},
        )
    return SuccessResponse(data=HealthResponse(status="healthy", message="Database connection OK"))
