"""
FastAPI application with assembled routers.

Initializes the FastAPI app with the chatbot and health routers, the
observability middleware, error envelopes and the lifespan that bootstraps
tables and runs the optional idle-session sweeper.

Dependencies: fastapi, medassist.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medassist.api import api_router
from medassist.api.deps.dependencies import ServiceCache, get_service_cache
from medassist.api.exception_handlers import register_exception_handlers
from medassist.application.services import SessionLifecycleService
from medassist.boundary.db.connection import create_tables
from medassist.configs import get_settings
from medassist.core.exceptions import MedAssistException
from medassist.core.session.detached import drain_inflight
from medassist.observability.logger import configure_logging
from medassist.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

logger = logging.getLogger(__name__)


async def sweep_idle_sessions(cache: ServiceCache, interval_seconds: float) -> None:
    """
    End idle sessions periodically until cancelled.

    Args:
        cache: Service cache providing the session store
        interval_seconds: Pause between sweeps
    """
    settings = get_settings()
    lifecycle = SessionLifecycleService(cache.session_store, settings.chat)
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await lifecycle.expire_idle_sessions()
        except MedAssistException as e:
            logger.warning("Idle session sweep failed", extra={"error_code": e.code, "error": e.message})
        except Exception as e:
            logger.exception("Idle session sweep crashed", extra={"error_type": type(e).__name__})


async def stop_sweeper(sweeper: asyncio.Task) -> None:
    """Cancel the idle sweeper and wait for it without letting its failure abort shutdown."""
    sweeper.cancel()
    try:
        await sweeper
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.exception("Idle session sweeper ended with an error", extra={"error_type": type(e).__name__})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    cache = get_service_cache()

    # Startup
    if settings.database.auto_create:
        await create_tables(cache.engine)

    sweeper = None
    if settings.chat.idle_expiry_minutes:
        sweeper = asyncio.create_task(
            sweep_idle_sessions(cache, settings.chat.idle_sweep_seconds),
            name="idle-session-sweeper",
        )
        logger.info(
            "Idle session expiry enabled",
            extra={"idle_expiry_minutes": settings.chat.idle_expiry_minutes},
        )

    yield

    # Shutdown
    if sweeper is not None:
        await stop_sweeper(sweeper)
    await drain_inflight(timeout=settings.chat.analysis_timeout_seconds)
    await cache.aclose()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()
    app = FastAPI(
        title="Medical Assistant Session API",
        description="Conversational medical assistant with report analysis and session history",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    if settings.observability.request_logging:
        app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware, header_name=settings.observability.correlation_header)

    register_exception_handlers(app)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "medassist.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
