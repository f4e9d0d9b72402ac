"""
Disconnect-proof execution of conversation operations.

A turn or upload that reached the engine must finish and persist even if
the HTTP client goes away. The operation runs as its own task; the caller
awaits it through asyncio.shield, so cancelling the caller leaves the task
running. A strong reference is kept until the task completes.

Dependencies: asyncio
System role: Cancellation boundary between HTTP requests and the session store
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_inflight: set[asyncio.Task] = set()


def _on_done(task: asyncio.Task) -> None:
    _inflight.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        # Only reached unobserved when the original caller was cancelled
        logger.debug(
            "Detached operation finished with error",
            extra={"task": task.get_name(), "error_type": type(exc).__name__},
        )


async def run_detached(coro: Coroutine[Any, Any, T], name: str | None = None) -> T:
    """
    Run a coroutine to completion regardless of caller cancellation.

    Args:
        coro: Operation to run
        name: Optional task name for logs

    Returns:
        The coroutine's result

    Raises:
        Whatever the coroutine raises; asyncio.CancelledError if the caller
        itself was cancelled (the operation keeps running)
    """
    task = asyncio.ensure_future(coro)
    if name:
        task.set_name(name)
    _inflight.add(task)
    task.add_done_callback(_on_done)
    return await asyncio.shield(task)


def inflight_count() -> int:
    """Number of detached operations still running."""
    return len(_inflight)


async def drain_inflight(timeout: float | None = None) -> None:
    """Wait for running detached operations, used at application shutdown."""
    if not _inflight:
        return
    await asyncio.wait(set(_inflight), timeout=timeout)
