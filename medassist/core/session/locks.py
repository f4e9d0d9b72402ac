"""
Per-session mutual exclusion.

Serializes mutating operations on the same session id inside one process.
Locks are created on first use and dropped once no task holds or waits
for them, so the registry does not grow with the number of sessions ever seen.

Dependencies: asyncio
System role: Per-session ordering guarantee for the conversation engine
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID


class SessionLockRegistry:
    """Registry of asyncio locks keyed by session id."""

    def __init__(self) -> None:
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._users: dict[UUID, int] = {}

    @asynccontextmanager
    async def hold(self, session_id: UUID) -> AsyncIterator[None]:
        """
        Hold the lock of one session for the duration of the block.

        Args:
            session_id: Session to serialize on

        Usage:
            async with registry.hold(session_id):
                ...  # no other holder for this session runs here
        """
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        self._users[session_id] = self._users.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._users[session_id] - 1
            if remaining:
                self._users[session_id] = remaining
            else:
                del self._users[session_id]
                del self._locks[session_id]

    def is_locked(self, session_id: UUID) -> bool:
        """Whether some task currently holds the session's lock."""
        lock = self._locks.get(session_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
