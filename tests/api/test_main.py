"""
Test suite for the application lifespan helpers.

Tests that the idle-session sweeper keeps running through failing sweeps
and that stopping it never raises.

System role: Verification of background maintenance in the API process
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from medassist.api import main
from medassist.core.exceptions import StorageError


class _FlakyLifecycle:
    """Lifecycle stand-in whose sweeps fail with the queued errors."""

    errors: list[Exception] = []
    sweeps = 0

    def __init__(self, store, settings) -> None:
        pass

    async def expire_idle_sessions(self) -> int:
        type(self).sweeps += 1
        if type(self).errors:
            raise type(self).errors.pop(0)
        return 0


@pytest.fixture
def flaky_lifecycle(monkeypatch):
    _FlakyLifecycle.errors = [
        ConnectionResetError("connection reset"),
        RuntimeError("unexpected"),
        StorageError("db down", operation="find_idle_sessions"),
    ]
    _FlakyLifecycle.sweeps = 0
    monkeypatch.setattr(main, "SessionLifecycleService", _FlakyLifecycle)
    return _FlakyLifecycle


@pytest.mark.asyncio
async def test_sweeper_survives_failing_sweeps(flaky_lifecycle):
    # Arrange
    sweeper = asyncio.create_task(main.sweep_idle_sessions(MagicMock(), 0.01))

    # Act
    await asyncio.sleep(0.15)

    # Assert
    assert not sweeper.done()
    assert flaky_lifecycle.sweeps > 3
    assert flaky_lifecycle.errors == []

    await main.stop_sweeper(sweeper)
    assert sweeper.cancelled()


@pytest.mark.asyncio
async def test_stop_sweeper_swallows_a_crashed_task():
    async def crashed():
        raise OSError("driver gone")

    task = asyncio.create_task(crashed())
    await asyncio.sleep(0)

    await main.stop_sweeper(task)

    assert task.done()
