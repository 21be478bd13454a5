"""Injectable delays for the simulator.

Every pause in a simulated build goes through an Awaiter, so hosts can slow
it down, speed it up, or stop it mid-wait, and tests can skip the wall clock
entirely.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable


@runtime_checkable
class Awaiter(Protocol):
    """Suspends the simulation between updates."""

    async def wait(self, seconds: float) -> bool:
        """Pause for ``seconds``.

        Returns:
            True if the full delay elapsed, False if the wait was cancelled
        """
        ...

    @property
    def cancelled(self) -> bool:
        """Whether the host has asked the simulation to stop."""
        ...


class AsyncioAwaiter:
    """Real-time delays with early wake-up on a stop event.

    Args:
        stop_event: Optional event that aborts pending and future waits
        speed: Multiplier applied to every delay (0.5 = twice as fast)
    """

    def __init__(self, stop_event: asyncio.Event | None = None, speed: float = 1.0):
        self.stop_event = stop_event
        self.speed = speed

    @property
    def cancelled(self) -> bool:
        return self.stop_event is not None and self.stop_event.is_set()

    async def wait(self, seconds: float) -> bool:
        if self.cancelled:
            return False

        delay = max(seconds * self.speed, 0.0)

        if self.stop_event is None:
            await asyncio.sleep(delay)
            return True

        try:
            # Wait for abort or timeout
            await asyncio.wait_for(self.stop_event.wait(), timeout=delay)
            return False
        except asyncio.TimeoutError:
            return True


class InstantAwaiter:
    """Never sleeps; still honours the stop event.

    Used for ``--speed 0`` and for driving the simulator in tests.
    """

    def __init__(self, stop_event: asyncio.Event | None = None):
        self.stop_event = stop_event

    @property
    def cancelled(self) -> bool:
        return self.stop_event is not None and self.stop_event.is_set()

    async def wait(self, seconds: float) -> bool:
        # Yield so a host task waiting to set the stop event gets a turn
        await asyncio.sleep(0)
        return not self.cancelled


def create_awaiter(speed: float, stop_event: asyncio.Event | None = None) -> Awaiter:
    """Pick the awaiter matching a speed multiplier."""
    if speed == 0:
        return InstantAwaiter(stop_event)
    return AsyncioAwaiter(stop_event, speed=speed)
