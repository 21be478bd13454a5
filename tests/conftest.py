"""Pytest fixtures for fakebuild tests."""

import random
from collections.abc import Sequence
from typing import TypeVar

import pytest

from fakebuild.foundation.config import SimulatorConfig
from fakebuild.simulator.events import BuildEvent, BuildEventType

T = TypeVar("T")


class ScriptedRandom:
    """Random source whose uniform draws are fixed.

    ``random()`` always returns ``value``; integers and choices come from a
    seeded generator so fake data still varies deterministically.
    """

    def __init__(self, value: float = 0.5, seed: int = 0):
        self.value = value
        self.random_calls = 0
        self._rng = random.Random(seed)

    def random(self) -> float:
        self.random_calls += 1
        return self.value

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)


class RecordingAwaiter:
    """Awaiter that never sleeps and records every requested delay.

    Args:
        cancel_after: Abort the wait with this (0-based) index and every later one
    """

    def __init__(self, cancel_after: int | None = None):
        self.delays: list[float] = []
        self.cancel_after = cancel_after

    @property
    def cancelled(self) -> bool:
        return self.cancel_after is not None and len(self.delays) > self.cancel_after

    async def wait(self, seconds: float) -> bool:
        self.delays.append(seconds)
        return not self.cancelled


class EventCollector:
    """Event sink that keeps everything it receives."""

    def __init__(self) -> None:
        self.events: list[BuildEvent] = []

    def __call__(self, event: BuildEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: BuildEventType) -> list[BuildEvent]:
        return [e for e in self.events if e.type == event_type]

    @property
    def types(self) -> list[BuildEventType]:
        return [e.type for e in self.events]

    @property
    def output(self) -> str:
        """All display text, one event per line."""
        lines = []
        for event in self.events:
            lines.append(event.text)
            if "location" in event.data:
                lines.append(event.data["location"])
        return "\n".join(lines)


@pytest.fixture
def collector() -> EventCollector:
    return EventCollector()


@pytest.fixture
def awaiter() -> RecordingAwaiter:
    return RecordingAwaiter()


@pytest.fixture
def crash_rng() -> ScriptedRandom:
    """Random source that always takes the crash branch."""
    return ScriptedRandom(value=0.1)


@pytest.fixture
def success_rng() -> ScriptedRandom:
    """Random source that always takes the success branch."""
    return ScriptedRandom(value=0.9)


@pytest.fixture
def instant_config() -> SimulatorConfig:
    return SimulatorConfig(speed=0)


@pytest.fixture
def make_rng() -> type[ScriptedRandom]:
    """Factory for scripted random sources with a chosen draw value."""
    return ScriptedRandom


@pytest.fixture
def make_awaiter() -> type[RecordingAwaiter]:
    """Factory for recording awaiters (e.g. with cancel_after)."""
    return RecordingAwaiter
