"""Event types for the simulated build stream.

The simulator never draws anything. It emits BuildEvents describing state
transitions (a stage started, its percentage moved, a log line appeared,
the run crashed) and a presentation layer decides how to show them.

Event categories:
- Run: run start, final outcome
- Stage: spinner/progress/log stage lifecycle
- Crash: fabricated failure and its stack frames
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from time import time
from typing import Any


class BuildEventType(Enum):
    """Types of events emitted by the BuildSimulator."""

    RUN_START = "run_start"
    """A new simulated build begins."""

    SECTION = "section"
    """Heading printed before a group of stages or log lines."""

    STAGE_START = "stage_start"
    """A spinner or progress stage starts."""

    STAGE_PROGRESS = "stage_progress"
    """A progress stage's percentage changed."""

    STAGE_LOG = "stage_log"
    """A log stage emitted one fabricated line."""

    STAGE_COMPLETE = "stage_complete"
    """A spinner or progress stage finished successfully."""

    CRASH = "crash"
    """The run took the crash branch."""

    CRASH_FRAME = "crash_frame"
    """One fabricated stack frame of the crash."""

    CRASH_END = "crash_end"
    """The crash is over; the simulator waits before restarting."""

    SUCCESS = "success"
    """The run took the success branch."""

    WAITING = "waiting"
    """The simulator idles after a successful build."""


class BuildOutcome(Enum):
    """How a single run ended."""

    SUCCESS = "success"
    CRASH = "crash"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class BuildEvent:
    """A single state transition of the simulated build."""

    type: BuildEventType
    """What happened."""

    data: dict[str, Any] = field(default_factory=dict)
    """Event payload (text, stage key, percentage, ...)."""

    timestamp: float = field(default_factory=time)
    """Unix timestamp when the event was created."""

    @property
    def text(self) -> str:
        """Display text carried by the event, if any."""
        return self.data.get("text", "")

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "data": self.data,
            "timestamp": self.timestamp,
        }


EventSink = Callable[[BuildEvent], None]
"""Anything that consumes events as they are produced."""


# =============================================================================
# Event factories
# =============================================================================


def run_start_event(framework: str) -> BuildEvent:
    return BuildEvent(
        BuildEventType.RUN_START,
        {"framework": framework, "text": f"Starting {framework} app build process..."},
    )


def section_event(stage: str, text: str) -> BuildEvent:
    return BuildEvent(BuildEventType.SECTION, {"stage": stage, "text": text})


def stage_start_event(stage: str, text: str) -> BuildEvent:
    return BuildEvent(BuildEventType.STAGE_START, {"stage": stage, "text": text})


def stage_progress_event(stage: str, text: str, percent: int) -> BuildEvent:
    return BuildEvent(
        BuildEventType.STAGE_PROGRESS,
        {"stage": stage, "text": text, "percent": percent},
    )


def stage_log_event(stage: str, text: str, index: int) -> BuildEvent:
    return BuildEvent(
        BuildEventType.STAGE_LOG,
        {"stage": stage, "text": text, "index": index},
    )


def stage_complete_event(stage: str, text: str) -> BuildEvent:
    return BuildEvent(BuildEventType.STAGE_COMPLETE, {"stage": stage, "text": text})


def crash_event() -> BuildEvent:
    return BuildEvent(
        BuildEventType.CRASH,
        {"text": "ERROR: Build process crashed unexpectedly!", "detail": "Stack trace:"},
    )


def crash_frame_event(
    index: int,
    error_type: str,
    error_message: str,
    location: str,
) -> BuildEvent:
    return BuildEvent(
        BuildEventType.CRASH_FRAME,
        {
            "index": index,
            "error_type": error_type,
            "error_message": error_message,
            "location": location,
            "text": f"at {error_type}: {error_message}",
        },
    )


def crash_end_event(restart_delay: float) -> BuildEvent:
    return BuildEvent(
        BuildEventType.CRASH_END,
        {
            "restart_delay": restart_delay,
            "text": f"Build failed. Restarting process in {restart_delay:g} seconds...",
        },
    )


def success_event() -> BuildEvent:
    return BuildEvent(BuildEventType.SUCCESS, {"text": "Build completed successfully!"})


def waiting_event() -> BuildEvent:
    return BuildEvent(BuildEventType.WAITING, {"text": "Waiting for changes..."})
