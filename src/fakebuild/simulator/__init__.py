"""Build simulation core.

Produces a stream of BuildEvents for a fake front-end build. Rendering lives
in fakebuild.cli; nothing in this package writes to the terminal.
"""

from fakebuild.simulator.events import BuildEvent, BuildEventType, BuildOutcome, EventSink
from fakebuild.simulator.fake_data import FakeData
from fakebuild.simulator.frameworks import (
    DEFAULT_FRAMEWORK,
    FRAMEWORK_CONFIGS,
    FrameworkConfig,
    FrameworkId,
    framework_names,
    get_framework_config,
    parse_framework,
)
from fakebuild.simulator.randomness import RandomSource, create_random
from fakebuild.simulator.simulator import BuildSimulator
from fakebuild.simulator.stages import Stage, StageKind, build_script
from fakebuild.simulator.timing import AsyncioAwaiter, Awaiter, InstantAwaiter, create_awaiter

__all__ = [
    "AsyncioAwaiter",
    "Awaiter",
    "BuildEvent",
    "BuildEventType",
    "BuildOutcome",
    "BuildSimulator",
    "DEFAULT_FRAMEWORK",
    "EventSink",
    "FRAMEWORK_CONFIGS",
    "FakeData",
    "FrameworkConfig",
    "FrameworkId",
    "InstantAwaiter",
    "RandomSource",
    "Stage",
    "StageKind",
    "build_script",
    "create_awaiter",
    "create_random",
    "framework_names",
    "get_framework_config",
    "parse_framework",
]
