"""fakebuild - a front-end build that never ends.

Prints an endless, randomized simulation of a framework build pipeline:
spinners, fake file names, fake lint and test output, and the occasional
fake crash.
"""

from fakebuild.foundation.config import DelayConfig, SimulatorConfig, load_config
from fakebuild.foundation.errors import ErrorCode, FakebuildError
from fakebuild.simulator import (
    BuildEvent,
    BuildEventType,
    BuildOutcome,
    BuildSimulator,
    FrameworkConfig,
    FrameworkId,
    parse_framework,
)

__version__ = "0.1.0"

__all__ = [
    # Simulator
    "BuildSimulator",
    "BuildEvent",
    "BuildEventType",
    "BuildOutcome",
    "FrameworkConfig",
    "FrameworkId",
    "parse_framework",
    # Config
    "DelayConfig",
    "SimulatorConfig",
    "load_config",
    # Errors
    "ErrorCode",
    "FakebuildError",
]
