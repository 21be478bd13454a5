"""Foundation layer: errors, configuration and logging."""

from fakebuild.foundation.config import DelayConfig, SimulatorConfig, load_config
from fakebuild.foundation.errors import (
    ERROR_MESSAGES,
    RECOVERY_HINTS,
    ErrorCode,
    FakebuildError,
    config_error,
    unsupported_framework,
)
from fakebuild.foundation.logging import configure_logging

__all__ = [
    "DelayConfig",
    "ERROR_MESSAGES",
    "ErrorCode",
    "FakebuildError",
    "RECOVERY_HINTS",
    "SimulatorConfig",
    "config_error",
    "configure_logging",
    "load_config",
    "unsupported_framework",
]
