"""Fakebuild configuration management.

Every tuning constant of the simulation (crash probability, per-stage delays,
global speed) lives in a frozen dataclass with its built-in default. The
defaults can be overridden from an optional YAML file and from environment
variables (FAKEBUILD_*).

Priority (highest to lowest):
    1. Explicit overrides passed to load_config() (CLI flags)
    2. Environment variables (FAKEBUILD_*)
    3. YAML file passed to load_config()
    4. Built-in defaults

Example config file:

    crash_probability: 0.5
    speed: 0.25
    delays:
      install_step: 0.1
      success_wait: 3
"""

import logging
import math
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from fakebuild.foundation.errors import ErrorCode, config_error

logger = logging.getLogger(__name__)

_ENV_PREFIX = "FAKEBUILD_"


@dataclass(frozen=True, slots=True)
class DelayConfig:
    """Delays between simulated updates, in seconds (before speed scaling)."""

    initialize: float = 2.0
    """Project initialization spinner."""

    install_step: float = 0.2
    """Each of the dependency install progress updates."""

    configure_step: float = 0.5
    """Each build tool configuration line."""

    test_setup: float = 3.0
    """Test runner setup spinner."""

    compile: float = 1.5
    """Each source area compile spinner."""

    styles: float = 2.5
    """Style processing spinner."""

    lint_step: float = 0.3
    """Each linter output line."""

    format: float = 2.0
    """Formatter spinner."""

    test_step: float = 0.4
    """Each test result line."""

    bundle_step: float = 0.3
    """Each production bundle progress update."""

    optimize: float = 3.0
    """Bundle optimization spinner."""

    source_maps: float = 2.5
    """Source map generation spinner."""

    final_check: float = 1.5
    """Each final check spinner."""

    crash_frame: float = 0.5
    """Pause after each fabricated stack frame."""

    crash_restart: float = 5.0
    """Pause after a crash before the next build starts."""

    success_wait: float = 10.0
    """Pause after a successful build before the next one starts."""


@dataclass(frozen=True, slots=True)
class SimulatorConfig:
    """Root configuration for the build simulator."""

    crash_probability: float = 0.7
    """Probability that a run ends in the crash branch (0-1)."""

    speed: float = 1.0
    """Multiplier applied to every delay. 0 disables waiting entirely."""

    seed: int | None = None
    """Seed for the random source. None draws fresh randomness."""

    delays: DelayConfig = field(default_factory=DelayConfig)
    """Per-stage delays."""


_TOP_LEVEL_KEYS = frozenset(f.name for f in fields(SimulatorConfig))
_DELAY_KEYS = frozenset(f.name for f in fields(DelayConfig))


def _deep_update(base: dict, updates: dict) -> dict:
    """Recursively update a dict with another dict."""
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def _parse_env_value(var: str, key: str, value: str) -> int | float:
    """Coerce an environment variable to the numeric type its key expects."""
    try:
        if key == "seed":
            return int(value)
        return float(value)
    except ValueError as e:
        raise config_error(
            ErrorCode.CONFIG_ENV_INVALID,
            var=var,
            detail=f"expected a number, got {value!r}",
            cause=e,
        ) from e


def _apply_env_overrides(config_dict: dict, environ: dict[str, str] | None = None) -> dict:
    """Apply environment variable overrides.

    Environment variables follow pattern: FAKEBUILD_KEY or FAKEBUILD_DELAYS_KEY

    Examples:
        FAKEBUILD_CRASH_PROBABILITY=0.2
        FAKEBUILD_SPEED=0.5
        FAKEBUILD_DELAYS_SUCCESS_WAIT=2

    Variables that don't name a config key (e.g. FAKEBUILD_LOG_LEVEL) are ignored.
    """
    environ = os.environ if environ is None else environ

    for var, value in environ.items():
        if not var.startswith(_ENV_PREFIX):
            continue

        path_str = var[len(_ENV_PREFIX):].lower()

        if path_str.startswith("delays_"):
            key = path_str[len("delays_"):]
            if key in _DELAY_KEYS and isinstance(config_dict["delays"], dict):
                config_dict["delays"][key] = _parse_env_value(var, key, value)
        elif path_str in _TOP_LEVEL_KEYS and path_str != "delays":
            config_dict[path_str] = _parse_env_value(var, path_str, value)

    return config_dict


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate(config_dict: dict) -> None:
    """Reject unknown keys and out-of-range values."""
    unknown = set(config_dict) - _TOP_LEVEL_KEYS
    if unknown:
        key = min(map(str, unknown))
        raise config_error(ErrorCode.CONFIG_INVALID, key=key, detail="unknown setting")

    delays = config_dict["delays"]
    if not isinstance(delays, dict):
        raise config_error(ErrorCode.CONFIG_INVALID, key="delays", detail="expected a mapping")

    unknown = set(delays) - _DELAY_KEYS
    if unknown:
        key = min(map(str, unknown))
        raise config_error(
            ErrorCode.CONFIG_INVALID, key=f"delays.{key}", detail="unknown delay"
        )

    probability = config_dict["crash_probability"]
    if not _is_number(probability) or not 0.0 <= probability <= 1.0:
        raise config_error(
            ErrorCode.CONFIG_INVALID,
            key="crash_probability",
            detail=f"must be a number between 0 and 1, got {probability!r}",
        )

    speed = config_dict["speed"]
    if not _is_number(speed) or speed < 0 or not math.isfinite(speed):
        raise config_error(
            ErrorCode.CONFIG_INVALID,
            key="speed",
            detail=f"must be a non-negative number, got {speed!r}",
        )

    seed = config_dict["seed"]
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        raise config_error(
            ErrorCode.CONFIG_INVALID, key="seed", detail=f"must be an integer, got {seed!r}"
        )

    for key, value in delays.items():
        if not _is_number(value) or value < 0 or not math.isfinite(value):
            raise config_error(
                ErrorCode.CONFIG_INVALID,
                key=f"delays.{key}",
                detail=f"must be a non-negative number of seconds, got {value!r}",
            )


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a dict."""
    if not path.exists():
        raise config_error(ErrorCode.FILE_NOT_FOUND, path=str(path))

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise config_error(
            ErrorCode.CONFIG_PARSE_ERROR, path=str(path), detail=str(e), cause=e
        ) from e

    if not isinstance(data, dict):
        raise config_error(
            ErrorCode.CONFIG_PARSE_ERROR,
            path=str(path),
            detail=f"expected a mapping, got {type(data).__name__}",
        )
    return data


def _dict_to_config(data: dict) -> SimulatorConfig:
    """Convert a validated dict to SimulatorConfig."""
    return SimulatorConfig(
        crash_probability=float(data["crash_probability"]),
        speed=float(data["speed"]),
        seed=data["seed"],
        delays=DelayConfig(**{k: float(v) for k, v in data["delays"].items()}),
    )


def load_config(
    path: str | Path | None = None,
    *,
    environ: dict[str, str] | None = None,
    **overrides: Any,
) -> SimulatorConfig:
    """Load configuration from file with defaults and env overrides.

    Args:
        path: Optional YAML config file. A missing file is an error.
        environ: Environment mapping to read FAKEBUILD_* overrides from
                 (default: os.environ)
        **overrides: Top-level settings that win over everything else.
                     None values are ignored so CLI flags can pass through.

    Returns:
        Merged SimulatorConfig instance.

    Raises:
        FakebuildError: If the file is missing or malformed, or a value is invalid.
    """
    config_dict: dict[str, Any] = asdict(SimulatorConfig())

    if path is not None:
        _deep_update(config_dict, _read_config_file(Path(path)))
        logger.debug("Loaded config file %s", path)

    config_dict = _apply_env_overrides(config_dict, environ)
    _deep_update(config_dict, {k: v for k, v in overrides.items() if v is not None})

    _validate(config_dict)
    return _dict_to_config(config_dict)
