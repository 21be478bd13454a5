"""Main CLI entry point.

    fakebuild                      # simulate a react build, forever
    fakebuild -f angular           # pick another framework
    fakebuild --speed 0 --runs 3   # three instant builds, then exit

The loop only ends on --runs or when the process is interrupted; SIGINT and
SIGTERM stop it cleanly with exit code 0.
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path

import click
from rich.console import Console

from fakebuild import __version__
from fakebuild.cli.async_runner import run_async
from fakebuild.cli.error_handler import handle_error
from fakebuild.cli.renderer import RichRenderer
from fakebuild.cli.theme import create_console
from fakebuild.foundation.config import SimulatorConfig, load_config
from fakebuild.foundation.errors import FakebuildError
from fakebuild.foundation.logging import configure_logging
from fakebuild.simulator import (
    DEFAULT_FRAMEWORK,
    BuildSimulator,
    FrameworkId,
    framework_names,
    parse_framework,
)

logger = logging.getLogger(__name__)

console = create_console()

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def cli_entrypoint() -> None:
    """Wrapped entrypoint with global error handling.

    Called from pyproject.toml [project.scripts].
    """
    try:
        main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        sys.exit(130)
    except FakebuildError as e:
        handle_error(e)


def _install_signal_handlers(stop_event: asyncio.Event) -> list[signal.Signals]:
    """Route stop signals to the stop event. Returns the signals installed."""
    loop = asyncio.get_running_loop()
    installed = []
    for sig in _STOP_SIGNALS:
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError, ValueError):
            # Windows, or not on the main thread: fall back to default handling
            continue
        installed.append(sig)
    return installed


def _remove_signal_handlers(signals: list[signal.Signals]) -> None:
    loop = asyncio.get_running_loop()
    for sig in signals:
        loop.remove_signal_handler(sig)


async def simulate(
    framework: FrameworkId,
    config: SimulatorConfig,
    max_runs: int | None = None,
    output: Console | None = None,
) -> int:
    """Run the build loop until interrupted or ``max_runs`` builds complete.

    Returns:
        Number of completed runs
    """
    stop_event = asyncio.Event()
    simulator = BuildSimulator(framework, config, stop_event=stop_event)
    renderer = RichRenderer(output or console)

    signals = _install_signal_handlers(stop_event)
    try:
        return await simulator.run_forever(renderer.handle, max_runs=max_runs)
    finally:
        renderer.close()
        _remove_signal_handlers(signals)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-f", "--framework",
    default=DEFAULT_FRAMEWORK.value,
    show_default=True,
    help=f"The framework to simulate building ({', '.join(framework_names())})",
)
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML file overriding crash probability, speed and delays",
)
@click.option("--seed", type=int, default=None, help="Seed for reproducible output")
@click.option("--speed", type=float, default=None,
              help="Delay multiplier (0.5 = twice as fast, 0 = no waiting)")
@click.option("--runs", type=click.IntRange(min=1), default=None,
              help="Stop after this many builds (default: never)")
@click.option("--debug", is_flag=True, help="Enable debug logging on stderr")
@click.option("--json-errors", is_flag=True, hidden=True,
              help="Report errors as JSON on stderr")
@click.version_option(version=__version__, prog_name="fakebuild")
def main(
    framework: str,
    config_path: Path | None,
    seed: int | None,
    speed: float | None,
    runs: int | None,
    debug: bool,
    json_errors: bool,
) -> None:
    """Simulate a front-end framework build, forever."""
    configure_logging(debug=debug)

    try:
        framework_id = parse_framework(framework)
        config = load_config(config_path, seed=seed, speed=speed)
    except FakebuildError as e:
        handle_error(e, json_output=json_errors)

    logger.debug(
        "Simulating %s (crash_probability=%s, speed=%s, seed=%s)",
        framework_id.value,
        config.crash_probability,
        config.speed,
        config.seed,
    )
    completed = run_async(simulate(framework_id, config, max_runs=runs))
    logger.debug("Stopped after %d builds", completed)
