"""BuildSimulator: plays the stage script and draws the run outcome.

One run emits the fixed stage sequence, then takes exactly one uniform draw:
below ``crash_probability`` the run ends in a fabricated crash, otherwise in
a success message. Either way the run finishes with a pause and the driver
loop starts the next one.

Nothing carries over between runs. The framework, configuration, random
source and awaiter are all injected, so a host (or a test) controls every
source of nondeterminism and can stop the loop through the stop event.

Example:
    >>> simulator = BuildSimulator(FrameworkId.VUE, SimulatorConfig(speed=0))
    >>> outcome = await simulator.run_once(renderer.handle)
"""

import asyncio
import logging

from fakebuild.foundation.config import SimulatorConfig
from fakebuild.simulator.events import (
    BuildOutcome,
    EventSink,
    crash_end_event,
    crash_event,
    crash_frame_event,
    run_start_event,
    section_event,
    stage_complete_event,
    stage_log_event,
    stage_progress_event,
    stage_start_event,
    success_event,
    waiting_event,
)
from fakebuild.simulator.fake_data import FakeData
from fakebuild.simulator.frameworks import FrameworkConfig, FrameworkId, get_framework_config
from fakebuild.simulator.randomness import RandomSource, create_random
from fakebuild.simulator.stages import Stage, StageKind, build_script, progress_percentages
from fakebuild.simulator.timing import Awaiter, create_awaiter

logger = logging.getLogger(__name__)

CRASH_FRAMES = 5

ERROR_TYPES = (
    "TypeError",
    "ReferenceError",
    "SyntaxError",
    "RangeError",
)

ERROR_MESSAGES = (
    "Cannot read property of undefined",
    "is not a function",
    "Unexpected token",
    "Maximum call stack size exceeded",
)

MAX_LINE = 500
MAX_COLUMN = 80


class BuildSimulator:
    """Simulates the build pipeline of a single framework.

    Args:
        framework: Framework to simulate, fixed for the simulator's lifetime
        config: Crash probability, speed and delays (default: built-in)
        rng: Random source (default: random.Random seeded from config.seed)
        awaiter: Delay strategy (default: derived from config.speed)
        stop_event: Event that stops the loop, including mid-wait
    """

    def __init__(
        self,
        framework: FrameworkId,
        config: SimulatorConfig | None = None,
        rng: RandomSource | None = None,
        awaiter: Awaiter | None = None,
        stop_event: asyncio.Event | None = None,
    ):
        self.framework = framework
        self.config = config or SimulatorConfig()
        self.rng = rng if rng is not None else create_random(self.config.seed)
        self.stop_event = stop_event
        self.awaiter = awaiter or create_awaiter(self.config.speed, stop_event)
        self.fake = FakeData(self.rng)
        self.script: tuple[Stage, ...] = build_script(framework, self.config.delays)

    @property
    def tools(self) -> FrameworkConfig:
        return get_framework_config(self.framework)

    @property
    def cancelled(self) -> bool:
        if self.stop_event is not None and self.stop_event.is_set():
            return True
        return self.awaiter.cancelled

    def stop(self) -> None:
        """Ask the loop to stop; pending waits wake up immediately."""
        if self.stop_event is None:
            raise RuntimeError("BuildSimulator was created without a stop_event")
        self.stop_event.set()

    async def run_once(self, sink: EventSink) -> BuildOutcome:
        """Play one full simulated build.

        Args:
            sink: Receives every BuildEvent as it is produced

        Returns:
            SUCCESS or CRASH for the branch taken, CANCELLED if a wait was aborted
        """
        logger.debug("Starting simulated %s build", self.framework.value)
        sink(run_start_event(self.framework.value))

        for stage in self.script:
            if not await self._play_stage(stage, sink):
                logger.debug("Build cancelled during stage %s", stage.key)
                return BuildOutcome.CANCELLED

        roll = self.rng.random()
        if roll < self.config.crash_probability:
            completed = await self._crash(sink)
            outcome = BuildOutcome.CRASH
        else:
            completed = await self._succeed(sink)
            outcome = BuildOutcome.SUCCESS

        logger.debug("Build outcome: %s (roll=%.3f)", outcome.value, roll)
        return outcome if completed else BuildOutcome.CANCELLED

    async def run_forever(self, sink: EventSink, max_runs: int | None = None) -> int:
        """Run builds back to back until stopped.

        Args:
            sink: Receives every BuildEvent
            max_runs: Stop after this many completed runs (default: never)

        Returns:
            Number of runs that completed before the loop ended
        """
        runs = 0
        while not self.cancelled and (max_runs is None or runs < max_runs):
            outcome = await self.run_once(sink)
            if outcome is BuildOutcome.CANCELLED:
                break
            runs += 1

        logger.debug("Build loop finished after %d runs", runs)
        return runs

    # =========================================================================
    # Stages
    # =========================================================================

    async def _play_stage(self, stage: Stage, sink: EventSink) -> bool:
        if stage.heading:
            sink(section_event(stage.key, stage.heading))

        match stage.kind:
            case StageKind.SPINNER:
                sink(stage_start_event(stage.key, stage.label))
                if not await self.awaiter.wait(stage.delay):
                    return False
                sink(stage_complete_event(stage.key, stage.done_label))

            case StageKind.PROGRESS:
                sink(stage_start_event(stage.key, stage.label))
                for percent in progress_percentages(stage.iterations):
                    if not await self.awaiter.wait(stage.delay):
                        return False
                    sink(stage_progress_event(stage.key, stage.progress_text(percent), percent))
                sink(stage_complete_event(stage.key, stage.done_label))

            case StageKind.LOG:
                sink(section_event(stage.key, stage.label))
                for index in range(stage.iterations):
                    if not await self.awaiter.wait(stage.delay):
                        return False
                    text = stage.line(self.fake) if stage.line else ""
                    sink(stage_log_event(stage.key, text, index))

        return True

    async def _crash(self, sink: EventSink) -> bool:
        delays = self.config.delays
        sink(crash_event())

        for index in range(CRASH_FRAMES):
            location = (
                f"{self.fake.file_name()}"
                f":{self.fake.number(1, MAX_LINE)}"
                f":{self.fake.number(1, MAX_COLUMN)}"
            )
            sink(crash_frame_event(
                index,
                self.rng.choice(ERROR_TYPES),
                self.rng.choice(ERROR_MESSAGES),
                location,
            ))
            if not await self.awaiter.wait(delays.crash_frame):
                return False

        sink(crash_end_event(delays.crash_restart))
        return await self.awaiter.wait(delays.crash_restart)

    async def _succeed(self, sink: EventSink) -> bool:
        sink(success_event())
        sink(waiting_event())
        return await self.awaiter.wait(self.config.delays.success_wait)
