"""Tests for BuildSimulator.

Tests cover:
- Tool names surfacing for every framework
- Crash/success branch selection from the injected random source
- Progress, compile and crash stage shapes
- Independence of successive runs
- Cancellation through the awaiter and the stop event
"""

import asyncio
import re

import pytest

from fakebuild.foundation.config import DelayConfig, SimulatorConfig
from fakebuild.simulator import (
    FRAMEWORK_CONFIGS,
    BuildEventType,
    BuildOutcome,
    BuildSimulator,
    FrameworkId,
    InstantAwaiter,
)
from fakebuild.simulator.simulator import CRASH_FRAMES, ERROR_MESSAGES, ERROR_TYPES
from fakebuild.simulator.stages import SOURCE_AREAS

# Waits in the fixed stage script:
# 1 init + 20 install + 5 configure + 1 test setup + 5 compile + 1 styles
# + 10 lint + 1 format + 15 test + 20 bundle + 1 optimize + 1 source maps + 4 checks
SCRIPT_WAITS = 85


def _tool_names(framework: FrameworkId) -> set[str]:
    tools = FRAMEWORK_CONFIGS[framework]
    return {tools.build_tool, tools.test_runner, tools.style_processor, tools.linter, tools.formatter}


# =============================================================================
# Framework tools
# =============================================================================


class TestFrameworkOutput:
    """Every run mentions the selected framework's tools and no others."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("framework", list(FrameworkId))
    async def test_run_references_framework_tools(
        self, framework, success_rng, awaiter, collector
    ) -> None:
        simulator = BuildSimulator(framework, rng=success_rng, awaiter=awaiter)

        outcome = await simulator.run_once(collector)

        assert outcome is BuildOutcome.SUCCESS
        output = collector.output
        own_tools = _tool_names(framework)
        for tool in own_tools:
            assert tool in output

        foreign_tools = set().union(*(_tool_names(f) for f in FrameworkId)) - own_tools
        for tool in foreign_tools:
            assert tool not in output

    @pytest.mark.asyncio
    @pytest.mark.parametrize("framework", list(FrameworkId))
    async def test_banner_and_bundle_name_framework(
        self, framework, success_rng, awaiter, collector
    ) -> None:
        await BuildSimulator(framework, rng=success_rng, awaiter=awaiter).run_once(collector)

        assert collector.events[0].type == BuildEventType.RUN_START
        assert collector.events[0].text == f"Starting {framework.value} app build process..."
        assert f"{framework.value} production bundle built" in collector.output


# =============================================================================
# Outcome branch
# =============================================================================


class TestOutcome:
    """The crash branch runs iff the draw is below crash_probability."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("draw", "expected"),
        [
            (0.0, BuildOutcome.CRASH),
            (0.5, BuildOutcome.CRASH),
            (0.699, BuildOutcome.CRASH),
            (0.7, BuildOutcome.SUCCESS),
            (0.99, BuildOutcome.SUCCESS),
        ],
    )
    async def test_branch_follows_draw(
        self, draw, expected, make_rng, awaiter, collector
    ) -> None:
        simulator = BuildSimulator(FrameworkId.REACT, rng=make_rng(draw), awaiter=awaiter)

        outcome = await simulator.run_once(collector)

        assert outcome is expected
        crashes = collector.of_type(BuildEventType.CRASH)
        successes = collector.of_type(BuildEventType.SUCCESS)
        assert len(crashes) + len(successes) == 1
        if expected is BuildOutcome.CRASH:
            assert crashes
        else:
            assert successes

    @pytest.mark.asyncio
    async def test_configured_probability_is_used(self, make_rng, awaiter, collector) -> None:
        config = SimulatorConfig(crash_probability=0.2)
        simulator = BuildSimulator(
            FrameworkId.VUE, config, rng=make_rng(0.5), awaiter=awaiter
        )

        assert await simulator.run_once(collector) is BuildOutcome.SUCCESS

    @pytest.mark.asyncio
    async def test_success_branch_messages_and_wait(
        self, success_rng, awaiter, collector
    ) -> None:
        await BuildSimulator(FrameworkId.REACT, rng=success_rng, awaiter=awaiter).run_once(
            collector
        )

        assert collector.types[-2:] == [BuildEventType.SUCCESS, BuildEventType.WAITING]
        assert collector.events[-2].text == "Build completed successfully!"
        assert collector.events[-1].text == "Waiting for changes..."
        assert len(awaiter.delays) == SCRIPT_WAITS + 1
        assert awaiter.delays[-1] == DelayConfig().success_wait


# =============================================================================
# Stage shapes
# =============================================================================


class TestStages:
    """Fixed stage structure within a run."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stage", ["install", "bundle"])
    async def test_progress_stage_percentages(
        self, stage, success_rng, awaiter, collector
    ) -> None:
        await BuildSimulator(FrameworkId.SVELTE, rng=success_rng, awaiter=awaiter).run_once(
            collector
        )

        percents = [
            e.data["percent"]
            for e in collector.of_type(BuildEventType.STAGE_PROGRESS)
            if e.data["stage"] == stage
        ]
        assert percents == list(range(0, 100, 5))
        assert all(a < b for a, b in zip(percents, percents[1:]))

    @pytest.mark.asyncio
    async def test_install_progress_text(self, success_rng, awaiter, collector) -> None:
        await BuildSimulator(FrameworkId.REACT, rng=success_rng, awaiter=awaiter).run_once(
            collector
        )

        texts = [
            e.text
            for e in collector.of_type(BuildEventType.STAGE_PROGRESS)
            if e.data["stage"] == "install"
        ]
        assert texts[0] == "Installing dependencies (0%)"
        assert texts[-1] == "Installing dependencies (95%)"

    @pytest.mark.asyncio
    async def test_compile_areas_in_order(self, success_rng, awaiter, collector) -> None:
        await BuildSimulator(FrameworkId.ANGULAR, rng=success_rng, awaiter=awaiter).run_once(
            collector
        )

        started = [
            e.data["stage"].split(":", 1)[1]
            for e in collector.of_type(BuildEventType.STAGE_START)
            if e.data["stage"].startswith("compile:")
        ]
        assert started == list(SOURCE_AREAS)
        assert "Compiling source code..." in [
            e.text for e in collector.of_type(BuildEventType.SECTION)
        ]

    @pytest.mark.asyncio
    async def test_log_lines(self, success_rng, awaiter, collector) -> None:
        await BuildSimulator(FrameworkId.REACT, rng=success_rng, awaiter=awaiter).run_once(
            collector
        )
        logs = collector.of_type(BuildEventType.STAGE_LOG)

        config_lines = [e.text for e in logs if e.data["stage"] == "configure"]
        lint_lines = [e.text for e in logs if e.data["stage"] == "lint"]
        test_lines = [e.text for e in logs if e.data["stage"] == "test"]

        assert len(config_lines) == 5
        assert len(lint_lines) == 10
        assert len(test_lines) == 15
        assert all(
            re.fullmatch(r"\[[a-z0-9]{8}\] Setting up webpack config: \w+_\w+\.\w+", line)
            for line in config_lines
        )
        assert all(re.fullmatch(r"\[[a-z0-9]{8}\] Linting: \w+_\w+\.\w+", line) for line in lint_lines)
        assert all(
            re.fullmatch(r"\[[a-z0-9]{8}\] \w+ \w+ \w+ test: (PASS|FAIL)", line)
            for line in test_lines
        )

    @pytest.mark.asyncio
    async def test_final_checks_pass(self, success_rng, awaiter, collector) -> None:
        await BuildSimulator(FrameworkId.VUE, rng=success_rng, awaiter=awaiter).run_once(
            collector
        )

        completed = [e.text for e in collector.of_type(BuildEventType.STAGE_COMPLETE)]
        assert completed[-4:] == [
            "Security audit passed",
            "Performance benchmark passed",
            "Accessibility scan passed",
            "Browser compatibility check passed",
        ]

    @pytest.mark.asyncio
    async def test_delays_come_from_config(self, success_rng, awaiter, collector) -> None:
        delays = DelayConfig(initialize=0.25, install_step=0.01)
        config = SimulatorConfig(delays=delays)

        await BuildSimulator(
            FrameworkId.REACT, config, rng=success_rng, awaiter=awaiter
        ).run_once(collector)

        assert awaiter.delays[0] == 0.25
        assert awaiter.delays[1:21] == [0.01] * 20


# =============================================================================
# Crash sub-stage
# =============================================================================


class TestCrash:
    """Fabricated crash shape."""

    @pytest.mark.asyncio
    async def test_crash_emits_five_frames(self, crash_rng, awaiter, collector) -> None:
        await BuildSimulator(FrameworkId.REACT, rng=crash_rng, awaiter=awaiter).run_once(
            collector
        )

        frames = collector.of_type(BuildEventType.CRASH_FRAME)
        assert len(frames) == CRASH_FRAMES == 5
        assert [f.data["index"] for f in frames] == [0, 1, 2, 3, 4]

        # Frames come before the restart notice and its delay
        assert collector.types[-1] == BuildEventType.CRASH_END
        delays = DelayConfig()
        assert awaiter.delays[-6:] == [delays.crash_frame] * 5 + [delays.crash_restart]
        assert len(awaiter.delays) == SCRIPT_WAITS + CRASH_FRAMES + 1

    @pytest.mark.asyncio
    async def test_crash_frame_contents(self, crash_rng, awaiter, collector) -> None:
        await BuildSimulator(FrameworkId.REACT, rng=crash_rng, awaiter=awaiter).run_once(
            collector
        )

        for frame in collector.of_type(BuildEventType.CRASH_FRAME):
            assert frame.data["error_type"] in ERROR_TYPES
            assert frame.data["error_message"] in ERROR_MESSAGES
            match = re.fullmatch(r"\w+_\w+\.\w+:(\d+):(\d+)", frame.data["location"])
            assert match is not None
            assert 1 <= int(match.group(1)) <= 500
            assert 1 <= int(match.group(2)) <= 80

    @pytest.mark.asyncio
    async def test_crash_messages(self, crash_rng, awaiter, collector) -> None:
        await BuildSimulator(FrameworkId.REACT, rng=crash_rng, awaiter=awaiter).run_once(
            collector
        )

        crash = collector.of_type(BuildEventType.CRASH)[0]
        end = collector.of_type(BuildEventType.CRASH_END)[0]
        assert crash.text == "ERROR: Build process crashed unexpectedly!"
        assert crash.data["detail"] == "Stack trace:"
        assert end.text == "Build failed. Restarting process in 5 seconds..."


# =============================================================================
# Independence
# =============================================================================


class TestIndependence:
    """No state carries over between runs."""

    @pytest.mark.asyncio
    async def test_repeated_runs_have_identical_shape(
        self, crash_rng, make_awaiter, collector
    ) -> None:
        simulator = BuildSimulator(FrameworkId.REACT, rng=crash_rng, awaiter=make_awaiter())

        await simulator.run_once(collector)
        first = collector.types
        collector.events.clear()
        await simulator.run_once(collector)

        assert collector.types == first

    @pytest.mark.asyncio
    async def test_same_seed_same_output(self, make_rng, make_awaiter) -> None:
        outputs = []
        for _ in range(2):
            sink = []
            simulator = BuildSimulator(
                FrameworkId.VUE, rng=make_rng(0.3, seed=42), awaiter=make_awaiter()
            )
            await simulator.run_once(sink.append)
            outputs.append([(e.type, e.data) for e in sink])

        assert outputs[0] == outputs[1]

    @pytest.mark.asyncio
    async def test_one_outcome_draw_per_run(self, make_rng, awaiter, collector) -> None:
        rng = make_rng(0.9)
        simulator = BuildSimulator(FrameworkId.REACT, rng=rng, awaiter=awaiter)

        await simulator.run_once(collector)
        # 15 PASS/FAIL draws for test lines plus the outcome draw
        assert rng.random_calls == 16


# =============================================================================
# Driver loop and cancellation
# =============================================================================


class TestRunForever:
    """The driver loop and its cancellation paths."""

    @pytest.mark.asyncio
    async def test_max_runs(self, success_rng, awaiter, collector) -> None:
        simulator = BuildSimulator(FrameworkId.REACT, rng=success_rng, awaiter=awaiter)

        runs = await simulator.run_forever(collector, max_runs=3)

        assert runs == 3
        assert len(collector.of_type(BuildEventType.RUN_START)) == 3

    @pytest.mark.asyncio
    async def test_cancelled_wait_ends_run(self, success_rng, make_awaiter, collector) -> None:
        simulator = BuildSimulator(
            FrameworkId.REACT, rng=success_rng, awaiter=make_awaiter(cancel_after=3)
        )

        assert await simulator.run_once(collector) is BuildOutcome.CANCELLED
        assert not collector.of_type(BuildEventType.SUCCESS)

    @pytest.mark.asyncio
    async def test_cancelled_awaiter_stops_loop(
        self, success_rng, make_awaiter, collector
    ) -> None:
        simulator = BuildSimulator(
            FrameworkId.REACT, rng=success_rng, awaiter=make_awaiter(cancel_after=3)
        )

        assert await simulator.run_forever(collector) == 0
        assert len(collector.of_type(BuildEventType.RUN_START)) == 1

    @pytest.mark.asyncio
    async def test_stop_during_tail_wait(self, crash_rng, instant_config, collector) -> None:
        stop_event = asyncio.Event()
        simulator = BuildSimulator(
            FrameworkId.REACT, instant_config, rng=crash_rng, stop_event=stop_event
        )
        assert isinstance(simulator.awaiter, InstantAwaiter)

        def sink(event):
            collector(event)
            if event.type == BuildEventType.CRASH_END:
                simulator.stop()

        runs = await simulator.run_forever(sink)

        assert runs == 0
        assert stop_event.is_set()
        assert len(collector.of_type(BuildEventType.RUN_START)) == 1

    @pytest.mark.asyncio
    async def test_stop_from_another_task(self, success_rng, instant_config) -> None:
        stop_event = asyncio.Event()
        simulator = BuildSimulator(
            FrameworkId.SVELTE, instant_config, rng=success_rng, stop_event=stop_event
        )
        events = []

        loop_task = asyncio.create_task(simulator.run_forever(events.append))
        await asyncio.sleep(0)
        stop_event.set()
        runs = await asyncio.wait_for(loop_task, timeout=5)

        assert runs == 0
        assert events

    @pytest.mark.asyncio
    async def test_already_stopped_runs_nothing(self, success_rng, instant_config) -> None:
        stop_event = asyncio.Event()
        stop_event.set()
        simulator = BuildSimulator(
            FrameworkId.REACT, instant_config, rng=success_rng, stop_event=stop_event
        )
        events = []

        assert await simulator.run_forever(events.append) == 0
        assert events == []

    def test_stop_without_event_raises(self, success_rng) -> None:
        simulator = BuildSimulator(FrameworkId.REACT, rng=success_rng)

        with pytest.raises(RuntimeError):
            simulator.stop()
