"""The ordered script of a simulated build.

A build is a fixed sequence of Stages. Only the text inside a stage is
random; the order, iteration counts and delays are not.

Stage kinds:
- SPINNER: start, wait once, succeed
- PROGRESS: start, then N x (wait, show percentage i * 5), succeed
- LOG: heading, then N x (wait, print one fabricated line)
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from fakebuild.foundation.config import DelayConfig
from fakebuild.simulator.fake_data import FakeData
from fakebuild.simulator.frameworks import FrameworkId, get_framework_config

INSTALL_STEPS = 20
CONFIGURE_LINES = 5
LINT_LINES = 10
TEST_LINES = 15
BUNDLE_STEPS = 20
PROGRESS_INCREMENT = 5

SOURCE_AREAS = ("components", "services", "utils", "models", "hooks")

FINAL_CHECKS = (
    "Security audit",
    "Performance benchmark",
    "Accessibility scan",
    "Browser compatibility check",
)

LineFactory = Callable[[FakeData], str]


class StageKind(Enum):
    """How a stage is played out."""

    SPINNER = "spinner"
    PROGRESS = "progress"
    LOG = "log"


@dataclass(frozen=True, slots=True)
class Stage:
    """One labeled unit of simulated work."""

    key: str
    """Stable identifier, e.g. "install" or "compile:utils"."""

    kind: StageKind

    label: str
    """Spinner text while running; the heading for LOG stages."""

    delay: float
    """Seconds to wait per iteration (before speed scaling)."""

    done_label: str = ""
    """Text shown when a SPINNER/PROGRESS stage succeeds."""

    iterations: int = 1

    heading: str | None = None
    """Section heading printed before this stage starts."""

    line: LineFactory | None = None
    """Builds each fabricated line of a LOG stage."""

    def progress_text(self, percent: int) -> str:
        return f"{self.label} ({percent}%)"


def progress_percentages(steps: int) -> list[int]:
    """Displayed percentages for a progress stage: 0, 5, 10, ..."""
    return [i * PROGRESS_INCREMENT for i in range(steps)]


def _config_line(build_tool: str) -> LineFactory:
    def line(fake: FakeData) -> str:
        return f"[{fake.alphanumeric(8)}] Setting up {build_tool} config: {fake.file_name()}"

    return line


def _lint_line(fake: FakeData) -> str:
    return f"[{fake.alphanumeric(8)}] Linting: {fake.file_name()}"


def _test_line(fake: FakeData) -> str:
    status = "PASS" if fake.boolean() else "FAIL"
    return f"[{fake.alphanumeric(8)}] {fake.words(3)} test: {status}"


def build_script(framework: FrameworkId, delays: DelayConfig) -> tuple[Stage, ...]:
    """Build the ordered stage script for one framework.

    Args:
        framework: Framework being simulated
        delays: Per-stage delays

    Returns:
        Stages in execution order
    """
    tools = get_framework_config(framework)
    name = framework.value

    stages: list[Stage] = [
        Stage(
            key="initialize",
            kind=StageKind.SPINNER,
            label="Initializing project",
            done_label="Project initialized",
            delay=delays.initialize,
        ),
        Stage(
            key="install",
            kind=StageKind.PROGRESS,
            label="Installing dependencies",
            done_label="Dependencies installed",
            iterations=INSTALL_STEPS,
            delay=delays.install_step,
        ),
        Stage(
            key="configure",
            kind=StageKind.LOG,
            label=f"Configuring {tools.build_tool}...",
            iterations=CONFIGURE_LINES,
            delay=delays.configure_step,
            line=_config_line(tools.build_tool),
        ),
        Stage(
            key="test_setup",
            kind=StageKind.SPINNER,
            label=f"Setting up {tools.test_runner}",
            done_label=f"{tools.test_runner} configured",
            delay=delays.test_setup,
        ),
    ]

    for i, area in enumerate(SOURCE_AREAS):
        stages.append(Stage(
            key=f"compile:{area}",
            kind=StageKind.SPINNER,
            label=f"Compiling {area}",
            done_label=f"{area} compiled",
            delay=delays.compile,
            heading="Compiling source code..." if i == 0 else None,
        ))

    stages.extend([
        Stage(
            key="styles",
            kind=StageKind.SPINNER,
            label=f"Processing {tools.style_processor} styles",
            done_label="Styles processed",
            delay=delays.styles,
        ),
        Stage(
            key="lint",
            kind=StageKind.LOG,
            label=f"Running {tools.linter}...",
            iterations=LINT_LINES,
            delay=delays.lint_step,
            line=_lint_line,
        ),
        Stage(
            key="format",
            kind=StageKind.SPINNER,
            label=f"Running {tools.formatter}",
            done_label="Code formatted",
            delay=delays.format,
        ),
        Stage(
            key="test",
            kind=StageKind.LOG,
            label=f"Running {tools.test_runner} tests...",
            iterations=TEST_LINES,
            delay=delays.test_step,
            line=_test_line,
        ),
        Stage(
            key="bundle",
            kind=StageKind.PROGRESS,
            label=f"Building {name} production bundle",
            done_label=f"{name} production bundle built",
            iterations=BUNDLE_STEPS,
            delay=delays.bundle_step,
        ),
        Stage(
            key="optimize",
            kind=StageKind.SPINNER,
            label="Optimizing bundle",
            done_label="Bundle optimized",
            delay=delays.optimize,
        ),
        Stage(
            key="source_maps",
            kind=StageKind.SPINNER,
            label="Generating source maps",
            done_label="Source maps generated",
            delay=delays.source_maps,
        ),
    ])

    for i, check in enumerate(FINAL_CHECKS):
        stages.append(Stage(
            key=f"check:{check}",
            kind=StageKind.SPINNER,
            label=check,
            done_label=f"{check} passed",
            delay=delays.final_check,
            heading="Running final checks..." if i == 0 else None,
        ))

    return tuple(stages)
