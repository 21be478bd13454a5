"""CLI renderer for the simulated build.

Uses Rich for real-time terminal output. Shows:
- Spinners for running stages, replaced by a check mark when they succeed
- Live percentages for progress stages
- Gray fabricated log lines
- The crash stack trace or the success banner

When the console isn't a terminal (pipes, CI logs, tests) spinners are
skipped and only the finished lines are printed.
"""

from dataclasses import dataclass

from rich.console import Console
from rich.status import Status
from rich.text import Text

from fakebuild.cli.theme import CHARS, FAKEBUILD_THEME, SPINNER_NAME, create_console
from fakebuild.simulator.events import BuildEvent, BuildEventType


@dataclass
class RendererConfig:
    """Configuration for the renderer."""

    animate: bool = True
    """Show live spinners when the console is a terminal."""

    refresh_rate: float = 12.5
    """Spinner refresh rate (frames per second)."""


_TEST_STATUS_STYLES = {
    "PASS": "build.pass",
    "FAIL": "build.fail",
}


def log_line(event: BuildEvent) -> Text:
    """Gray log line; test results get a green PASS or red FAIL."""
    line = Text(event.text, style="build.log")
    if event.data.get("stage") == "test":
        for status, style in _TEST_STATUS_STYLES.items():
            if event.text.endswith(f": {status}"):
                line.stylize(style, len(event.text) - len(status))
    return line


class RichRenderer:
    """Rich-based renderer; pass ``renderer.handle`` as the simulator's sink.

    Args:
        console: Console to draw on (default: themed stdout console)
        config: Renderer options
    """

    def __init__(self, console: Console | None = None, config: RendererConfig | None = None):
        if console is None:
            console = create_console()
        else:
            # Caller-supplied consoles may not know the build.* styles
            console.push_theme(FAKEBUILD_THEME)
        self.console = console
        self.config = config or RendererConfig()
        self._status: Status | None = None

    @property
    def animated(self) -> bool:
        return self.config.animate and self.console.is_terminal

    def handle(self, event: BuildEvent) -> None:
        """Render a single event."""
        match event.type:
            case BuildEventType.RUN_START:
                self._print(event.text, "build.banner")

            case BuildEventType.SECTION:
                self._print(event.text, "build.section")

            case BuildEventType.STAGE_START:
                self._start_spinner(event.text)

            case BuildEventType.STAGE_PROGRESS:
                if self._status is not None:
                    self._status.update(Text(event.text, style="build.step"))

            case BuildEventType.STAGE_COMPLETE:
                self._stop_spinner()
                line = Text(f"{CHARS['success']} ", style="build.done")
                line.append(event.text)
                self.console.print(line, soft_wrap=True)

            case BuildEventType.STAGE_LOG:
                self.console.print(log_line(event), soft_wrap=True)

            case BuildEventType.CRASH:
                self._stop_spinner()
                self._print(f"\n{event.text}", "build.error")
                self._print(event.data.get("detail", ""), "build.trace.header")

            case BuildEventType.CRASH_FRAME:
                self._print(f"    {event.text}", "build.trace")
                self._print(
                    f"        at Object.<anonymous> ({event.data['location']})",
                    "build.trace",
                )

            case BuildEventType.CRASH_END:
                self._print(f"\n{event.text}", "build.error")

            case BuildEventType.SUCCESS:
                self._stop_spinner()
                self._print(f"\n{event.text}", "build.success")

            case BuildEventType.WAITING:
                self._print(event.text, "build.waiting")

    def close(self) -> None:
        """Stop any spinner left running (e.g. after cancellation)."""
        self._stop_spinner()

    def _print(self, text: str, style: str) -> None:
        # Fabricated lines contain "[abc123]" prefixes; never parse them as markup
        self.console.print(text, style=style, markup=False, highlight=False, soft_wrap=True)

    def _start_spinner(self, text: str) -> None:
        self._stop_spinner()
        if not self.animated:
            return
        self._status = self.console.status(
            Text(text, style="build.step"),
            spinner=SPINNER_NAME,
            spinner_style="build.spinner",
            refresh_per_second=self.config.refresh_rate,
        )
        self._status.start()

    def _stop_spinner(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None
