"""Terminal theme for the simulated build.

Colors follow what real front-end tooling prints: blue banners, yellow
section headings, gray chatter, green success, red failure.
"""

from rich.console import Console
from rich.theme import Theme

# =============================================================================
# RICH THEME
# =============================================================================

FAKEBUILD_THEME = Theme({
    "build.banner": "blue",                 # Starting ... build process
    "build.section": "yellow",              # Configuring webpack...
    "build.log": "bright_black",            # [a1b2c3d4] Linting: ...
    "build.spinner": "cyan",                # Spinner glyph
    "build.step": "white",                  # Spinner text
    "build.done": "green",                  # ✔ Project initialized

    "build.pass": "green",
    "build.fail": "red",

    "build.error": "red",                   # ERROR: Build process crashed
    "build.trace.header": "yellow",         # Stack trace:
    "build.trace": "bright_black",          # at TypeError: ...
    "build.success": "green",               # Build completed successfully!
    "build.waiting": "cyan",                # Waiting for changes...

    # Diagnostics (error handler)
    "fakebuild.error": "bold red",
    "fakebuild.heading": "bold white",
    "fakebuild.muted": "dim white",
})


# =============================================================================
# CHARACTERS
# =============================================================================

CHARS = {
    "success": "✔",
    "fail": "✖",
}

SPINNER_NAME = "dots"


def create_console(stderr: bool = False) -> Console:
    """Create a Rich console with the fakebuild theme."""
    return Console(theme=FAKEBUILD_THEME, stderr=stderr, highlight=False)
