"""CLI Error Handler.

Provides unified error handling for the CLI with support for:
- Human-readable output (default)
- JSON output for machine consumption
"""

import json
import sys
from typing import NoReturn

from rich.text import Text

from fakebuild.cli.theme import CHARS, create_console
from fakebuild.foundation.errors import ErrorCode, FakebuildError


def _wrap(error: FakebuildError | Exception) -> FakebuildError:
    if isinstance(error, FakebuildError):
        return error
    return FakebuildError(
        code=ErrorCode.RUNTIME_STATE_INVALID,
        context={"detail": str(error)},
        cause=error,
    )


def handle_error(
    error: FakebuildError | Exception,
    json_output: bool = False,
) -> NoReturn:
    """Report an error on stderr and exit.

    Args:
        error: The error to handle (FakebuildError or generic Exception)
        json_output: If True, output JSON to stderr instead of rich text

    Raises:
        SystemExit: Always exits with code 1
    """
    error = _wrap(error)

    if json_output:
        print(format_error_for_json(error), file=sys.stderr)
        sys.exit(1)

    _print_human_error(error)
    sys.exit(1)


def _print_human_error(error: FakebuildError) -> None:
    """Print error in human-readable format."""
    console = create_console(stderr=True)

    header = Text()
    header.append(f"{CHARS['fail']} ", style="fakebuild.error")
    header.append(error.message, style="fakebuild.error")
    header.append(f" ({error.error_id})", style="fakebuild.muted")
    console.print(header, soft_wrap=True)

    if error.recovery_hints:
        console.print("\nWhat you can do:", style="fakebuild.heading")
        for i, hint in enumerate(error.recovery_hints, 1):
            console.print(f"  {i}. {hint}", markup=False, soft_wrap=True)


def format_error_for_json(error: FakebuildError | Exception) -> str:
    """Format an error as JSON string.

    Args:
        error: The error to format

    Returns:
        JSON string representation of the error
    """
    error = _wrap(error)
    error_dict = error.to_dict()
    if error.cause:
        error_dict["cause"] = str(error.cause)
    return json.dumps(error_dict)
