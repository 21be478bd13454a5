"""fakebuild CLI - Command-line interface."""

from fakebuild.cli.main import cli_entrypoint, main

__all__ = ["cli_entrypoint", "main"]
