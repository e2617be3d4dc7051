"""Command-line interface for binge."""

from binge.cli.runner import CLIRunner

__all__ = ["CLIRunner"]
