"""CLI commands for jarpack.

This package contains all subcommand implementations.
"""

from jarpack.cli.commands import build, init, plan

__all__ = ["build", "init", "plan"]
