"""CLI package for jarpack.

This package contains the Typer application and all subcommands.
"""

from jarpack.cli.main import app

__all__ = ["app"]
