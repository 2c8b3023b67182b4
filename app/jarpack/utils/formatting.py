"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.table import Table

from jarpack.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Use true colors on interactive terminals, let Rich decide otherwise."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_archive_table(title: str = "Archives") -> Table:
    """Create a pre-configured table for displaying planned archives.

    Args:
        title: Table title.

    Returns:
        Rich Table with one row per archive.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("JAR file", no_wrap=True)
    table.add_column("Module", style="module")
    table.add_column("Manifest", style="muted")
    table.add_column("Main class", style="text")
    table.add_column("Files", style="release")
    table.add_column("Status", style="muted")
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
