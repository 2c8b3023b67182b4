"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from jarpack import __version__
from jarpack.cli.commands import build, init, plan
from jarpack.utils.logging import setup_logging

# Create main Typer app
app = typer.Typer(
    name="jarpack",
    help="Build JAR files from a directory of compiled classes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"jarpack version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output, including the jar tool arguments.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """jarpack - Build JAR files from a directory of compiled classes.

    Recognizes package hierarchy, module hierarchy and multi-release
    layouts, and keeps existing JAR files which are still up to date.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    setup_logging(verbose=verbose, quiet=quiet)


# Register commands
app.add_typer(init.app, name="init")
app.add_typer(plan.app, name="plan")
app.add_typer(build.app, name="build")


if __name__ == "__main__":
    app()
