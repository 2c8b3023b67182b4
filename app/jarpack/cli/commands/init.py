"""Init command implementation.

Creates a jarpack.toml file with the default settings.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from jarpack.core.config import ConfigError, save_config
from jarpack.core.paths import get_project_config_path
from jarpack.models.config import JarConfig
from jarpack.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Create a jarpack.toml configuration file.",
    invoke_without_command=True,
)


class ArtifactChoice(str, Enum):
    """Artifact types of the generated configuration."""

    JAR = "jar"
    TEST_JAR = "test-jar"


def _show_config_summary(config: JarConfig, output_path: Path) -> None:
    """Display the main settings of the created configuration."""
    console.print()
    console.print("[bold]Configuration Summary[/bold]")
    console.print(f"  Classes: [info]{config.classes_directory.as_posix()}[/info]")
    console.print(f"  Output: [muted]{config.output_directory.as_posix()}[/muted]")
    console.print(f"  JAR file: [muted]{config.effective_final_name}.jar[/muted]")
    if config.main_class:
        console.print(f"  Main class: [info]{config.main_class}[/info]")
    console.print(f"  File: [muted]{output_path}[/muted]")
    console.print()


@app.callback(invoke_without_command=True)
def init_config(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path for the configuration file.",
        ),
    ] = None,
    artifact_id: Annotated[
        str | None,
        typer.Option(
            "--artifact-id",
            "-a",
            help="Artifact identifier (default: name of the project directory).",
        ),
    ] = None,
    version: Annotated[
        str,
        typer.Option(
            "--project-version",
            help="Project version.",
        ),
    ] = "0.0.0",
    main_class: Annotated[
        str | None,
        typer.Option(
            "--main-class",
            "-m",
            help="Main class, optionally as module/class.",
        ),
    ] = None,
    artifact_type: Annotated[
        ArtifactChoice,
        typer.Option(
            "--type",
            "-t",
            help="Artifact type: jar or test-jar.",
            case_sensitive=False,
        ),
    ] = ArtifactChoice.JAR,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing configuration file.",
        ),
    ] = False,
) -> None:
    """Create a jarpack.toml file for the project in the current directory.

    Examples:
        jarpack init                          # Default settings
        jarpack init -a my-app -m org.app.Main
        jarpack init --type test-jar -o test.toml
    """
    if ctx.invoked_subcommand is not None:
        return

    output_path = output or get_project_config_path()
    if output_path.exists():
        if not force:
            print_error(f"Configuration already exists: {output_path}")
            print_info("Use --force to overwrite or specify a different path with --output.")
            raise typer.Exit(code=1)
        print_warning(f"Overwriting existing configuration: {output_path}")

    try:
        config = JarConfig(
            base_directory=output_path.parent,
            artifact_id=artifact_id or output_path.absolute().parent.name,
            version=version,
            main_class=main_class,
            type=artifact_type.value,
        )
    except ValidationError as e:
        print_error(f"Invalid settings: {e}")
        raise typer.Exit(code=1) from e

    try:
        saved_path = save_config(config, output_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    _show_config_summary(config, saved_path)
    print_success(f"Configuration created: {saved_path}")
