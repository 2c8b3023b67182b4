"""Build command implementation.

Creates the JAR files described by the project configuration.
"""

from pathlib import Path
from typing import Annotated

import typer

from jarpack.archive.arguments import format_debug_arguments, relativize
from jarpack.archive.model import ArchiveError
from jarpack.core.config import require_config
from jarpack.core.executor import JAR_TOOL, ToolExecutor, ToolNotFoundError
from jarpack.core.packaging import is_empty_directory, package, plan
from jarpack.models.config import JarConfig
from jarpack.patterns.glob import PatternSyntaxError
from jarpack.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Build the JAR files.",
    invoke_without_command=True,
)


def _show_commands(config: JarConfig) -> None:
    """Print the jar tool invocations that a build would run.

    Generated metadata files are not written, so the printed arguments
    omit them.
    """
    executor = ToolExecutor(config)
    collector = plan(config, executor)
    ignored = collector.handle_orphan_files()
    if ignored is not None:
        print_warning(
            f'Some files in "{relativize(config.base_directory, ignored)}" would be ignored '
            "because they belong to no module."
        )
    archives = collector.archives()
    if not archives:
        print_info("No JAR file would be built.")
        return
    for archive in archives:
        relative_path = relativize(config.base_directory, archive.jar_file)
        if archive.is_up_to_date():
            print_info(f"Would keep up-to-date JAR: {relative_path}")
            continue
        _, generated = executor.prepare_manifest(archive)
        console.print(f"[bold_header]{relative_path}[/]")
        arguments = format_debug_arguments(
            executor.create_arguments(archive), config.base_directory
        )
        console.print(f"{JAR_TOOL} {arguments}", markup=False, highlight=False, end="")
        if generated:
            console.print("[muted]  with a generated manifest[/]")
        if config.add_metadata:
            console.print("[muted]  with the pom.properties metadata[/]")


@app.callback(invoke_without_command=True)
def build_jars(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the jarpack.toml file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Rebuild JAR files even if they are up to date.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show the jar tool arguments without building anything.",
        ),
    ] = False,
) -> None:
    """Build the JAR files from the classes directory.

    Existing JAR files are kept when no file has been added, removed or
    modified since they were created. Use --verbose to keep a copy of the
    jar tool arguments next to the JAR files.

    Examples:
        jarpack build                 # Build or update the JAR files
        jarpack build --force         # Rebuild all JAR files
        jarpack build --dry-run       # Preview the jar tool arguments
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config(config_path)
    if force:
        config = config.model_copy(update={"force_creation": True})

    try:
        if dry_run:
            if config.skip_if_empty and is_empty_directory(config.classes_directory):
                print_info(f"[DRY-RUN] Would skip packaging of the {config.type}.")
                return
            _show_commands(config)
            print_info("[DRY-RUN] No files were written.")
            return
        result = package(config)
    except ToolNotFoundError as e:
        print_error(str(e))
        print_info("Install a JDK or set JAVA_HOME.")
        raise typer.Exit(code=1) from e
    except (ArchiveError, PatternSyntaxError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if result.skipped:
        print_info(f"Skipped packaging of the {config.type}: no content.")
        return
    for module_name, paths in result.artifacts.items():
        for jar_file in paths.values():
            name = f" ({module_name})" if module_name else ""
            print_success(f"JAR file ready{name}: {relativize(config.base_directory, jar_file)}")
