"""Plan command implementation.

Shows the JAR files that would be built from the classes directory,
without running the jar tool.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer

from jarpack.archive.arguments import relativize
from jarpack.archive.model import Archive, ArchiveError
from jarpack.core.config import require_config
from jarpack.core.executor import ToolExecutor
from jarpack.core.packaging import plan
from jarpack.models.config import JarConfig
from jarpack.patterns.glob import PatternSyntaxError
from jarpack.utils.formatting import (
    console,
    create_archive_table,
    print_error,
    print_info,
    print_warning,
)

app = typer.Typer(
    help="Show the JAR files that would be built.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _describe_files(archive: Archive) -> str:
    """Summarize the number of files for each release, base release first."""
    parts = []
    for file_set in archive.file_sets():
        release = "base" if file_set.release is None else str(file_set.release)
        parts.append(f"{release}: {len(file_set.files)}")
    return ", ".join(parts) or "none"


def _archive_to_dict(
    archive: Archive,
    config: JarConfig,
    executor: ToolExecutor,
    up_to_date: bool,
    generated_manifest: bool,
) -> dict[str, Any]:
    base = config.base_directory
    manifest = None
    if generated_manifest:
        manifest = "(generated)"
    elif archive.manifest is not None:
        manifest = str(relativize(base, archive.manifest))
    return {
        "jar_file": str(relativize(base, archive.jar_file)),
        "module": archive.module_name,
        "manifest": manifest,
        "main_class": archive.main_class,
        "up_to_date": up_to_date,
        "file_sets": [
            {
                "directory": str(relativize(base, file_set.directory)),
                "release": None if file_set.release is None else str(file_set.release),
                "files": [str(relativize(file_set.directory, f)) for f in file_set.files],
            }
            for file_set in archive.file_sets()
        ],
        "arguments": [str(a) for a in executor.create_arguments(archive)],
    }


@app.callback(invoke_without_command=True)
def show_plan(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the jarpack.toml file.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show the JAR files that would be built, and what goes into each one.

    The classes directory is walked with the configured includes and
    excludes. Existing JAR files that are still up to date are reported
    as kept.

    Examples:
        jarpack plan                  # Table of the planned JAR files
        jarpack plan --format json    # JSON output for scripting
        jarpack plan -c other.toml    # Use another configuration file
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config(config_path)
    rows: list[tuple[dict[str, Any], str]] = []
    try:
        executor = ToolExecutor(config)
        collector = plan(config, executor)
        ignored = collector.handle_orphan_files()
        for archive in collector.archives():
            up_to_date = archive.is_up_to_date()
            _, generated = executor.prepare_manifest(archive)
            data = _archive_to_dict(archive, config, executor, up_to_date, generated)
            rows.append((data, _describe_files(archive)))
    except (ArchiveError, PatternSyntaxError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        archives = [data for data, _ in rows]
        console.print_json(json.dumps({"archives": archives, "ignored": _ignored(config, ignored)}))
        return

    if ignored is not None:
        print_warning(
            f'Some files in "{_ignored(config, ignored)}" would be ignored '
            "because they belong to no module."
        )
    if not rows:
        print_info("No JAR file would be built.")
        return

    table = create_archive_table(f"Planned JAR files ({config.type})")
    for data, summary in rows:
        table.add_row(
            data["jar_file"],
            data["module"] or "-",
            data["manifest"] or "-",
            data["main_class"] or "-",
            summary,
            "up to date" if data["up_to_date"] else "build",
        )
    console.print(table)


def _ignored(config: JarConfig, ignored: Path | None) -> str | None:
    if ignored is None:
        return None
    return str(relativize(config.base_directory, ignored))
