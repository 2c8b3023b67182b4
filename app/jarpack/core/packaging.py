"""Packaging pipeline from a configuration to JAR files.

The pipeline collects the files of the classes directory, prunes the
empty archives and writes the remaining ones with the ``jar`` tool.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from jarpack.core.executor import ToolExecutor
from jarpack.layout.collector import FileCollector
from jarpack.models.config import JarConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PackagingResult:
    """Outcome of packaging a classes directory.

    Attributes:
        artifacts: Paths of the created or kept JAR files, by module name
            (None for package hierarchy) and artifact type.
        skipped: Whether packaging was skipped because there was no content.
    """

    artifacts: dict[str | None, dict[str, Path]] = field(default_factory=dict)
    skipped: bool = False


def is_empty_directory(directory: Path) -> bool:
    """Whether a directory is missing or has no entry."""
    if not directory.is_dir():
        return True
    return next(directory.iterdir(), None) is None


def plan(config: JarConfig, executor: ToolExecutor) -> FileCollector:
    """Collect and prune the archives to write, without writing them.

    Args:
        config: The packaging configuration.
        executor: Creates the archives, which holds their file names.

    Returns:
        The collector holding the pruned archives.

    Raises:
        PatternSyntaxError: If an include or exclude pattern is invalid.
        OSError: If the classes directory cannot be read.
    """
    classes = config.classes_directory
    if not classes.exists() and not config.force_creation:
        logger.warning("JAR will be empty - no content was marked for inclusion!")
    collector = FileCollector(
        classes,
        includes=config.effective_includes,
        excludes=config.effective_excludes,
        detect_multi_release=config.detect_multi_release,
        archive_factory=executor.new_archive,
    )
    collector.collect()
    collector.prune(config.skip_if_empty)
    return collector


def package(config: JarConfig, *, executor: ToolExecutor | None = None) -> PackagingResult:
    """Build the JAR files described by a configuration.

    Args:
        config: The packaging configuration, with absolute paths.
        executor: The executor to use. If None, one is created for ``config``.

    Returns:
        The paths of the JAR files, or a skipped result.

    Raises:
        ArchiveError: If a JAR file cannot be created.
        PatternSyntaxError: If an include or exclude pattern is invalid.
        OSError: If the classes directory cannot be read.
    """
    if config.skip_if_empty and is_empty_directory(config.classes_directory):
        logger.info("Skipping packaging of the %s.", config.type)
        return PackagingResult(skipped=True)
    executor = executor or ToolExecutor(config)
    collector = plan(config, executor)
    return PackagingResult(artifacts=executor.write_all(collector))
