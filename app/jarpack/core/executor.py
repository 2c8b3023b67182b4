"""Writer of JAR files using the ``jar`` tool of the JDK.

The executor names the JAR files, keeps the existing ones that are still
up to date, prepares the manifest and the build metadata, and runs the
``jar`` tool once for each archive collected by a
:class:`~jarpack.layout.collector.FileCollector`.
"""

import logging
import os
import re
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from jarpack.archive.arguments import Argument, relativize
from jarpack.archive.manifest import (
    AUTOMATIC_MODULE_NAME,
    CREATED_BY,
    MAIN_CLASS,
    MULTI_RELEASE,
    Manifest,
    ManifestFormatError,
)
from jarpack.archive.model import Archive, ArchiveError
from jarpack.core.metadata import MetadataFiles
from jarpack.models.config import JarConfig
from jarpack.utils.shell import CommandResult, find_executable, run_command

if TYPE_CHECKING:
    from jarpack.layout.collector import FileCollector

logger = logging.getLogger(__name__)

JAR_TOOL = "jar"

_JAVA_IDENTIFIER = re.compile(r"[^\W\d][\w$]*|\$[\w$]*")

# Reserved words and literals which cannot be used as identifiers.
_JAVA_KEYWORDS = frozenset(
    """
    abstract assert boolean break byte case catch char class const continue
    default do double else enum extends final finally float for goto if
    implements import instanceof int interface long native new package
    private protected public return short static strictfp super switch
    synchronized this throw throws transient try void volatile while
    true false null _
    """.split()
)

Results = dict[str | None, dict[str, Path]]


class ToolNotFoundError(ArchiveError):
    """Raised when the ``jar`` tool cannot be found."""


def is_java_name(name: str) -> bool:
    """Whether a name is a syntactically valid qualified Java name, like ``org.example.app``."""
    return all(
        _JAVA_IDENTIFIER.fullmatch(part) is not None and part not in _JAVA_KEYWORDS
        for part in name.split(".")
    )


def locate_jar_tool() -> Path:
    """Find the ``jar`` tool in the PATH or in ``$JAVA_HOME/bin``.

    Raises:
        ToolNotFoundError: If the tool cannot be found.
    """
    tool = find_executable(JAR_TOOL, home_variable="JAVA_HOME")
    if tool is None:
        msg = "The 'jar' tool was not found in the PATH nor in $JAVA_HOME/bin"
        raise ToolNotFoundError(msg)
    return tool


class ToolExecutor:
    """Creates the JAR files described by a configuration.

    Args:
        config: The packaging configuration, with absolute paths.
        tool: Path to the ``jar`` tool. If None, it is searched when the
            first JAR file is written.

    Attributes:
        results: Paths of the created JAR files by module name (None for
            package hierarchy) and artifact type.

    Raises:
        ArchiveError: If the configured manifest file cannot be read.
    """

    def __init__(self, config: JarConfig, *, tool: Path | None = None) -> None:
        self.config = config
        self._tool = tool
        self.results: Results = {}
        self.manifest, self.manifest_file = self._configured_manifest()

    def _configured_manifest(self) -> tuple[Manifest | None, Path | None]:
        """Build the manifest from the configuration.

        Returns:
            The manifest, and the file it was read from if it is exactly
            the content of that file.
        """
        config = self.config
        manifest: Manifest | None = None
        if config.main_class:
            manifest = Manifest()
            manifest.set(MAIN_CLASS, config.main_class)
        file = config.manifest_file
        if file is not None:
            try:
                if manifest is not None:
                    with open(file, encoding="utf-8") as f:
                        manifest.read(f)
                    file = None  # The manifest is the result of a merge.
                else:
                    manifest = Manifest.from_file(file)
            except (OSError, ManifestFormatError) as e:
                msg = f"Cannot read the manifest file {config.manifest_file}: {e}"
                raise ArchiveError(msg) from e
        if manifest is not None:
            removed = []
            if config.detect_multi_release:
                # The jar tool sets this attribute itself when --release is used.
                removed.append(manifest.remove(MULTI_RELEASE))
            if not config.is_reproducible:
                removed.append(manifest.remove(CREATED_BY))
            if any(value is not None for value in removed):
                file = None  # No longer the content of the file.
        return manifest, file

    @property
    def tool(self) -> Path:
        """Path to the ``jar`` tool.

        Raises:
            ToolNotFoundError: If the tool cannot be found.
        """
        if self._tool is None:
            self._tool = locate_jar_tool()
        return self._tool

    def new_archive(self, module_name: str | None, directory: Path) -> Archive:
        """Create an initially empty archive for a module or for the package hierarchy.

        The JAR file is named ``<module>-<version>[-<classifier>].jar`` for
        a module and ``<final name>[-<classifier>].jar`` otherwise.
        """
        config = self.config
        name = f"{module_name}-{config.version}" if module_name else config.effective_final_name
        if config.classifier:
            name += f"-{config.classifier}"
        return Archive(
            config.output_directory / f"{name}.jar",
            module_name,
            directory,
            force_creation=config.force_creation,
        )

    def write_all(self, collector: "FileCollector") -> Results:
        """Write the JAR files of all archives of a pruned collector.

        Files belonging to no module are discarded with a warning.

        Returns:
            Paths of the created or kept JAR files.

        Raises:
            ArchiveError: If a JAR file cannot be created.
        """
        ignored = collector.handle_orphan_files()
        for archive in collector.archives():
            self.write_single(archive)
        if ignored is not None:
            logger.warning(
                'Some files in "%s" were ignored because they belong to no module.',
                relativize(self.config.base_directory, ignored),
            )
        return self.results

    def prepare_manifest(self, archive: Archive) -> tuple[Manifest | None, bool]:
        """Merge the configured manifest into an archive and take its main class.

        Returns:
            The effective manifest, and whether it must be written to a
            temporary file because no existing file has this content.

        Raises:
            ArchiveError: If a manifest cannot be read or declares an
                invalid ``Automatic-Module-Name``.
        """
        try:
            manifest = archive.merge_manifest(self.manifest_file, self.manifest)
        except (OSError, ManifestFormatError) as e:
            msg = f"Cannot read the manifest file {archive.manifest}: {e}"
            raise ArchiveError(msg) from e
        write_temporary_manifest = self.manifest is not None and self.manifest_file is None
        if manifest is not self.manifest:
            write_temporary_manifest |= self.manifest is not None
        elif manifest is not None:
            # Shared by all archives, while the main class applies to one module.
            manifest = manifest.copy()
        write_temporary_manifest |= archive.set_main_class(manifest)
        if manifest is not None:
            name = manifest.get(AUTOMATIC_MODULE_NAME)
            if name is not None and not is_java_name(name):
                msg = f'Invalid automatic module name: "{name}".'
                raise ArchiveError(msg)
        return manifest, write_temporary_manifest

    def create_arguments(self, archive: Archive) -> list[Argument]:
        """Return the arguments for creating the JAR file of an archive."""
        arguments: list[Argument] = ["--create"]
        if not self.config.compress:
            arguments.append("--no-compress")
        if self.config.output_timestamp is not None:
            arguments += ["--date", self.config.output_timestamp]
        return arguments + archive.arguments()

    def write_single(self, archive: Archive) -> None:
        """Write the JAR file of one archive, unless the existing file is up to date.

        Raises:
            ArchiveError: If the manifest is invalid or the ``jar`` tool fails.
        """
        config = self.config
        relative_path = relativize(config.base_directory, archive.jar_file)
        if archive.is_up_to_date():
            logger.info('Keep up-to-date JAR: "%s".', relative_path)
            archive.record_artifact_paths(config.type, self.results)
            return
        logger.info('Building JAR: "%s".', relative_path)

        manifest, write_temporary_manifest = self.prepare_manifest(archive)
        with MetadataFiles(config.output_directory) as metadata:
            if write_temporary_manifest and manifest is not None:
                archive.set_manifest(metadata.add_manifest(manifest), True)
            if config.add_metadata:
                archive.maven_files = metadata.add_pom_properties(
                    config.group_id,
                    archive.module_name or config.artifact_id or config.effective_final_name,
                    config.version,
                )
            arguments = self.create_arguments(archive)

            result = self._run(arguments, relative_path)
            if not result.success or logger.isEnabledFor(logging.DEBUG):
                debug_file = archive.write_debug_file(
                    config.base_directory, config.output_directory, config.classifier, arguments
                )
                metadata.cancel_file_deletion()
                if not result.success:
                    self._log_command_line_tip(debug_file)
                    error = result.stderr.strip() or "unspecified error."
                    msg = f'Cannot create the "{relative_path}" archive file: {error}'
                    raise ArchiveError(msg)

        validation = archive.validate_arguments()
        if validation:
            result = self._run(validation, relative_path)
            if not result.success:
                error = result.stderr.strip() or "unspecified error."
                msg = f'Invalid "{relative_path}" archive file: {error}'
                raise ArchiveError(msg)
        archive.record_artifact_paths(config.type, self.results)

    def _run(self, arguments: list[Argument], relative_path: Path) -> CommandResult:
        """Run the ``jar`` tool and log its output."""
        command = [str(self.tool), *(str(a) for a in arguments)]
        logger.debug("Running: %s", " ".join(command))
        try:
            result = run_command(command)
        except (OSError, subprocess.SubprocessError) as e:
            msg = f'Cannot create the "{relative_path}" archive file: {e}'
            raise ArchiveError(msg) from e
        if result.stdout.strip():
            logger.info("%s", result.stdout.strip())
        if result.stderr.strip():
            logger.error("%s", result.stderr.strip())
        return result

    def _log_command_line_tip(self, debug_file: Path) -> None:
        base_dir = self.config.base_directory
        lines = ["For trying to archive from the command-line, use:"]
        chdir = str(relativize(Path.cwd(), base_dir))
        if chdir not in ("", "."):
            lines.append(f"    {'chdir' if os.name == 'nt' else 'cd'} {chdir}")
        lines.append(f"    {self.tool.name} @{relativize(base_dir, debug_file)}")
        logger.info("\n".join(lines))
