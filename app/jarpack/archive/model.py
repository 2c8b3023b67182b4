"""In-memory model of the JAR files to create.

One :class:`Archive` exists for each module of a project using module
hierarchy, or a single one for a project using package hierarchy. Each
archive holds one :class:`FileSet` for the base release and one more
for each target release of a multi-release JAR file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from jarpack.archive.arguments import Argument, file_set_arguments, format_debug_arguments
from jarpack.archive.manifest import MAIN_CLASS, Manifest
from jarpack.archive.timestamp import TimestampCheck
from jarpack.layout.release import ReleaseVersion
from jarpack.layout.roles import MODULE_DESCRIPTOR_FILE_NAME

logger = logging.getLogger(__name__)


class ArchiveError(Exception):
    """Raised when an archive cannot be created."""


class FileSet:
    """Files or directories to archive for one target release of one archive.

    Attributes:
        directory: Root directory of the files, given to the ``-C`` option.
        release: Target release, or None for the base release.
        files: Absolute paths of the files or directories to archive.
    """

    def __init__(self, directory: Path, release: ReleaseVersion | None = None) -> None:
        self.directory = directory
        self.release = release
        self.files: list[Path] = []

    @property
    def is_empty(self) -> bool:
        return not self.files

    def add(self, path: Path) -> None:
        """Add a file or a directory to archive."""
        self.files.append(path)

    def discard_all_files(self, base: Path | None = None) -> Path | None:
        """Discard all files, returning their common parent directory.

        Args:
            base: Common directory found for other file sets, or None.

        Returns:
            The common directory of ``base`` and of the discarded files.
        """
        for file in self.files:
            if base is None:
                base = file.parent
                continue
            while not file.is_relative_to(base):
                if base.parent == base:
                    break
                base = base.parent
        self.files.clear()
        return base

    def __repr__(self) -> str:
        return f"FileSet[{self.directory.name}: {len(self.files)} files]"


def _sort_key(file_set: FileSet) -> tuple:
    # Base release first, then ascending releases, then shallower directories.
    if file_set.release is None:
        return (0, len(file_set.directory.parts))
    return (1, file_set.release, len(file_set.directory.parts))


class Archive:
    """Files to store in a single JAR file, for all target releases.

    Args:
        jar_file: The JAR file to create. If it already exists, it may be
            kept when found up to date.
        module_name: Module name when using module hierarchy, or None for
            package hierarchy.
        directory: Directory of the classes for the base release.
        force_creation: Whether to always create a new JAR file.

    Attributes:
        manifest: Manifest file given to the ``--manifest`` option, or None.
        main_class: Value of the ``--main-class`` option, or None.
        maven_files: Directory of the generated build metadata followed by
            the metadata files relative to it, or None.
    """

    def __init__(
        self,
        jar_file: Path,
        module_name: str | None,
        directory: Path,
        *,
        force_creation: bool = False,
    ) -> None:
        self.jar_file = jar_file
        self.module_name = module_name
        self.manifest: Path | None = None
        self.main_class: str | None = None
        self.maven_files: list[Path] | None = None
        self._file_sets: dict[ReleaseVersion | None, FileSet] = {None: FileSet(directory)}
        self._existing_jar: TimestampCheck | None = None
        if not force_creation and jar_file.is_file():
            try:
                self._existing_jar = TimestampCheck(jar_file, directory)
            except OSError as e:
                logger.warning("Cannot read the timestamp of %s: %s", jar_file, e)

    def file_sets(self) -> list[FileSet]:
        """Return the file sets sorted by release, base release first."""
        return sorted(self._file_sets.values(), key=_sort_key)

    def base_release(self) -> FileSet:
        """Return the file set of the base release.

        Raises:
            ArchiveError: If all files have been discarded.
        """
        file_sets = self.file_sets()
        if not file_sets:
            msg = f"No file set left in {self}"
            raise ArchiveError(msg)
        return file_sets[0]

    def new_target_release(self, directory: Path, release: ReleaseVersion | None) -> FileSet:
        """Return the file set for a target release, creating it if needed.

        Args:
            directory: Base directory of the files to archive for that release.
            release: The target release, or None for the base release.
        """
        file_set = self._file_sets.get(release)
        if file_set is None:
            file_set = self._file_sets[release] = FileSet(directory, release)
        return file_set

    def add_file(self, file_set: FileSet, path: Path, mtime: float, is_directory: bool) -> None:
        """Add a file or directory to a file set of this archive.

        The modification time is compared with the one of the existing
        JAR file, if any.
        """
        check = self._existing_jar
        if check is not None and check.is_updated(path, mtime, is_directory):
            self._existing_jar = None
        file_set.add(path)

    def module_info_files(self) -> list[Path]:
        """Return the ``module-info.class`` files that exist, for all releases."""
        files = []
        for file_set in self.file_sets():
            file = file_set.directory / MODULE_DESCRIPTOR_FILE_NAME
            if file.is_file():
                files.append(file)
        return files

    def set_main_class(self, content: Manifest | None) -> bool:
        """Take the main class from the ``Main-Class`` attribute of a manifest.

        The attribute is removed from the manifest because it would
        conflict with the ``--main-class`` option. A value of the form
        ``module/class`` applies only to the archive of that module.
        Only the first successful call has an effect.

        Args:
            content: The effective manifest, or None.

        Returns:
            Whether the manifest has been modified.
        """
        if content is None or self.main_class is not None:
            return False
        main_class = content.remove(MAIN_CLASS)
        if main_class is not None:
            module, sep, name = main_class.partition("/")
            if sep:
                main_class = name.strip() if module.strip() == self.module_name else None
        self.main_class = main_class
        return main_class is not None

    def set_manifest(self, path: Path, force: bool = False) -> bool:
        """Set the manifest file unless one is already set.

        Returns:
            Whether the manifest has been set.
        """
        if self.manifest is None or force:
            self.manifest = path
            return True
        return False

    def merge_manifest(self, file: Path | None, content: Manifest | None) -> Manifest | None:
        """Merge a configured manifest with the manifest found in the classes.

        ``content`` is never modified. When a merge happens, a new object is
        returned, so callers detect a merge by an identity change. The
        manifest found in the classes has precedence.

        Args:
            file: The configured manifest file, or None.
            content: The content of ``file``, or a manifest built from the
                configuration, or None.

        Returns:
            The effective manifest, or None if there is none.

        Raises:
            OSError: If the manifest found in the classes cannot be read.
        """
        if self.manifest is None:
            self.manifest = file
        elif file is not None and _is_same_file(file, self.manifest):
            pass
        elif content is not None:
            content = content.copy()
            with open(self.manifest, encoding="utf-8") as f:
                content.read(f)
        else:
            content = Manifest.from_file(self.manifest)
        return content

    def prune(self, skip_if_empty: bool) -> None:
        """Remove the empty file sets and make the lowest release the base one.

        Unless ``skip_if_empty`` is set, one possibly empty file set is kept.
        """
        keep = None if skip_if_empty or self.is_empty else self.base_release()
        self._file_sets = {r: fs for r, fs in self._file_sets.items() if not fs.is_empty}
        if self._file_sets:
            first = self.file_sets()[0]
            if first.release is None:
                return
            keep = self._file_sets.pop(first.release)
        if keep is not None:
            keep.release = None
            self._file_sets[None] = keep

    @property
    def is_empty(self) -> bool:
        """Whether there is nothing to archive, after :meth:`prune`."""
        return not self._file_sets

    def discard_all_files(self) -> Path | None:
        """Discard all files, returning their common directory or None if none."""
        base = None
        for file_set in self.file_sets():
            base = file_set.discard_all_files(base)
        self._file_sets.clear()
        return base

    def is_up_to_date(self) -> bool:
        """Whether the existing JAR file can be kept.

        Only the first call can return True.
        """
        check = self._existing_jar
        if check is None:
            return False
        self._existing_jar = None
        return check.is_up_to_date(self.file_sets())

    def arguments(self) -> list[Argument]:
        """Return the ``jar`` tool arguments for this archive.

        The operation mode and global options such as ``--create`` or
        ``--date`` must be added by the caller before these arguments.
        """
        arguments: list[Argument] = ["--file", self.jar_file]
        if self.manifest is not None:
            arguments += ["--manifest", self.manifest]
        if self.main_class is not None:
            arguments += ["--main-class", self.main_class]
        if self.maven_files:
            arguments += ["-C", *self.maven_files]
        for file_set in self.file_sets():
            arguments += file_set_arguments(file_set)
        return arguments

    def validate_arguments(self) -> list[Argument]:
        """Return the arguments for validating the JAR file, or an empty list.

        Validation is implicit when a ``--release`` option is used, so
        it is requested only for archives with the base release alone.
        """
        if any(release is not None for release in self._file_sets):
            return []
        return ["--validate", "--file", self.jar_file]

    def write_debug_file(
        self,
        base_dir: Path | None,
        debug_directory: Path,
        classifier: str | None,
        arguments: list[Argument],
    ) -> Path:
        """Write the tool arguments in a file usable with ``jar @file``.

        Args:
            base_dir: Directory against which to relativize paths.
            debug_directory: Directory where to write the file.
            classifier: Classifier of the JAR file, or None.
            arguments: The arguments given to the tool.

        Returns:
            Path to the debug file.

        Raises:
            OSError: If the file cannot be written.
        """
        name = "jar"
        if self.module_name is not None:
            name += f"-{self.module_name}"
        if classifier:
            name += f"-{classifier}"
        debug_file = debug_directory / f"{name}.args"
        debug_directory.mkdir(parents=True, exist_ok=True)
        debug_file.write_text(format_debug_arguments(arguments, base_dir), encoding="utf-8")
        return debug_file

    def record_artifact_paths(
        self, artifact_type: str, results: dict[str | None, dict[str, Path]]
    ) -> None:
        """Record the path of the created JAR file.

        Raises:
            ArchiveError: If this module was already recorded.
        """
        if self.module_name in results:
            msg = f"Module archived twice: {self.module_name}"
            raise ArchiveError(msg)
        results[self.module_name] = {artifact_type: self.jar_file}

    def __repr__(self) -> str:
        count = sum(len(fs.files) for fs in self._file_sets.values())
        name = f'"{self.module_name}": ' if self.module_name is not None else ""
        return f"Archive[{name}{count} files]"


def _is_same_file(a: Path, b: Path) -> bool:
    if a == b:
        return True
    try:
        return a.samefile(b)
    except OSError:
        return False
