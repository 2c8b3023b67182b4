"""Checks whether an existing JAR file can be reused without rebuilding it.

An existing JAR file is up to date when no file to archive is newer than
the JAR file, every file to archive has an entry in the JAR file, and the
JAR file has no other entry except the ignored ones. The entries of the
JAR file are read only as far as needed.
"""

import logging
import zipfile
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from jarpack.layout.roles import MANIFEST, MAVEN_DIR, META_INF
from jarpack.layout.walker import FileAttributes, FileVisitor, VisitResult, walk_file_tree

if TYPE_CHECKING:
    from jarpack.archive.model import FileSet

logger = logging.getLogger(__name__)


def is_ignored(entry: PurePosixPath) -> bool:
    """Whether an entry of the JAR file is ignored by the check.

    The manifest and the build metadata under ``META-INF/maven/`` are
    generated in a temporary directory and do not exist when the classes
    directory is walked.

    Args:
        entry: Path of the entry relative to the root of the JAR file.
    """
    parts = entry.parts
    if not parts or parts[0] != META_INF:
        return False
    if len(parts) == 2 and parts[1] == MANIFEST:
        return True
    return len(parts) > 1 and parts[1] == MAVEN_DIR


class TimestampCheck(FileVisitor):
    """Compares an existing JAR file with the files collected for it.

    The file visitor callbacks are used for walking the directories that
    were added as a whole to a file set.

    Args:
        jar_file: The existing JAR file.
        classes_dir: Base directory of the archived files.

    Raises:
        OSError: If the modification time of the JAR file cannot be read.
    """

    def __init__(self, jar_file: Path, classes_dir: Path) -> None:
        self.jar_file = jar_file
        self.classes_dir = classes_dir
        self.jar_mtime = jar_file.stat().st_mtime
        # Entries read from the JAR file but not yet matched with a build file.
        self._files_in_jar: set[Path] = set()
        # Build files whose timestamp was checked during the collection.
        self._files_in_build: set[Path] = set()
        self._entries: Iterator[zipfile.ZipInfo] = iter(())
        self._has_updates = False

    def is_updated(self, path: Path, mtime: float, is_directory: bool) -> bool:
        """Whether the given file is more recent than the JAR file.

        Files which are not more recent are remembered for checking later
        that they exist in the JAR file.
        """
        if self.jar_mtime < mtime:
            return True
        if not is_directory:
            self._files_in_build.add(path)
        return False

    def is_up_to_date(self, file_sets: Iterable["FileSet"]) -> bool:
        """Whether the JAR file contains exactly the given files, none newer than the JAR.

        Errors while reading the JAR file or walking the directories are
        logged and reported as "not up to date".

        Args:
            file_sets: The file sets collected for the archive.
        """
        try:
            with zipfile.ZipFile(self.jar_file) as jar:
                self._entries = iter(jar.infolist())
                return self._check(file_sets)
        except (OSError, zipfile.BadZipFile) as e:
            logger.warning("Cannot check whether %s is up to date: %s", self.jar_file, e)
            return False
        finally:
            self._entries = iter(())

    def _check(self, file_sets: Iterable["FileSet"]) -> bool:
        for file in self._files_in_build:
            if not self._is_found_in_jar(file):
                return False
        for file_set in file_sets:
            for file in file_set.files:
                if file in self._files_in_build:
                    continue
                walk_file_tree(file, self)
                if self._has_updates:
                    return False

        for file in self._files_in_jar:
            if not is_ignored(PurePosixPath(file.relative_to(self.classes_dir).as_posix())):
                return False
        for entry in self._entries:
            if not (entry.is_dir() or is_ignored(PurePosixPath(entry.filename))):
                return False
        return True

    def visit_file(self, file: Path, attributes: FileAttributes) -> VisitResult:
        if attributes.mtime <= self.jar_mtime and self._is_found_in_jar(file):
            return VisitResult.CONTINUE
        self._has_updates = True
        return VisitResult.TERMINATE

    def _is_found_in_jar(self, file: Path) -> bool:
        if file in self._files_in_jar:
            self._files_in_jar.remove(file)
            return True
        for entry in self._entries:
            if not entry.is_dir():
                path = self.classes_dir / entry.filename
                if path == file:
                    return True
                self._files_in_jar.add(path)
        return False
