"""Depth-first walk of a file tree with visitor callbacks.

Entries of each directory are visited in sorted order so that walking
the same tree twice produces the same sequence of callbacks. Symbolic
links are not followed.
"""

import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class VisitResult(str, Enum):
    """What the walker should do after a callback."""

    CONTINUE = "continue"
    SKIP_SUBTREE = "skip-subtree"
    SKIP_SIBLINGS = "skip-siblings"
    TERMINATE = "terminate"


@dataclass(frozen=True, slots=True)
class FileAttributes:
    """Basic attributes of a visited file or directory.

    Attributes:
        mtime: Last modification time, in seconds since the epoch.
        is_file: Whether the path is a regular file.
        is_directory: Whether the path is a directory.
    """

    mtime: float
    is_file: bool
    is_directory: bool

    @classmethod
    def from_stat(cls, st: os.stat_result) -> "FileAttributes":
        return cls(
            mtime=st.st_mtime,
            is_file=stat.S_ISREG(st.st_mode),
            is_directory=stat.S_ISDIR(st.st_mode),
        )

    @classmethod
    def of(cls, path: Path) -> "FileAttributes":
        """Read the attributes of a path without following symbolic links.

        Raises:
            OSError: If the path cannot be accessed.
        """
        return cls.from_stat(path.lstat())


class FileVisitor:
    """Receives the callbacks of :func:`walk_file_tree`.

    The default implementation visits everything and re-raises the
    errors met while listing a directory.
    """

    def pre_visit_directory(self, directory: Path, attributes: FileAttributes) -> VisitResult:
        return VisitResult.CONTINUE

    def visit_file(self, file: Path, attributes: FileAttributes) -> VisitResult:
        return VisitResult.CONTINUE

    def post_visit_directory(self, directory: Path, error: OSError | None) -> VisitResult:
        if error is not None:
            raise error
        return VisitResult.CONTINUE


def _walk(path: Path, attributes: FileAttributes, visitor: FileVisitor) -> VisitResult:
    if not attributes.is_directory:
        return visitor.visit_file(path, attributes)

    result = visitor.pre_visit_directory(path, attributes)
    if result is not VisitResult.CONTINUE:
        # Skipping a subtree is not a reason to skip the siblings of that subtree.
        return VisitResult.CONTINUE if result is VisitResult.SKIP_SUBTREE else result

    error: OSError | None = None
    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        error = e
        entries = []

    for entry in entries:
        child = path / entry.name
        try:
            child_attributes = FileAttributes.from_stat(entry.stat(follow_symlinks=False))
        except OSError as e:
            error = e
            break
        result = _walk(child, child_attributes, visitor)
        if result is VisitResult.TERMINATE:
            return result
        if result is VisitResult.SKIP_SIBLINGS:
            break
    return visitor.post_visit_directory(path, error)


def walk_file_tree(start: Path, visitor: FileVisitor) -> VisitResult:
    """Walk a file tree depth-first, sending each file and directory to the visitor.

    When ``start`` is a regular file, only :meth:`FileVisitor.visit_file`
    is invoked. A :attr:`VisitResult.SKIP_SUBTREE` returned by
    :meth:`FileVisitor.pre_visit_directory` skips the directory without
    invoking :meth:`FileVisitor.post_visit_directory` for it.

    Args:
        start: File or directory where to start.
        visitor: Receiver of the callbacks.

    Returns:
        :attr:`VisitResult.TERMINATE` if the walk was stopped by the
        visitor, :attr:`VisitResult.CONTINUE` otherwise.

    Raises:
        OSError: If ``start`` cannot be accessed, or if re-raised by the visitor.
    """
    result = _walk(start, FileAttributes.of(start), visitor)
    return VisitResult.TERMINATE if result is VisitResult.TERMINATE else VisitResult.CONTINUE
