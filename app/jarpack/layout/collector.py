"""Collection of the files to archive from a classes directory.

The collector walks the directory tree once, classifies each directory
with :func:`jarpack.layout.roles.next_role` and routes each accepted file
to the file set of the right archive and target release. Three layouts
are recognized::

    classes/org/...                              package hierarchy
    classes/META-INF/versions/17/org/...         multi-release JAR
    classes/my.module/module-info.class          module hierarchy
    classes/META-INF/versions-modular/17/my.module/...
"""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from jarpack.archive.arguments import relativize
from jarpack.archive.model import Archive, FileSet
from jarpack.layout.release import ReleaseVersion
from jarpack.layout.roles import (
    MANIFEST,
    MODULE_DESCRIPTOR_FILE_NAME,
    ChildFacts,
    DirectoryRole,
    RoleAction,
    next_role,
)
from jarpack.layout.walker import FileAttributes, FileVisitor, VisitResult, walk_file_tree
from jarpack.patterns.selector import INCLUDES_ALL, PathSelector, directory_matcher

logger = logging.getLogger(__name__)

ArchiveFactory = Callable[[str | None, Path], Archive]

_RELEASE_ROLES = (DirectoryRole.VERSIONED, DirectoryRole.VERSIONED_MODULAR)


def _default_factory(module_name: str | None, directory: Path) -> Archive:
    name = module_name or directory.name
    return Archive(directory.parent / f"{name}.jar", module_name, directory)


class FileCollector(FileVisitor):
    """Walks a classes directory and builds the archives to create.

    Args:
        directory: The classes directory.
        includes: Patterns of files to include, None for all files.
        excludes: Patterns of files to exclude, None for none.
        detect_multi_release: Whether ``META-INF/versions`` holds classes
            for other target releases.
        archive_factory: Creates the archive of a module, or of the package
            hierarchy when the module name is None.

    Raises:
        PatternSyntaxError: If a pattern cannot be compiled.
    """

    def __init__(
        self,
        directory: Path,
        *,
        includes: Iterable[str | None] | None = None,
        excludes: Iterable[str | None] | None = None,
        detect_multi_release: bool = True,
        archive_factory: ArchiveFactory | None = None,
    ) -> None:
        self.directory = directory
        self.detect_multi_release = detect_multi_release
        self._factory = archive_factory or _default_factory
        self.file_matcher = PathSelector.of(directory, includes, excludes)
        self.directory_matcher = directory_matcher(self.file_matcher)
        self.accepts_all_files = (
            self.file_matcher is INCLUDES_ALL and self.directory_matcher is INCLUDES_ALL
        )
        logger.debug("Selecting files in %s with %s", directory, self.file_matcher)

        self.package_hierarchy = self._factory(None, directory)
        self.module_hierarchy: dict[str, Archive] = {}
        self._roles: list[DirectoryRole] = []
        self._target_release: ReleaseVersion | None = None
        self._check_for_manifest = False
        self._reset_to_package_hierarchy()

    def _reset_to_package_hierarchy(self) -> None:
        self._current_archive = self.package_hierarchy
        self._current_files: FileSet = self._current_archive.base_release()

    def _enter_module(self, directory: Path) -> None:
        name = directory.name
        archive = self.module_hierarchy.get(name)
        if archive is None:
            # Base directory of the module, even if first met under versions-modular.
            archive = self.module_hierarchy[name] = self._factory(name, self.directory / name)
        self._current_archive = archive
        self._current_files = archive.new_target_release(directory, self._target_release)

    def _enter_release(self, directory: Path, use_directly: bool) -> bool:
        """Parse the target release from the directory name.

        Returns:
            Whether the directory must be skipped.
        """
        try:
            self._target_release = ReleaseVersion.parse(directory.name)
        except ValueError as e:
            logger.warning(
                'The "%s" directory cannot be parsed as a version number.\nCaused by: %s',
                relativize(self.directory, directory),
                e,
            )
            return True
        if use_directly:
            self._current_files = self._current_archive.new_target_release(
                directory, self._target_release
            )
        return False

    def _leave_release(self) -> None:
        self._current_files = self._current_archive.base_release()
        self._target_release = None

    def collect(self) -> dict[str | None, Archive]:
        """Walk the classes directory and collect the files to archive.

        Returns:
            The module archives by module name, and the package hierarchy
            archive under the None key. A missing classes directory gives
            an empty package hierarchy archive.

        Raises:
            OSError: If a directory cannot be read.
        """
        if self.directory.is_dir():
            walk_file_tree(self.directory, self)
        else:
            logger.debug("No classes directory at %s", self.directory)
        return {**self.module_hierarchy, None: self.package_hierarchy}

    def pre_visit_directory(self, directory: Path, attributes: FileAttributes) -> VisitResult:
        if not self._roles:
            role = DirectoryRole.ROOT
        else:
            if not self.directory_matcher(directory):
                return VisitResult.SKIP_SUBTREE
            parent = self._roles[-1]
            facts = ChildFacts(
                name=directory.name,
                has_module_descriptor=(
                    parent is DirectoryRole.ROOT
                    and (directory / MODULE_DESCRIPTOR_FILE_NAME).is_file()
                ),
                detect_multi_release=self.detect_multi_release,
            )
            transition = next_role(parent, facts)
            role = transition.role
            match transition.action:
                case RoleAction.SKIP:
                    return VisitResult.SKIP_SUBTREE
                case RoleAction.ENTER_MODULE:
                    self._enter_module(directory)
                case RoleAction.ENTER_RELEASE:
                    if self._enter_release(directory, use_directly=True):
                        return VisitResult.SKIP_SUBTREE
                case RoleAction.ENTER_MODULAR_RELEASE:
                    # No module in particular yet.
                    self._reset_to_package_hierarchy()
                    if self._enter_release(directory, use_directly=False):
                        return VisitResult.SKIP_SUBTREE

        if self.accepts_all_files and role is DirectoryRole.RESOURCES:
            self._current_archive.add_file(self._current_files, directory, attributes.mtime, True)
            if self._roles[-1] in _RELEASE_ROLES:
                self._leave_release()
            return VisitResult.SKIP_SUBTREE
        self._check_for_manifest = role is DirectoryRole.METADATA
        self._roles.append(role)
        return VisitResult.CONTINUE

    def post_visit_directory(self, directory: Path, error: OSError | None) -> VisitResult:
        if error is not None:
            raise error
        role = self._roles.pop()
        if role is DirectoryRole.NAMED_MODULE:
            self._reset_to_package_hierarchy()
        elif role is not DirectoryRole.ROOT:
            parent = self._roles[-1]
            if parent in _RELEASE_ROLES:
                self._leave_release()
            elif parent is DirectoryRole.METADATA:
                self._check_for_manifest = True
            else:
                self._check_for_manifest = False
        return VisitResult.CONTINUE

    def visit_file(self, file: Path, attributes: FileAttributes) -> VisitResult:
        if not self.file_matcher(file):
            return VisitResult.CONTINUE
        if (
            self._check_for_manifest
            and file.name == MANIFEST
            and self._current_archive.set_manifest(file, False)
        ):
            return VisitResult.CONTINUE  # Given to the --manifest option instead.
        self._current_archive.add_file(self._current_files, file, attributes.mtime, False)
        return VisitResult.CONTINUE

    def prune(self, skip_if_empty: bool) -> None:
        """Remove empty file sets and empty module archives.

        The package hierarchy archive is always pruned as if
        ``skip_if_empty`` was set when modules were found.
        """
        is_module_hierarchy = bool(self.module_hierarchy)
        for archive in self.module_hierarchy.values():
            archive.prune(skip_if_empty)
        self.module_hierarchy = {
            name: archive for name, archive in self.module_hierarchy.items() if not archive.is_empty
        }
        self.package_hierarchy.prune(is_module_hierarchy or skip_if_empty)

    def handle_orphan_files(self) -> Path | None:
        """Discard the files which belong to no module.

        Returns:
            The common directory of the discarded files, or None if the
            layout has no orphan file.
        """
        if not self.module_hierarchy or self.package_hierarchy.is_empty:
            return None
        return self.package_hierarchy.discard_all_files()

    def module_hierarchy_roots(self) -> list[Path]:
        """Return the root directory of each module, for the base release."""
        return [archive.base_release().directory for archive in self.module_hierarchy.values()]

    def archives(self) -> list[Archive]:
        """Return the archives to write, modules first, omitting empty ones."""
        archives = list(self.module_hierarchy.values())
        if not self.package_hierarchy.is_empty:
            archives.append(self.package_hierarchy)
        return archives
