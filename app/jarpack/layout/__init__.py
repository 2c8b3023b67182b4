"""Layout of a classes directory: directory roles, releases and tree walking.

The collector itself lives in :mod:`jarpack.layout.collector`, which
depends on the archive model.
"""

from jarpack.layout.release import ReleaseVersion
from jarpack.layout.roles import (
    META_INF,
    MODULE_DESCRIPTOR_FILE_NAME,
    ChildFacts,
    DirectoryRole,
    RoleAction,
    Transition,
    next_role,
)
from jarpack.layout.walker import FileAttributes, FileVisitor, VisitResult, walk_file_tree

__all__ = [
    "META_INF",
    "MODULE_DESCRIPTOR_FILE_NAME",
    "ChildFacts",
    "DirectoryRole",
    "FileAttributes",
    "FileVisitor",
    "ReleaseVersion",
    "RoleAction",
    "Transition",
    "VisitResult",
    "next_role",
    "walk_file_tree",
]
