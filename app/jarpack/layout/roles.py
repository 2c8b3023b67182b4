"""Roles of the directories met while walking a classes directory.

The role of a directory depends on the role of its parent and on a few
facts about the directory itself (its name, whether it contains a module
descriptor). The transitions are plain data so that the walker never
needs to know about the layout conventions.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

MODULE_DESCRIPTOR_FILE_NAME = "module-info.class"
META_INF = "META-INF"
MANIFEST = "MANIFEST.MF"
VERSIONS = "versions"
VERSIONS_MODULAR = "versions-modular"
MAVEN_DIR = "maven"


class DirectoryRole(str, Enum):
    """Role of a directory in the layout of compiled classes."""

    ROOT = "root"
    METADATA = "metadata"
    VERSIONED = "versioned"
    VERSIONED_MODULAR = "versioned-modular"
    MODULE_CONTAINER = "module-container"
    NAMED_MODULE = "named-module"
    RESOURCES = "resources"


class RoleAction(str, Enum):
    """Side effect to apply on the collector when entering a directory."""

    NONE = "none"
    ENTER_MODULE = "enter-module"
    ENTER_RELEASE = "enter-release"
    ENTER_MODULAR_RELEASE = "enter-modular-release"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class Transition:
    """Role given to a child directory, with the action to apply on entry."""

    role: DirectoryRole
    action: RoleAction = RoleAction.NONE


@dataclass(frozen=True, slots=True)
class ChildFacts:
    """What the classifier needs to know about a child directory.

    Attributes:
        name: File name of the directory.
        has_module_descriptor: Whether the directory holds ``module-info.class``.
        detect_multi_release: Whether multi-release detection is enabled.
    """

    name: str
    has_module_descriptor: bool = False
    detect_multi_release: bool = True


_RESOURCES = Transition(DirectoryRole.RESOURCES)
_METADATA = Transition(DirectoryRole.METADATA)

# Rules are tried in order for the role of the parent directory.
# A rule without predicate always applies.
_Rule = tuple[Callable[[ChildFacts], bool] | None, Transition]

TRANSITIONS: dict[DirectoryRole, tuple[_Rule, ...]] = {
    DirectoryRole.ROOT: (
        (lambda c: c.name == META_INF, _METADATA),
        (
            lambda c: c.has_module_descriptor,
            Transition(DirectoryRole.NAMED_MODULE, RoleAction.ENTER_MODULE),
        ),
        (None, _RESOURCES),
    ),
    DirectoryRole.METADATA: (
        (
            lambda c: c.detect_multi_release and c.name == VERSIONS,
            Transition(DirectoryRole.VERSIONED),
        ),
        (
            lambda c: c.name == VERSIONS_MODULAR and not c.detect_multi_release,
            Transition(DirectoryRole.VERSIONED_MODULAR, RoleAction.SKIP),
        ),
        (lambda c: c.name == VERSIONS_MODULAR, Transition(DirectoryRole.VERSIONED_MODULAR)),
        (None, _RESOURCES),
    ),
    DirectoryRole.VERSIONED: (
        (None, Transition(DirectoryRole.RESOURCES, RoleAction.ENTER_RELEASE)),
    ),
    DirectoryRole.VERSIONED_MODULAR: (
        (None, Transition(DirectoryRole.MODULE_CONTAINER, RoleAction.ENTER_MODULAR_RELEASE)),
    ),
    DirectoryRole.MODULE_CONTAINER: (
        (None, Transition(DirectoryRole.NAMED_MODULE, RoleAction.ENTER_MODULE)),
    ),
    DirectoryRole.NAMED_MODULE: (
        (lambda c: c.name == META_INF, _METADATA),
        (None, _RESOURCES),
    ),
    DirectoryRole.RESOURCES: ((None, _RESOURCES),),
}


def next_role(parent: DirectoryRole, child: ChildFacts) -> Transition:
    """Return the transition for a child directory of a directory with the given role.

    Args:
        parent: Role of the parent directory.
        child: Facts about the child directory.

    Returns:
        The role of the child and the action to apply when entering it.
    """
    for predicate, transition in TRANSITIONS[parent]:
        if predicate is None or predicate(child):
            return transition
    return _RESOURCES
