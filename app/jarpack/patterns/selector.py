"""Include/exclude path selection for the files to archive.

User patterns come in two forms. A pattern with an explicit syntax
prefix (``glob:`` or ``regex:``) is used verbatim. A bare pattern such as
``**/*.class`` is upgraded to the ``glob:`` syntax with ``/`` separators,
and every ``**/`` is rewritten as ``{**/,}`` so that one compiled glob
matches both with and without the leading directories. For example
``**/*.class`` accepts ``Foo.class`` as well as ``org/Foo.class``.

Excludes that can never match a file accepted by the includes are
dropped before compilation. The test is a best-effort comparison of the
literal prefixes and suffixes of the patterns: an exclude is kept in
case of doubt.
"""

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import PurePath

from jarpack.patterns.glob import CompiledPattern, compile_pattern, path_string

logger = logging.getLogger(__name__)

Matcher = Callable[[PurePath | str], bool]

DEFAULT_SYNTAX = "glob:"

# Maximum index of ':' for a pattern to still be considered bare (e.g. "C:").
_SYNTAX_THRESHOLD = 1

# Characters having a special meaning in the glob syntax.
SPECIAL_CHARACTERS = "*?[]{}\\"

_ANY_DEPTH = "{**/,}"
_ANY_DEPTH_PREFIXES = (DEFAULT_SYNTAX + _ANY_DEPTH, DEFAULT_SYNTAX + "**/")
_MATCH_ALL = DEFAULT_SYNTAX + "**"


class _IncludesAll:
    """Matcher accepting every path."""

    def __call__(self, path: PurePath | str) -> bool:
        return True

    def __repr__(self) -> str:
        return "INCLUDES_ALL"


INCLUDES_ALL: Matcher = _IncludesAll()


def _is_bare(pattern: str) -> bool:
    return pattern.find(":") <= _SYNTAX_THRESHOLD


def _normalize_one(pattern: str) -> str:
    """Convert a bare pattern to the ``glob:`` syntax."""
    if os.sep != "/":
        pattern = pattern.replace(os.sep, "/")
    if pattern.endswith("/"):
        pattern += "**"
    # Valid only because "**" means "0 or more directories".
    while pattern.endswith("/**/**"):
        pattern = pattern[:-3]
    while pattern.startswith("**/**/"):
        pattern = pattern[3:]
    while "/**/**/" in pattern:
        pattern = pattern.replace("/**/**/", "/**/")
    if pattern == "**/**":
        pattern = "**"
    if pattern == "**":
        return _MATCH_ALL

    # Braces from the user are literals, only ours take part in the expansion.
    pattern = (
        pattern.replace("\\", "\\\\")
        .replace("[", "\\[")
        .replace("]", "\\]")
        .replace("{", "\\{")
        .replace("}", "\\}")
    )
    pattern = pattern.replace("**/", _ANY_DEPTH)
    return DEFAULT_SYNTAX + pattern


def _simplify(patterns: dict[str, None], excludes: bool) -> tuple[str, ...]:
    """Apply the "``**`` makes every other pattern useless" rule."""
    if _MATCH_ALL in patterns:
        # For includes, an empty tuple means "include everything".
        return (_MATCH_ALL,) if excludes else ()
    return tuple(patterns)


def normalize_patterns(patterns: Iterable[str | None] | None, excludes: bool) -> tuple[str, ...]:
    """Normalize user patterns, dropping empty and duplicated ones.

    Args:
        patterns: Raw user patterns, possibly None or containing None.
        excludes: Whether the patterns are exclude patterns.

    Returns:
        Patterns prefixed by their syntax, in first-seen order.
    """
    normalized: dict[str, None] = {}
    for pattern in patterns or ():
        if not pattern:
            continue
        normalized[_normalize_one(pattern) if _is_bare(pattern) else pattern] = None
    return _simplify(normalized, excludes)


def prefix_or_suffix(pattern: str, suffix: bool) -> str:
    """Return the literal characters at the start or end of a glob.

    The prefix or suffix stops at the first special character.
    """
    if suffix:
        s = max(pattern.rfind(c) for c in SPECIAL_CHARACTERS)
        return pattern[s + 1 :]
    positions = [p for p in (pattern.find(c) for c in SPECIAL_CHARACTERS) if p >= 0]
    return pattern[: min(positions)] if positions else pattern


def _sort_by_length(fragments: list[str], suffix: bool) -> list[str]:
    """Sort fragments shortest first and drop the redundant ones.

    A fragment is redundant when a shorter fragment is its prefix (or
    suffix). The empty string, if present, ends up alone.
    """
    kept: list[str] = []
    for fragment in sorted(fragments, key=len):
        if any(fragment.endswith(b) if suffix else fragment.startswith(b) for b in kept):
            continue
        kept.append(fragment)
    return kept


def _cannot_match(exclude: str, fragments: list[str], suffix: bool) -> bool:
    """Whether ``exclude`` certainly cannot match any include fragment.

    Returns False in case of doubt.
    """
    exclude = prefix_or_suffix(exclude, suffix)
    for fragment in fragments:
        length = min(len(fragment), len(exclude))
        if suffix:
            if exclude[len(exclude) - length :] == fragment[len(fragment) - length :]:
                return False
        elif exclude[:length] == fragment[:length]:
            return False
    return True


def effective_excludes(excludes: tuple[str, ...], includes: tuple[str, ...]) -> tuple[str, ...]:
    """Omit the excludes which cannot match any file accepted by the includes.

    For example if the only include is ``*.java``, then ``**/package.html``
    will never match and can be dropped.

    Args:
        excludes: Normalized exclude patterns.
        includes: Normalized include patterns.

    Returns:
        The excludes to keep, in their original order.
    """
    if not excludes or not includes:
        return excludes
    prefixes: list[str] = []
    suffixes: list[str] = []
    for include in includes:
        if not include.startswith(DEFAULT_SYNTAX):
            return excludes  # Too complicated to analyze.
        body = include[len(DEFAULT_SYNTAX) :]
        prefixes.append(prefix_or_suffix(body, False))
        suffixes.append(prefix_or_suffix(body, True))
    prefixes = _sort_by_length(prefixes, False)
    suffixes = _sort_by_length(suffixes, True)

    kept: list[str] = []
    for exclude in excludes:
        if exclude.startswith(DEFAULT_SYNTAX):
            body = exclude[len(DEFAULT_SYNTAX) :]
            if _cannot_match(body, prefixes, False) or _cannot_match(body, suffixes, True):
                logger.debug("Omitting exclude %s which cannot match any include", exclude)
                continue
        kept.append(exclude)
    return tuple(kept)


def _has_special(segment: str) -> bool:
    return any(c in segment for c in SPECIAL_CHARACTERS)


def directory_patterns(patterns: tuple[str, ...], excludes: bool) -> tuple[str, ...]:
    """Derive the patterns of directories worth descending into.

    For includes, the result accepts every ancestor of the literal
    directory prefix of each pattern, since a directory can only be
    reached through its parents, plus everything below that prefix when
    the rest of the pattern may descend further. An empty tuple means
    that all directories must be visited.

    For excludes, the result rejects the directories whose whole content
    is excluded. Parents are not included, because they may contain other
    sub-trees that need to be included.
    """
    directories: dict[str, None] = {}
    if excludes:
        if patterns == (_MATCH_ALL,):
            return patterns
        for pattern in patterns:
            if pattern.startswith(DEFAULT_SYNTAX) and pattern.endswith("/**"):
                directories[pattern[:-3]] = None
        return tuple(directories)

    for pattern in patterns:
        if not pattern.startswith(DEFAULT_SYNTAX):
            return ()
        body = pattern[len(DEFAULT_SYNTAX) :].replace(_ANY_DEPTH, "**/")
        segments = body.split("/")
        parents = segments[:-1]
        literal: list[str] = []
        for segment in parents:
            if _has_special(segment):
                break
            literal.append(segment)
        if not literal:
            return ()  # Files may be anywhere.
        for depth in range(1, len(literal) + 1):
            directories[DEFAULT_SYNTAX + "/".join(literal[:depth])] = None
        if len(literal) < len(parents) or "**" in segments[-1]:
            directories[DEFAULT_SYNTAX + "/".join(literal) + "/**"] = None
    return tuple(directories)


def _needs_relativize(pattern: str) -> bool:
    """Whether matching ``pattern`` on an absolute path could differ from a relative one.

    A pattern made of an any-depth prefix followed by a single file name
    pattern matches the last path segment only, whatever the parents.
    """
    for prefix in _ANY_DEPTH_PREFIXES:
        if pattern.startswith(prefix):
            rest = pattern[len(prefix) :]
            return "/" in rest or "**" in rest
    return True


def _compile_all(patterns: tuple[str, ...]) -> tuple[CompiledPattern, ...]:
    return tuple(compile_pattern(p) for p in patterns)


def _is_matched(path: PurePath | str, matchers: tuple[CompiledPattern, ...]) -> bool:
    return any(matcher(path) for matcher in matchers)


class PathSelector:
    """Combination of include and exclude patterns applied to files.

    Instances should be obtained with :meth:`of`, which may return a
    simpler equivalent matcher.

    Args:
        directory: Base directory of the files to filter.
        includes: Patterns of files to include, None or empty for all files.
        excludes: Patterns of files to exclude, None or empty for none.

    Raises:
        PatternSyntaxError: If a pattern cannot be compiled.
    """

    def __init__(
        self,
        directory: PurePath,
        includes: Iterable[str | None] | None = None,
        excludes: Iterable[str | None] | None = None,
    ) -> None:
        if directory is None:
            msg = "directory cannot be None"
            raise TypeError(msg)
        self.base_directory = PurePath(directory)
        self.include_patterns = normalize_patterns(includes, excludes=False)
        self.exclude_patterns = effective_excludes(
            normalize_patterns(excludes, excludes=True), self.include_patterns
        )
        self._includes = _compile_all(self.include_patterns)
        self._excludes = _compile_all(self.exclude_patterns)
        self._dir_includes = _compile_all(directory_patterns(self.include_patterns, False))
        self._dir_excludes = _compile_all(directory_patterns(self.exclude_patterns, True))
        self.needs_relativize = any(
            _needs_relativize(p) for p in (*self.include_patterns, *self.exclude_patterns)
        )

    @classmethod
    def of(
        cls,
        directory: PurePath,
        includes: Iterable[str | None] | None = None,
        excludes: Iterable[str | None] | None = None,
    ) -> Matcher:
        """Create a matcher for the given includes and excludes.

        Returns:
            A :class:`PathSelector`, or a simpler equivalent matcher.
        """
        return cls(directory, includes, excludes).simplify()

    def simplify(self) -> Matcher:
        """Return a potentially simpler matcher equivalent to this one."""
        if not self.needs_relativize and not self._excludes:
            if not self._includes:
                return INCLUDES_ALL
            if len(self._includes) == 1:
                return self._includes[0]
        return self

    def _relativize(self, path: PurePath | str) -> PurePath | str:
        path = PurePath(path)
        if not path.is_absolute():
            return path
        try:
            return path.relative_to(self.base_directory)
        except ValueError:
            return path

    def matches(self, path: PurePath | str) -> bool:
        """Whether the path matches an include pattern and no exclude pattern."""
        if self.needs_relativize:
            path = self._relativize(path)
        return (not self._includes or _is_matched(path, self._includes)) and (
            not self._excludes or not _is_matched(path, self._excludes)
        )

    __call__ = matches

    def can_filter_directories(self) -> bool:
        """Whether :meth:`could_hold_selected` may return False for some directories."""
        return bool(self._dir_includes or self._dir_excludes)

    def could_hold_selected(self, directory: PurePath | str) -> bool:
        """Whether the directory might contain selected files.

        Returns:
            False only if the directory certainly holds no selected file.
        """
        if PurePath(directory) == self.base_directory:
            return True
        relative = self._relativize(directory)
        if not path_string(relative):
            return True
        return (not self._dir_includes or _is_matched(relative, self._dir_includes)) and (
            not self._dir_excludes or not _is_matched(relative, self._dir_excludes)
        )

    def __str__(self) -> str:
        return (
            f"includes: [{', '.join(self.include_patterns)}], "
            f"excludes: [{', '.join(self.exclude_patterns)}]"
        )

    def __repr__(self) -> str:
        return f"PathSelector({self})"


def simplify(matcher: Matcher) -> Matcher:
    """Simplify a matcher if it is a :class:`PathSelector`, else return it unchanged."""
    if isinstance(matcher, PathSelector):
        return matcher.simplify()
    return matcher


def directory_matcher(matcher: Matcher) -> Matcher:
    """Return the matcher to apply on directories for the given file matcher."""
    if isinstance(matcher, PathSelector) and matcher.can_filter_directories():
        return matcher.could_hold_selected
    return INCLUDES_ALL
