"""Compilation of ``syntax:expression`` patterns into path predicates.

Two syntaxes are understood. ``glob:`` follows the dialect of the JDK
``FileSystem.getPathMatcher`` on Unix, where ``*`` stays inside one path
segment and ``**`` crosses segment boundaries. ``regex:`` hands the
expression to :mod:`re` unchanged. Paths are always matched in their
``/``-separated string form.
"""

import re
from dataclasses import dataclass, field
from pathlib import PurePath

GLOB_SYNTAX = "glob"
REGEX_SYNTAX = "regex"

_REGEX_META_CHARS = ".^$+{[]|()"
_GLOB_META_CHARS = "\\*?[{"
_EOL = ""


class PatternSyntaxError(ValueError):
    """Raised when a pattern cannot be compiled.

    Attributes:
        pattern: The offending pattern text, including its syntax prefix.
        index: Position of the error in the expression, or -1 if unknown.
    """

    def __init__(self, description: str, pattern: str, index: int = -1) -> None:
        self.description = description
        self.pattern = pattern
        self.index = index
        message = f"{description} in pattern \"{pattern}\""
        if index >= 0:
            message += f" near index {index}"
        super().__init__(message)


def path_string(path: PurePath | str) -> str:
    """Return the ``/``-separated form of a path, with ``""`` for the empty path."""
    if isinstance(path, str):
        return path
    text = path.as_posix()
    return "" if text == "." else text


def _next(glob: str, i: int) -> str:
    return glob[i] if i < len(glob) else _EOL


def _bracket_expression(glob: str, i: int, pattern: str) -> tuple[str, int]:
    """Translate a ``[...]`` expression starting after the ``[`` at ``i``.

    Returns:
        Tuple of (regex fragment, index after the closing bracket).
    """
    parts: list[str] = []
    if _next(glob, i) == "^":
        parts.append("\\^")
        i += 1
    else:
        if _next(glob, i) == "!":
            parts.append("^")
            i += 1
        if _next(glob, i) == "-":
            parts.append("\\-")
            i += 1

    has_range_start = False
    last = ""
    c = _EOL
    while i < len(glob):
        c = glob[i]
        i += 1
        if c == "]":
            break
        if c == "/":
            raise PatternSyntaxError("Explicit 'name separator' in class", pattern, i - 1)
        if c == "-":
            if not has_range_start:
                raise PatternSyntaxError("Invalid range", pattern, i - 1)
            c = _next(glob, i)
            i += 1
            if c in (_EOL, "]"):
                # A trailing '-' is a literal, as in "[a-]".
                parts.append("\\-")
                break
            if c < last:
                raise PatternSyntaxError("Invalid range", pattern, i - 3)
            parts.append("-")
            parts.append(re.escape(c))
            has_range_start = False
        else:
            parts.append(re.escape(c))
            has_range_start = True
            last = c

    if c != "]":
        raise PatternSyntaxError("Missing ']'", pattern, i - 1)
    body = "".join(parts)
    if body in ("", "^"):
        raise PatternSyntaxError("Empty class", pattern, i - 1)
    # A class never matches the name separator.
    return f"(?!/)[{body}]", i


def glob_to_regex(glob: str, pattern: str | None = None) -> str:
    """Translate a glob expression into an equivalent regular expression.

    Args:
        glob: The glob expression, without the ``glob:`` prefix.
        pattern: Full pattern text used in error messages.

    Returns:
        Regular expression to use with :func:`re.fullmatch`.

    Raises:
        PatternSyntaxError: If the glob expression is malformed.
    """
    pattern = pattern if pattern is not None else f"{GLOB_SYNTAX}:{glob}"
    regex: list[str] = []
    in_group = False
    i = 0
    while i < len(glob):
        c = glob[i]
        i += 1
        if c == "\\":
            if i == len(glob):
                raise PatternSyntaxError("No character to escape", pattern, i - 1)
            regex.append(re.escape(glob[i]))
            i += 1
        elif c == "[":
            fragment, i = _bracket_expression(glob, i, pattern)
            regex.append(fragment)
        elif c == "{":
            if in_group:
                raise PatternSyntaxError("Cannot nest groups", pattern, i - 1)
            regex.append("(?:(?:")
            in_group = True
        elif c == "}":
            if in_group:
                regex.append("))")
                in_group = False
            else:
                regex.append("\\}")
        elif c == ",":
            regex.append(")|(?:" if in_group else ",")
        elif c == "*":
            if _next(glob, i) == "*":
                regex.append(".*")
                i += 1
            else:
                regex.append("[^/]*")
        elif c == "?":
            regex.append("[^/]")
        elif c in _REGEX_META_CHARS or c in _GLOB_META_CHARS:
            regex.append("\\" + c)
        else:
            regex.append(re.escape(c))

    if in_group:
        raise PatternSyntaxError("Missing '}'", pattern, i - 1)
    return "".join(regex)


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A compiled pattern usable as a predicate over paths.

    Attributes:
        pattern: The source pattern, including its syntax prefix.
    """

    pattern: str
    _regex: re.Pattern[str] = field(repr=False, compare=False)

    def __call__(self, path: PurePath | str) -> bool:
        return self._regex.fullmatch(path_string(path)) is not None


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile a ``syntax:expression`` pattern.

    Args:
        pattern: Pattern with an explicit ``glob:`` or ``regex:`` prefix.

    Returns:
        The compiled pattern.

    Raises:
        PatternSyntaxError: If the syntax is unknown or the expression invalid.
    """
    syntax, sep, expression = pattern.partition(":")
    if not sep:
        raise PatternSyntaxError("Missing syntax prefix", pattern)
    if syntax == GLOB_SYNTAX:
        regex = glob_to_regex(expression, pattern)
    elif syntax == REGEX_SYNTAX:
        regex = expression
    else:
        raise PatternSyntaxError(f"Syntax '{syntax}' not recognized", pattern)
    try:
        compiled = re.compile(regex, re.DOTALL)
    except re.error as e:
        raise PatternSyntaxError(str(e), pattern, e.pos if e.pos is not None else -1) from e
    return CompiledPattern(pattern=pattern, _regex=compiled)
