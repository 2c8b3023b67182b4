"""Target Java release of a ``META-INF/versions/<n>`` directory.

Directory names follow the grammar of Java runtime version strings,
for example ``17``, ``21.0.2`` or ``22-ea+5``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

_VERSION_PATTERN = re.compile(
    r"(?P<vnum>[1-9][0-9]*(?:(?:\.0)*\.[1-9][0-9]*)*)"
    r"(?:-(?P<pre>[a-zA-Z0-9]+))?"
    r"(?:(?P<plus>\+)(?P<build>0|[1-9][0-9]*)?)?"
    r"(?:-(?P<opt>[-a-zA-Z0-9.]+))?"
)


def _compare(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def _compare_optional_text(a: str | None, b: str | None) -> int:
    # An absent component sorts before a present one.
    if b is not None:
        return _compare(a, b) if a is not None else -1
    return 1 if a is not None else 0


@total_ordering
@dataclass(frozen=True, slots=True)
class ReleaseVersion:
    """A parsed Java release identifier.

    Attributes:
        numbers: The version numbers, e.g. ``(21, 0, 2)``.
        pre: Pre-release identifier, if any.
        build: Build number, if any.
        optional: Optional build information, if any.
    """

    numbers: tuple[int, ...]
    pre: str | None = None
    build: int | None = None
    optional: str | None = None

    @classmethod
    def parse(cls, text: str) -> ReleaseVersion:
        """Parse a release identifier.

        Raises:
            ValueError: If the text is not a valid version string.
        """
        m = _VERSION_PATTERN.fullmatch(text)
        if m is None:
            msg = f"Invalid version string: '{text}'"
            raise ValueError(msg)
        pre, build, opt = m.group("pre"), m.group("build"), m.group("opt")
        if m.group("plus") is not None and build is None:
            if opt is None:
                msg = f"'+' found with neither build or optional components: '{text}'"
                raise ValueError(msg)
            if pre is not None:
                msg = f"'+' found with pre-release and optional components: '{text}'"
                raise ValueError(msg)
        elif m.group("plus") is None and opt is not None and pre is None:
            msg = f"optional component must be preceded by a pre-release component or '+': '{text}'"
            raise ValueError(msg)
        numbers = tuple(int(n) for n in m.group("vnum").split("."))
        return cls(numbers, pre, int(build) if build is not None else None, opt)

    @property
    def feature(self) -> int:
        """The feature release number, e.g. 21."""
        return self.numbers[0]

    def compare(self, other: ReleaseVersion) -> int:
        """Three-way comparison following ``Runtime.Version.compareTo``."""
        for a, b in zip(self.numbers, other.numbers):
            if a != b:
                return _compare(a, b)
        result = _compare(len(self.numbers), len(other.numbers))
        if result:
            return result

        if self.pre is None:
            if other.pre is not None:
                return 1
        elif other.pre is None:
            return -1
        elif self.pre.isdigit():
            result = _compare(int(self.pre), int(other.pre)) if other.pre.isdigit() else -1
        else:
            result = 1 if other.pre.isdigit() else _compare(self.pre, other.pre)
        if result:
            return result

        if other.build is not None:
            result = _compare(self.build, other.build) if self.build is not None else -1
        elif self.build is not None:
            result = 1
        return result or _compare_optional_text(self.optional, other.optional)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ReleaseVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __str__(self) -> str:
        text = ".".join(str(n) for n in self.numbers)
        if self.pre is not None:
            text += f"-{self.pre}"
        if self.build is not None:
            text += f"+{self.build}"
        if self.optional is not None:
            text += ("-" if self.build is not None or self.pre is not None else "+-") + self.optional
        return text
