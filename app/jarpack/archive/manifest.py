"""Reading and writing of JAR manifest files.

A manifest is a main section followed by optional named sections, each
made of ``Name: value`` lines and separated by blank lines. Lines are at
most 72 bytes long; longer values continue on lines starting with a
single space.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from pathlib import Path
from typing import IO

MANIFEST_VERSION = "Manifest-Version"
MAIN_CLASS = "Main-Class"
MULTI_RELEASE = "Multi-Release"
CREATED_BY = "Created-By"
AUTOMATIC_MODULE_NAME = "Automatic-Module-Name"

_MAX_LINE_BYTES = 72
_NEWLINE = "\r\n"


class ManifestFormatError(ValueError):
    """Raised when manifest text is malformed."""


class Attributes(MutableMapping[str, str]):
    """Ordered attributes of one manifest section with case-insensitive names.

    The spelling used when an attribute is first set is preserved on output.
    """

    def __init__(self, items: Attributes | dict[str, str] | None = None) -> None:
        self._items: dict[str, tuple[str, str]] = {}
        if items:
            self.update(items)

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __setitem__(self, name: str, value: str) -> None:
        key = name.lower()
        previous = self._items.get(key)
        self._items[key] = (previous[0] if previous else name, value)

    def __delitem__(self, name: str) -> None:
        del self._items[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Attributes({dict(self.items())!r})"


def _logical_lines(text: str) -> Iterator[str]:
    """Join continuation lines, yielding "" for section separators."""
    current: str | None = None
    for line in text.splitlines():
        if line.startswith(" "):
            if current is None:
                msg = "Continuation line without a preceding attribute"
                raise ManifestFormatError(msg)
            current += line[1:]
            continue
        if current is not None:
            yield current
        current = line if line else None
        if not line:
            yield ""
    if current is not None:
        yield current


def _parse_attribute(line: str) -> tuple[str, str]:
    name, sep, value = line.partition(": ")
    if not sep or not name:
        msg = f"Invalid manifest line: '{line}'"
        raise ManifestFormatError(msg)
    return name, value


def _wrap(line: str) -> str:
    """Split a line into chunks of at most 72 bytes once encoded in UTF-8."""
    data = line.encode("utf-8")
    if len(data) <= _MAX_LINE_BYTES:
        return line + _NEWLINE
    chunks: list[str] = []
    limit = _MAX_LINE_BYTES
    while data:
        cut = min(limit, len(data))
        # Never split a multi-byte character.
        while cut < len(data) and (data[cut] & 0xC0) == 0x80:
            cut -= 1
        chunks.append(data[:cut].decode("utf-8"))
        data = data[cut:]
        limit = _MAX_LINE_BYTES - 1
    return (_NEWLINE + " ").join(chunks) + _NEWLINE


class Manifest:
    """Content of a ``META-INF/MANIFEST.MF`` file.

    Attributes:
        main_attributes: Attributes of the main section.
        entries: Attributes of the named sections, keyed by section name.
    """

    def __init__(self) -> None:
        self.main_attributes = Attributes()
        self.entries: dict[str, Attributes] = {}

    @classmethod
    def from_file(cls, path: Path) -> Manifest:
        """Read a manifest file.

        Raises:
            OSError: If the file cannot be read.
            ManifestFormatError: If the content is malformed.
        """
        manifest = cls()
        with open(path, encoding="utf-8") as f:
            manifest.read(f)
        return manifest

    def copy(self) -> Manifest:
        """Return a deep copy of this manifest."""
        other = Manifest()
        other.main_attributes = Attributes(self.main_attributes)
        other.entries = {name: Attributes(attrs) for name, attrs in self.entries.items()}
        return other

    def read(self, source: str | IO[str]) -> None:
        """Read manifest text, merging it into the current content.

        Attributes read from ``source`` replace the attributes of the same
        name already present.

        Args:
            source: Manifest text or a text stream.

        Raises:
            ManifestFormatError: If the content is malformed.
        """
        text = source if isinstance(source, str) else source.read()
        section: Attributes | None = self.main_attributes
        for line in _logical_lines(text):
            if not line:
                section = None
                continue
            name, value = _parse_attribute(line)
            if section is None:
                if name.lower() != "name":
                    msg = f"Section must start with a 'Name' attribute, found '{name}'"
                    raise ManifestFormatError(msg)
                section = self.entries.setdefault(value, Attributes())
                continue
            section[name] = value

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value of a main attribute."""
        return self.main_attributes.get(name, default)

    def set(self, name: str, value: str) -> None:
        """Set the value of a main attribute."""
        self.main_attributes[name] = value

    def remove(self, name: str) -> str | None:
        """Remove a main attribute, returning its value or None if absent."""
        return self.main_attributes.pop(name, None)

    def dumps(self) -> str:
        """Format this manifest as text, ``Manifest-Version`` first."""
        lines = [_wrap(f"{MANIFEST_VERSION}: {self.get(MANIFEST_VERSION) or '1.0'}")]
        lines.extend(
            _wrap(f"{name}: {value}")
            for name, value in self.main_attributes.items()
            if name.lower() != MANIFEST_VERSION.lower()
        )
        lines.append(_NEWLINE)
        for section, attributes in self.entries.items():
            lines.append(_wrap(f"Name: {section}"))
            lines.extend(_wrap(f"{name}: {value}") for name, value in attributes.items())
            lines.append(_NEWLINE)
        return "".join(lines)

    def write(self, path: Path) -> Path:
        """Write this manifest to a file, creating parent directories as needed."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(self.dumps())
        return path

