"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
import os
import zipfile
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import pytest

# Modification time of the files created by the fixtures, in seconds.
OLD_MTIME = 1_600_000_000.0


@pytest.fixture
def make_files(tmp_path: Path) -> Callable[..., list[Path]]:
    """Create files under a directory, all with an old modification time.

    Parent directories are created as needed. Returns the created paths.
    """

    def _make(*names: str, base: Path | None = None, mtime: float = OLD_MTIME) -> list[Path]:
        root = base or tmp_path / "classes"
        created = []
        for name in names:
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"\xca\xfe\xba\xbe")
            os.utime(path, (mtime, mtime))
            created.append(path)
        return created

    return _make


@pytest.fixture
def make_jar(tmp_path: Path) -> Callable[..., Path]:
    """Create a ZIP file with the given entries, newer than the fixture files."""

    def _make(
        entries: Iterable[str],
        path: Path | None = None,
        mtime: float = OLD_MTIME + 100,
    ) -> Path:
        jar = path or tmp_path / "app.jar"
        jar.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(jar, "w") as zf:
            for entry in entries:
                zf.writestr(entry, "" if entry.endswith("/") else "content")
        os.utime(jar, (mtime, mtime))
        return jar

    return _make


@pytest.fixture
def classes_dir(tmp_path: Path) -> Path:
    """Empty classes directory."""
    directory = tmp_path / "classes"
    directory.mkdir()
    return directory


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo the logging setup done by CLI invocations."""
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
