"""Unit tests for the up-to-date check of existing JAR files."""

import logging
import os
from collections.abc import Callable
from pathlib import Path, PurePosixPath

import pytest
from jarpack.archive.model import Archive
from jarpack.archive.timestamp import TimestampCheck, is_ignored

OLD_MTIME = 1_600_000_000.0
JAR_MTIME = OLD_MTIME + 100


def _collect(archive: Archive, files: list[Path]) -> Archive:
    for file in files:
        archive.add_file(archive.base_release(), file, file.stat().st_mtime, file.is_dir())
    return archive


class TestIsIgnored:
    """Tests for is_ignored function."""

    @pytest.mark.parametrize(
        "entry",
        ["META-INF/MANIFEST.MF", "META-INF/maven/g/a/pom.properties", "META-INF/maven"],
    )
    def test_ignored(self, entry: str) -> None:
        """Generated metadata entries are ignored."""
        assert is_ignored(PurePosixPath(entry))

    @pytest.mark.parametrize(
        "entry", ["MANIFEST.MF", "META-INF/services/x", "org/META-INF/MANIFEST.MF", "META-INF"]
    )
    def test_not_ignored(self, entry: str) -> None:
        """Other entries are compared with the collected files."""
        assert not is_ignored(PurePosixPath(entry))


class TestIsUpToDate:
    """Tests for the comparison of a JAR file with the collected files."""

    def test_older_file_present(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        make_jar: Callable[..., Path],
    ) -> None:
        """A JAR file newer than its only file, which it contains, is up to date."""
        files = make_files("x.class", mtime=JAR_MTIME - 1)
        jar = make_jar(["x.class"], mtime=JAR_MTIME)

        assert _collect(Archive(jar, None, classes_dir), files).is_up_to_date()

    def test_newer_file(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        make_jar: Callable[..., Path],
    ) -> None:
        """A file modified after the JAR file requires a rebuild."""
        files = make_files("x.class", mtime=JAR_MTIME + 1)
        jar = make_jar(["x.class"], mtime=JAR_MTIME)

        assert not _collect(Archive(jar, None, classes_dir), files).is_up_to_date()

    def test_touching_a_file_flips_the_result(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        make_jar: Callable[..., Path],
    ) -> None:
        """Advancing one file past the JAR time makes an up-to-date JAR outdated."""
        files = make_files("a.class", "b.class", "c.class")
        jar = make_jar(["a.class", "b.class", "c.class"])
        assert _collect(Archive(jar, None, classes_dir), files).is_up_to_date()

        os.utime(files[1], (JAR_MTIME + 1, JAR_MTIME + 1))

        assert not _collect(Archive(jar, None, classes_dir), files).is_up_to_date()

    def test_extra_entry(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        make_jar: Callable[..., Path],
    ) -> None:
        """An entry with no collected file requires a rebuild."""
        files = make_files("x.class")
        jar = make_jar(["x.class", "stray.txt"])

        assert not _collect(Archive(jar, None, classes_dir), files).is_up_to_date()

    def test_extra_entry_before_files(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        make_jar: Callable[..., Path],
    ) -> None:
        """Entries read while searching for a file are still compared."""
        files = make_files("x.class")
        jar = make_jar(["stray.txt", "x.class"])

        assert not _collect(Archive(jar, None, classes_dir), files).is_up_to_date()

    def test_missing_entry(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        make_jar: Callable[..., Path],
    ) -> None:
        """A collected file absent from the JAR file requires a rebuild."""
        files = make_files("x.class", "y.class")
        jar = make_jar(["x.class"])

        assert not _collect(Archive(jar, None, classes_dir), files).is_up_to_date()

    def test_ignored_entries(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        make_jar: Callable[..., Path],
    ) -> None:
        """Manifest, build metadata and directory entries are not compared."""
        files = make_files("org/x.class")
        jar = make_jar(
            [
                "META-INF/",
                "META-INF/MANIFEST.MF",
                "META-INF/maven/g/a/pom.properties",
                "org/",
                "org/x.class",
            ]
        )

        assert _collect(Archive(jar, None, classes_dir), files).is_up_to_date()

    def test_directories_walked(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        make_jar: Callable[..., Path],
    ) -> None:
        """Directories added as a whole are compared file by file."""
        make_files("org/a/A.class", "org/b/B.class")
        os.utime(classes_dir / "org", (OLD_MTIME, OLD_MTIME))
        jar = make_jar(["org/a/A.class", "org/b/B.class"])
        assert _collect(Archive(jar, None, classes_dir), [classes_dir / "org"]).is_up_to_date()

        (classes_dir / "org/b/B.class").unlink()
        jar = make_jar(["org/a/A.class", "org/b/B.class"])
        assert not _collect(
            Archive(jar, None, classes_dir), [classes_dir / "org"]
        ).is_up_to_date()

    def test_newer_file_in_directory(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        make_jar: Callable[..., Path],
    ) -> None:
        """A newer file inside a directory added as a whole requires a rebuild."""
        make_files("org/A.class")
        make_files("org/B.class", mtime=JAR_MTIME + 10)
        os.utime(classes_dir / "org", (OLD_MTIME, OLD_MTIME))
        jar = make_jar(["org/A.class", "org/B.class"], mtime=JAR_MTIME)

        assert not _collect(Archive(jar, None, classes_dir), [classes_dir / "org"]).is_up_to_date()

    def test_corrupted_jar(
        self,
        classes_dir: Path,
        make_files: Callable[..., list[Path]],
        caplog: pytest.LogCaptureFixture,
        tmp_path: Path,
    ) -> None:
        """An unreadable JAR file is rebuilt, with a warning."""
        files = make_files("x.class")
        jar = tmp_path / "app.jar"
        jar.write_bytes(b"not a zip file")
        os.utime(jar, (JAR_MTIME, JAR_MTIME))

        with caplog.at_level(logging.WARNING, logger="jarpack.archive.timestamp"):
            result = _collect(Archive(jar, None, classes_dir), files).is_up_to_date()

        assert not result
        assert "Cannot check whether" in caplog.text


class TestTimestampCheck:
    """Tests for TimestampCheck class."""

    def test_missing_jar(self, tmp_path: Path) -> None:
        """The JAR file must exist."""
        with pytest.raises(OSError):
            TimestampCheck(tmp_path / "missing.jar", tmp_path)

    def test_is_updated(self, tmp_path: Path, make_jar: Callable[..., Path]) -> None:
        """Only files newer than the JAR file are updated."""
        check = TimestampCheck(make_jar([], mtime=JAR_MTIME), tmp_path)
        assert check.is_updated(tmp_path / "a", JAR_MTIME + 1, False)
        assert not check.is_updated(tmp_path / "b", JAR_MTIME, False)
