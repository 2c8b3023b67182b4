"""Unit tests for the packaging pipeline."""

import logging
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from jarpack.core.executor import ToolExecutor
from jarpack.core.packaging import PackagingResult, is_empty_directory, package, plan
from jarpack.models.config import JarConfig


@pytest.fixture
def config(tmp_path: Path) -> JarConfig:
    """Configuration with absolute paths and no build metadata."""
    return JarConfig(
        base_directory=tmp_path,
        classes_directory=tmp_path / "classes",
        output_directory=tmp_path / "target",
        artifact_id="app",
        version="1.0",
        add_metadata=False,
    )


class TestIsEmptyDirectory:
    """Tests for is_empty_directory function."""

    def test_missing(self, tmp_path: Path) -> None:
        """A missing directory is empty."""
        assert is_empty_directory(tmp_path / "missing")

    def test_empty(self, classes_dir: Path) -> None:
        """A directory without entries is empty."""
        assert is_empty_directory(classes_dir)

    def test_not_empty(self, classes_dir: Path) -> None:
        """A directory with a subdirectory is not empty."""
        (classes_dir / "org").mkdir()
        assert not is_empty_directory(classes_dir)


class TestPlan:
    """Tests for plan function."""

    def test_collects_and_prunes(
        self, config: JarConfig, make_files: Callable[..., list[Path]]
    ) -> None:
        """The collector holds the pruned archives named by the executor."""
        make_files("org/App.class", "org/package.html")

        collector = plan(config, ToolExecutor(config))

        (archive,) = collector.archives()
        assert archive.jar_file == config.output_directory / "app-1.0.jar"
        assert [f.name for f in archive.base_release().files] == ["App.class"]

    def test_missing_classes_warning(
        self, config: JarConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A missing classes directory gives one empty JAR file, with a warning."""
        with caplog.at_level(logging.WARNING, logger="jarpack.core.packaging"):
            collector = plan(config, ToolExecutor(config))

        assert "JAR will be empty" in caplog.text
        (archive,) = collector.archives()
        assert archive.base_release().is_empty


class TestPackage:
    """Tests for package function."""

    def test_skip_if_empty(self, config: JarConfig, classes_dir: Path) -> None:
        """Packaging is skipped when the classes directory is empty."""
        executor = MagicMock(spec=ToolExecutor)

        result = package(config.model_copy(update={"skip_if_empty": True}), executor=executor)

        assert result == PackagingResult(skipped=True)
        executor.write_all.assert_not_called()

    def test_writes_archives(
        self, config: JarConfig, make_files: Callable[..., list[Path]]
    ) -> None:
        """The collected archives are given to the executor."""
        make_files("org/App.class")
        executor = ToolExecutor(config, tool=Path("/usr/bin/jar"))
        executor.write_all = MagicMock(return_value={None: {"jar": Path("app.jar")}})

        result = package(config, executor=executor)

        assert not result.skipped
        assert result.artifacts == {None: {"jar": Path("app.jar")}}
        (collector,) = executor.write_all.call_args.args
        assert len(collector.archives()) == 1
