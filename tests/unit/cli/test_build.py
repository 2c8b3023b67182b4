"""Unit tests for build command."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

from jarpack.cli.main import app
from jarpack.utils.shell import CommandResult
from typer.testing import CliRunner

runner = CliRunner()

JAR_TOOL = Path("/usr/bin/jar")


class TestBuildCommand:
    """Tests for jarpack build command."""

    @patch("jarpack.core.executor.find_executable", return_value=JAR_TOOL)
    @patch("jarpack.core.executor.run_command")
    def test_build(self, mock_run: MagicMock, _mock_find: MagicMock, project: Path) -> None:
        """Build runs the jar tool and reports the JAR file."""
        mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)

        result = runner.invoke(app, ["build", "-c", str(project)])

        assert result.exit_code == 0
        assert "JAR file ready: target/app-1.0.jar" in result.stdout
        assert mock_run.call_count == 2

    @patch("jarpack.core.executor.find_executable", return_value=JAR_TOOL)
    @patch("jarpack.core.executor.run_command")
    def test_up_to_date_kept(
        self,
        mock_run: MagicMock,
        _mock_find: MagicMock,
        tmp_path: Path,
        project: Path,
        make_jar: Callable[..., Path],
    ) -> None:
        """Up-to-date JAR files are kept unless --force is given."""
        mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)
        make_jar(["org/App.class"], path=tmp_path / "target/app-1.0.jar")
        with open(project, "a") as f:
            f.write('includes = ["**/*.class"]\n')

        result = runner.invoke(app, ["build", "-c", str(project)])
        assert result.exit_code == 0
        mock_run.assert_not_called()

        result = runner.invoke(app, ["build", "-c", str(project), "--force"])
        assert result.exit_code == 0
        assert mock_run.call_count == 2

    @patch("jarpack.core.executor.find_executable", return_value=JAR_TOOL)
    @patch("jarpack.core.executor.run_command")
    def test_tool_failure(
        self, mock_run: MagicMock, _mock_find: MagicMock, tmp_path: Path, project: Path
    ) -> None:
        """A failure of the jar tool exits with an error and keeps the debug file."""
        mock_run.return_value = CommandResult(stdout="", stderr="bad file", returncode=1)

        result = runner.invoke(app, ["build", "-c", str(project)])

        assert result.exit_code == 1
        assert "bad file" in result.output
        assert (tmp_path / "target/jar.args").is_file()

    @patch("jarpack.core.executor.find_executable", return_value=None)
    def test_tool_not_found(self, _mock_find: MagicMock, project: Path) -> None:
        """A missing jar tool exits with a hint."""
        result = runner.invoke(app, ["build", "-c", str(project)])

        assert result.exit_code == 1
        assert "JAVA_HOME" in result.output

    @patch("jarpack.core.executor.run_command")
    def test_dry_run(self, mock_run: MagicMock, tmp_path: Path, project: Path) -> None:
        """Build --dry-run prints the jar tool arguments without running it."""
        result = runner.invoke(app, ["build", "-c", str(project), "--dry-run"])

        assert result.exit_code == 0
        assert "jar --create" in result.stdout
        assert '--file "target/app-1.0.jar"' in result.stdout
        assert '-C "classes"' in result.stdout
        assert "[DRY-RUN] No files were written." in result.stdout
        mock_run.assert_not_called()
        assert not (tmp_path / "target").exists()

    def test_dry_run_with_main_class(self, project: Path) -> None:
        """The dry run mentions the generated manifest."""
        with open(project, "a") as f:
            f.write('main_class = "org.App"\n')

        result = runner.invoke(app, ["build", "-c", str(project), "-n"])

        assert result.exit_code == 0
        assert "--main-class org.App" in result.stdout
        assert "with a generated manifest" in result.stdout

    def test_skip_if_empty(self, tmp_path: Path, project: Path) -> None:
        """Nothing is built from an empty classes directory with skip_if_empty."""
        (tmp_path / "classes/org/App.class").unlink()
        (tmp_path / "classes/org").rmdir()
        with open(project, "a") as f:
            f.write("skip_if_empty = true\n")

        result = runner.invoke(app, ["build", "-c", str(project)])
        assert result.exit_code == 0
        assert "Skipped packaging of the jar" in result.stdout

        result = runner.invoke(app, ["build", "-c", str(project), "--dry-run"])
        assert result.exit_code == 0
        assert "Would skip packaging" in result.stdout

    def test_missing_config(self, tmp_path: Path) -> None:
        """A missing configuration exits with an error."""
        result = runner.invoke(app, ["build", "-c", str(tmp_path / "missing.toml")])

        assert result.exit_code == 1
        assert "Configuration not found" in result.output
