"""Shell execution utilities.

Provides subprocess execution of external tools with captured output.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 600.0,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def find_executable(name: str, *, home_variable: str | None = None) -> Path | None:
    """Find an executable in the PATH, or in the ``bin`` directory of a home.

    Args:
        name: Executable name.
        home_variable: Environment variable giving an installation
            directory to search when the PATH has no match, e.g. ``JAVA_HOME``.

    Returns:
        Path to the executable, or None if not found.
    """
    found = shutil.which(name)
    if found is not None:
        return Path(found)
    home = os.environ.get(home_variable) if home_variable else None
    if home:
        found = shutil.which(name, path=str(Path(home) / "bin"))
        if found is not None:
            return Path(found)
    return None
