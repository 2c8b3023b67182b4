"""Path management for jarpack.

The project configuration lives in the project directory. User-level
settings such as the color theme follow the XDG Base Directory
Specification.
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "jarpack"

# Name of the project configuration file
CONFIG_FILE_NAME = "jarpack.toml"


def get_config_dir() -> Path:
    """Get the user configuration directory path.

    Returns:
        Path to ~/.config/jarpack/ (or XDG_CONFIG_HOME/jarpack/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_theme_path() -> Path:
    """Get the user theme file path.

    Returns:
        Path to ~/.config/jarpack/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_project_config_path(directory: Path | None = None) -> Path:
    """Get the project configuration file path.

    Args:
        directory: Project directory. If None, uses the current directory.

    Returns:
        Path to jarpack.toml in the project directory.
    """
    return (directory or Path.cwd()) / CONFIG_FILE_NAME
