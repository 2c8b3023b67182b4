"""Project configuration file I/O.

This module provides functions for loading and saving jarpack.toml files
with validation using the Pydantic configuration model.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from jarpack.core.paths import get_project_config_path
from jarpack.models.config import JarConfig


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration content is invalid."""


def load_config(path: Path | None = None) -> JarConfig:
    """Load and validate a configuration file.

    Relative paths in the file are resolved against the directory of the
    file, which is also the default project base directory.

    Args:
        path: Path to the configuration file. If None, uses jarpack.toml
            in the current directory.

    Returns:
        Validated JarConfig object with absolute paths.

    Raises:
        ConfigNotFoundError: If the file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    config_path = (path or get_project_config_path()).absolute()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Configuration not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read configuration: {e}") from e

    try:
        config = JarConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration content: {e}") from e
    return resolve_paths(config, config_path.parent)


def resolve_paths(config: JarConfig, directory: Path) -> JarConfig:
    """Return a copy of the configuration with absolute paths.

    Args:
        config: The configuration to resolve.
        directory: Directory against which the base directory is resolved.
    """
    base = config.base_directory
    base = base if base.is_absolute() else directory / base
    resolved = config.model_copy(update={"base_directory": base})
    update: dict[str, Any] = {
        "classes_directory": resolved.resolve(config.classes_directory),
        "output_directory": resolved.resolve(config.output_directory),
    }
    if config.manifest_file is not None:
        update["manifest_file"] = resolved.resolve(config.manifest_file)
    return resolved.model_copy(update=update)


def save_config(config: JarConfig, path: Path | None = None) -> Path:
    """Save a configuration to a TOML file.

    The file is written atomically through a temporary file in the same
    directory. Unset optional values are omitted.

    Args:
        config: The configuration to save.
        path: Where to save. If None, uses jarpack.toml in the current directory.

    Returns:
        Path where the configuration was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_project_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write configuration: {e}") from e

    return config_path


def _config_to_dict(config: JarConfig) -> dict[str, Any]:
    """Convert a configuration to a dictionary suitable for TOML serialization.

    TOML has no null value, so None values are dropped and paths are
    written as POSIX strings.
    """
    data = config.model_dump(exclude_none=True, exclude={"base_directory"})
    return {key: value.as_posix() if isinstance(value, Path) else value for key, value in data.items()}


def require_config(path: Path | None = None) -> JarConfig:
    """Load the configuration or exit with a helpful error message.

    This is a convenience wrapper around load_config() for commands.

    Args:
        path: Optional custom configuration path.

    Returns:
        Loaded and validated JarConfig.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    import typer

    from jarpack.utils.formatting import print_error, print_info

    config_path = path or get_project_config_path()
    try:
        return load_config(config_path)
    except ConfigNotFoundError as e:
        print_error(f"Configuration not found: {config_path}")
        print_info("Run 'jarpack init' to create a default configuration.")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(f"Failed to load configuration: {e}")
        raise typer.Exit(code=1) from e
