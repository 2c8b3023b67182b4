"""Fixtures for the command-line tests."""

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def project(tmp_path: Path, make_files: Callable[..., list[Path]]) -> Path:
    """Project directory with a configuration and one compiled class.

    Returns the path of the configuration file.
    """
    make_files("org/App.class")
    config_file = tmp_path / "jarpack.toml"
    config_file.write_text(
        'artifact_id = "app"\n'
        'version = "1.0"\n'
        'classes_directory = "classes"\n'
        "add_metadata = false\n"
    )
    return config_file
