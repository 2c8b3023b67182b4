"""Data models for jarpack.

This module exports the configuration model and its defaults.
"""

from jarpack.models.config import (
    DEFAULT_EXCLUDES,
    DEFAULT_INCLUDES,
    TEST_CLASSIFIER,
    ArtifactType,
    JarConfig,
    normalize_timestamp,
)

__all__ = [
    "DEFAULT_EXCLUDES",
    "DEFAULT_INCLUDES",
    "TEST_CLASSIFIER",
    "ArtifactType",
    "JarConfig",
    "normalize_timestamp",
]
