"""Configuration model for packaging a classes directory.

This module defines the Pydantic model representing the jarpack.toml
file that describes which JAR files to build and how.
"""

from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Patterns used when the configuration declares none.
DEFAULT_INCLUDES = ("**/**",)
DEFAULT_EXCLUDES = ("**/package.html",)

# Classifier and classes directory of the "test-jar" artifact type.
TEST_CLASSIFIER = "tests"
TEST_CLASSES_DIRECTORY = Path("target/test-classes")

# Bounds of the timestamps accepted by the ZIP format as used by the jar tool.
_MIN_TIMESTAMP = datetime(1980, 1, 1, 0, 0, 2, tzinfo=UTC)
_MAX_TIMESTAMP = datetime(2099, 12, 31, 23, 59, 59, tzinfo=UTC)

ArtifactType = Literal["jar", "test-jar"]


def normalize_timestamp(value: str | int | None) -> str | None:
    """Convert an output timestamp to ISO-8601 in UTC.

    Args:
        value: ISO-8601 date-time with offset, or seconds since the epoch.
            Values shorter than 2 characters disable reproducible output.

    Returns:
        The timestamp formatted as ``YYYY-MM-DDTHH:MM:SSZ``, or None.

    Raises:
        ValueError: If the value cannot be parsed or is out of range.
    """
    if value is None:
        return None
    text = str(value).strip()
    if len(text) < 2:
        return None
    if text.lstrip("-").isdigit():
        instant = datetime.fromtimestamp(int(text), UTC)
    else:
        try:
            instant = datetime.fromisoformat(text)
        except ValueError as e:
            msg = f"Invalid output timestamp '{text}': expected ISO-8601 or epoch seconds"
            raise ValueError(msg) from e
        if instant.tzinfo is None:
            msg = f"Output timestamp '{text}' must have a time zone offset"
            raise ValueError(msg)
        instant = instant.astimezone(UTC)
    if not _MIN_TIMESTAMP <= instant <= _MAX_TIMESTAMP:
        msg = f"Output timestamp '{text}' is outside the range {_MIN_TIMESTAMP} to {_MAX_TIMESTAMP}"
        raise ValueError(msg)
    return instant.strftime("%Y-%m-%dT%H:%M:%SZ")


class JarConfig(BaseModel):
    """Settings of the JAR files to build.

    Relative paths are resolved against ``base_directory`` by
    :func:`jarpack.core.config.load_config`.

    Attributes:
        base_directory: Project base directory.
        classes_directory: Directory of the compiled classes to archive.
        output_directory: Directory where to write the JAR files.
        final_name: JAR file name, without extension, for package hierarchy.
        version: Project version, used in the names of module JAR files.
        group_id: Group identifier written in the build metadata.
        artifact_id: Artifact identifier written in the build metadata.
        classifier: Classifier appended to JAR file names, if any.
        type: Artifact type.
        includes: Patterns of files to include.
        excludes: Patterns of files to exclude.
        force_creation: Always build new JAR files.
        skip_if_empty: Do not build JAR files with no content.
        detect_multi_release: Recognize ``META-INF/versions`` directories.
        output_timestamp: Timestamp of the entries, for reproducible builds.
        compress: Whether to compress the entries.
        add_metadata: Whether to add ``META-INF/maven/.../pom.properties``.
        manifest_file: Manifest file to merge with the one found in the classes.
        main_class: Main class, optionally as ``module/class``.
    """

    model_config = ConfigDict(extra="forbid")

    base_directory: Annotated[Path, Field(description="Project base directory")] = Path(".")
    classes_directory: Annotated[
        Path,
        Field(description="Directory of the compiled classes"),
    ] = Path("target/classes")
    output_directory: Annotated[
        Path,
        Field(description="Directory where to write the JAR files"),
    ] = Path("target")
    final_name: Annotated[
        str | None,
        Field(description="JAR file name without extension (default: <artifact_id>-<version>)"),
    ] = None
    version: Annotated[str, Field(description="Project version")] = "0.0.0"
    group_id: Annotated[str, Field(description="Group identifier")] = "unknown"
    artifact_id: Annotated[str | None, Field(description="Artifact identifier")] = None
    classifier: Annotated[str | None, Field(description="JAR file classifier")] = None
    type: Annotated[ArtifactType, Field(description="Artifact type")] = "jar"
    includes: Annotated[
        list[str] | None,
        Field(description="Patterns of files to include"),
    ] = None
    excludes: Annotated[
        list[str] | None,
        Field(description="Patterns of files to exclude"),
    ] = None
    force_creation: Annotated[bool, Field(description="Always build new JAR files")] = False
    skip_if_empty: Annotated[bool, Field(description="Skip JAR files with no content")] = False
    detect_multi_release: Annotated[
        bool,
        Field(description="Recognize META-INF/versions directories"),
    ] = True
    output_timestamp: Annotated[
        str | None,
        Field(description="Entry timestamp for reproducible builds (ISO-8601 or epoch seconds)"),
    ] = None
    compress: Annotated[bool, Field(description="Compress the JAR entries")] = True
    add_metadata: Annotated[bool, Field(description="Add the pom.properties metadata")] = True
    manifest_file: Annotated[
        Path | None,
        Field(description="Manifest file to merge"),
    ] = None
    main_class: Annotated[str | None, Field(description="Main class of the JAR file")] = None

    @field_validator("output_timestamp", mode="before")
    @classmethod
    def validate_output_timestamp(cls, v: object) -> str | None:
        """Normalize the output timestamp to ISO-8601 in UTC."""
        if v is not None and not isinstance(v, str | int):
            msg = "output_timestamp must be a string or an integer"
            raise ValueError(msg)
        return normalize_timestamp(v)

    @field_validator("classifier")
    @classmethod
    def validate_classifier(cls, v: str | None) -> str | None:
        """Treat a blank classifier as no classifier."""
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def apply_test_jar_defaults(self) -> "JarConfig":
        """Use the test classes and the ``tests`` classifier for test JAR files."""
        if self.type == "test-jar":
            if "classifier" not in self.model_fields_set:
                self.classifier = TEST_CLASSIFIER
            if "classes_directory" not in self.model_fields_set:
                self.classes_directory = TEST_CLASSES_DIRECTORY
        return self

    @property
    def effective_final_name(self) -> str:
        """JAR file name without extension when package hierarchy is used."""
        if self.final_name:
            return self.final_name
        return f"{self.artifact_id or self.base_directory.resolve().name}-{self.version}"

    @property
    def effective_includes(self) -> list[str]:
        return list(self.includes) if self.includes else list(DEFAULT_INCLUDES)

    @property
    def effective_excludes(self) -> list[str]:
        return list(self.excludes) if self.excludes else list(DEFAULT_EXCLUDES)

    @property
    def is_reproducible(self) -> bool:
        """Whether a reproducible build was requested."""
        return self.output_timestamp is not None

    def resolve(self, path: Path) -> Path:
        """Resolve a path against the project base directory."""
        return path if path.is_absolute() else self.base_directory / path
