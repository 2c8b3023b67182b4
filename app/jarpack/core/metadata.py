"""Temporary metadata files generated for one JAR file.

The files are created in a temporary directory under the output
directory and deleted when the context exits, unless the deletion has
been cancelled for letting users inspect them after a failure.
"""

import logging
import shutil
import tempfile
from pathlib import Path
from types import TracebackType

from jarpack.archive.manifest import Manifest
from jarpack.layout.roles import MANIFEST, MAVEN_DIR, META_INF

logger = logging.getLogger(__name__)

POM_PROPERTIES = "pom.properties"


class MetadataFiles:
    """Context manager owning the temporary files of one JAR file.

    Args:
        output_directory: Directory where to create the temporary directory.
    """

    def __init__(self, output_directory: Path) -> None:
        self.output_directory = output_directory
        self._directory: Path | None = None
        self._delete = True

    @property
    def directory(self) -> Path:
        """The temporary directory, created on first use."""
        if self._directory is None:
            self.output_directory.mkdir(parents=True, exist_ok=True)
            self._directory = Path(tempfile.mkdtemp(prefix="jar-", dir=self.output_directory))
        return self._directory

    def add_manifest(self, manifest: Manifest) -> Path:
        """Write a manifest file to give to the ``--manifest`` option.

        Returns:
            Path to the written ``MANIFEST.MF`` file.
        """
        return manifest.write(self.directory / META_INF / MANIFEST)

    def add_pom_properties(self, group_id: str, artifact_id: str, version: str) -> list[Path]:
        """Write the ``pom.properties`` build metadata.

        Returns:
            The temporary directory followed by the path of the file
            relative to that directory, ready to follow a ``-C`` option.
        """
        relative = Path(META_INF, MAVEN_DIR, group_id, artifact_id, POM_PROPERTIES)
        file = self.directory / relative
        file.parent.mkdir(parents=True, exist_ok=True)
        # Sorted keys, no date comment.
        file.write_text(
            f"artifactId={artifact_id}\ngroupId={group_id}\nversion={version}\n",
            encoding="utf-8",
        )
        return [self.directory, relative]

    def cancel_file_deletion(self) -> None:
        """Keep the temporary files after the context exits."""
        self._delete = False

    def __enter__(self) -> "MetadataFiles":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._directory is None:
            return
        if self._delete:
            shutil.rmtree(self._directory, ignore_errors=True)
        else:
            logger.debug("Keeping temporary metadata files in %s", self._directory)
