"""Archive model, manifests, tool arguments and the up-to-date check."""

from jarpack.archive.arguments import Argument, file_set_arguments, format_debug_arguments
from jarpack.archive.manifest import Attributes, Manifest, ManifestFormatError
from jarpack.archive.model import Archive, ArchiveError, FileSet
from jarpack.archive.timestamp import TimestampCheck

__all__ = [
    "Archive",
    "ArchiveError",
    "Argument",
    "Attributes",
    "FileSet",
    "Manifest",
    "ManifestFormatError",
    "TimestampCheck",
    "file_set_arguments",
    "format_debug_arguments",
]
