"""Translation of archives into ``jar`` tool arguments.

Arguments are ``str`` options or :class:`~pathlib.Path` operands. Paths
are kept as such until the command line is built so that they can be
written differently in the debug file.
"""

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jarpack.archive.model import FileSet

Argument = str | Path


def file_set_arguments(file_set: "FileSet") -> list[Argument]:
    """Return the ``--release``, ``-C`` and file arguments of one file set.

    The ``jar`` tool requires the first file after ``-C`` to be relative
    to the directory given to ``-C``, and all other files to be absolute.

    Args:
        file_set: The files to archive for one target release.

    Returns:
        The arguments, or an empty list if the file set is empty.
    """
    if file_set.is_empty:
        return []
    arguments: list[Argument] = []
    if file_set.release is not None:
        arguments += ["--release", str(file_set.release)]
    first, *others = file_set.files
    try:
        first = first.relative_to(file_set.directory)
    except ValueError:
        pass  # Already outside of the directory, keep the absolute path.
    arguments += ["-C", file_set.directory, first, *others]
    return arguments


def relativize(base: Path | None, path: Path) -> Path:
    """Return ``path`` relative to ``base`` if possible, or unchanged otherwise."""
    if base is None:
        return path
    try:
        return path.relative_to(base, walk_up=True)
    except ValueError:
        return path


def format_debug_arguments(arguments: list[Argument], base_dir: Path | None) -> str:
    """Format arguments as the content of a ``jar @file`` argument file.

    Paths are quoted and made relative to ``base_dir`` when possible.
    Each option starting with ``--``, and each ``-C``, begins a new line.

    Args:
        arguments: The arguments given to the ``jar`` tool.
        base_dir: Directory against which to relativize paths, or None.

    Returns:
        Text of the debug file.
    """
    out: list[str] = []
    is_new_line = True
    for argument in arguments:
        if isinstance(argument, Path):
            if not is_new_line:
                out.append(" ")
            out.append(f'"{relativize(base_dir, argument)}"\n')
            is_new_line = True
        else:
            if not is_new_line:
                out.append("\n" if argument.startswith("--") or argument == "-C" else " ")
            out.append(argument)
            is_new_line = False
    if not is_new_line:
        out.append("\n")
    return "".join(out)
