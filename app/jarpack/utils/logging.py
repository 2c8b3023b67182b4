"""Logging configuration for the command-line interface.

Library modules only create loggers. The CLI routes their records to a
Rich handler on the error console.
"""

import logging

from rich.logging import RichHandler

from jarpack.utils.formatting import err_console

_HANDLER_NAME = "jarpack-rich"


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Install a Rich handler on the root logger.

    Calling this function again replaces the handler installed before.

    Args:
        verbose: Log debug messages.
        quiet: Log only warnings and errors.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    root.addHandler(handler)
    root.setLevel(level)
