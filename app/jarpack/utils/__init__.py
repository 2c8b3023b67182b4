"""Utility modules for jarpack.

This module exports commonly used utility functions.
"""

from jarpack.utils.formatting import (
    console,
    create_archive_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from jarpack.utils.shell import CommandResult, find_executable, run_command

__all__ = [
    "CommandResult",
    "console",
    "create_archive_table",
    "err_console",
    "find_executable",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
