"""Utility modules for twinpane.

This module exports the console helpers shared by CLI commands.
"""

from twinpane.utils.formatting import (
    console,
    create_entry_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_entry_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
