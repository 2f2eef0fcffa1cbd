"""CLI commands for twinpane.

This package contains all subcommand implementations.
"""

from twinpane.cli.commands import config, ops, resolve, search

__all__ = ["config", "ops", "resolve", "search"]
