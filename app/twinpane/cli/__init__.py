"""CLI package for twinpane.

This package contains the Typer application and all subcommands.
"""

from twinpane.cli.main import app

__all__ = ["app"]
