"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from twinpane import __version__
from twinpane.cli.commands import config, ops, resolve, search
from twinpane.core.config import SettingsError, load_settings
from twinpane.utils.formatting import print_error

# Create main Typer app
app = typer.Typer(
    name="twinpane",
    help="Safe file operations, path resolution and glob search.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"twinpane version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Settings file (default: ~/.config/twinpane/config.toml).",
        ),
    ] = None,
) -> None:
    """twinpane - safe file operations for a dual-pane file manager.

    Copy, move, rename and delete files and directory trees with
    protected-path checks, atomic single-file copies and cancellation.
    """
    try:
        settings = load_settings(config_path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path
    ctx.obj["settings"] = settings


# Register commands
app.add_typer(ops.app)
app.add_typer(search.app)
app.add_typer(resolve.app)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
