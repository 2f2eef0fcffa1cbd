"""Settings commands.

Shows the effective settings and writes a default settings file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from twinpane.cli.runtime import get_settings
from twinpane.core.config import EngineSettings, SettingsError, save_settings
from twinpane.core.paths import get_config_path
from twinpane.filesystem.operator import FileOperationEngine
from twinpane.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize settings.",
    no_args_is_help=True,
)


def _config_path(ctx: typer.Context) -> Path:
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    path = obj.get("config_path")
    return path if isinstance(path, Path) else get_config_path()


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective settings and protected paths."""
    settings = get_settings(ctx)
    path = _config_path(ctx)

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("file", f"{path}" + ("" if path.exists() else " [muted](not created)[/]"))
    table.add_row("platform", settings.platform)
    table.add_row("log_level", settings.log_level)
    table.add_row("extra_protected_paths", "\n".join(settings.extra_protected_paths) or "-")
    table.add_row("unprotected_paths", "\n".join(settings.unprotected_paths) or "-")
    console.print(table)

    engine = FileOperationEngine.from_settings(settings)
    console.print("\n[bold]Protected paths:[/]")
    for protected in sorted(engine.protected_paths):
        console.print(f"  {protected}", markup=False, highlight=False)


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with default values."""
    path = _config_path(ctx)
    if path.exists() and not force:
        print_info(f"Settings file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=0)

    try:
        saved = save_settings(EngineSettings(), path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")
