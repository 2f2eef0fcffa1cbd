"""File mutation commands.

Provides copy, move, rename, delete and cleanup as top-level commands.
Each runs through the file operation engine with progress display and
Ctrl-C cancellation.
"""

from collections.abc import Callable
from typing import Annotated, TypeVar

import typer

from twinpane.cli.runtime import build_engine, run_operation
from twinpane.core.cancellation import CancellationToken
from twinpane.errors import FileOperationError, OperationCancelledError
from twinpane.filesystem.operator import ProgressCallback
from twinpane.utils.formatting import print_error, print_info, print_success, print_warning

app = typer.Typer()

T = TypeVar("T")


def _execute(label: str, call: Callable[[ProgressCallback, CancellationToken], T]) -> T:
    """Run an engine call and map its failures to exit codes."""
    try:
        return run_operation(label, call)
    except OperationCancelledError as e:
        print_warning(f"{label} cancelled")
        raise typer.Exit(code=130) from e
    except FileOperationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.command()
def copy(
    ctx: typer.Context,
    source: Annotated[str, typer.Argument(help="File or directory to copy.")],
    destination: Annotated[str, typer.Argument(help="Destination path.")],
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", "-o", help="Replace existing destination files."),
    ] = False,
) -> None:
    """Copy a file or directory tree."""
    engine = build_engine(ctx)
    _execute(
        f"Copying {source}",
        lambda progress, token: engine.copy(source, destination, overwrite, progress, token),
    )
    print_success(f"Copied {source} -> {destination}")


@app.command()
def move(
    ctx: typer.Context,
    source: Annotated[str, typer.Argument(help="File or directory to move.")],
    destination: Annotated[str, typer.Argument(help="Destination path.")],
) -> None:
    """Move a file or directory tree, across volumes if needed."""
    engine = build_engine(ctx)
    _execute(
        f"Moving {source}",
        lambda progress, token: engine.move(source, destination, progress, token),
    )
    print_success(f"Moved {source} -> {destination}")


@app.command()
def rename(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or directory to rename.")],
    new_name: Annotated[str, typer.Argument(help="New name or full destination path.")],
) -> None:
    """Rename a file or directory."""
    engine = build_engine(ctx)
    _execute(
        f"Renaming {path}",
        lambda progress, token: engine.rename(path, new_name, progress, token),
    )
    print_success(f"Renamed {path} -> {new_name}")


@app.command()
def delete(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or directory to delete.")],
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Delete directories with their contents."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete a file or directory. Missing paths are not an error."""
    if recursive and not yes:
        confirmed = typer.confirm(f"Delete {path} and everything below it?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    engine = build_engine(ctx)
    _execute(
        f"Deleting {path}",
        lambda progress, token: engine.delete(path, recursive, progress, token),
    )
    print_success(f"Deleted {path}")


@app.command()
def cleanup(
    ctx: typer.Context,
    directory: Annotated[str, typer.Argument(help="Directory to clean.")],
    recursive: Annotated[
        bool,
        typer.Option("--recursive/--no-recursive", help="Include subdirectories."),
    ] = True,
) -> None:
    """Remove temporary files left behind by interrupted copies."""
    engine = build_engine(ctx)
    removed = _execute(
        f"Cleaning {directory}",
        lambda _progress, token: engine.cleanup(directory, recursive, token),
    )
    if removed:
        print_success(f"Removed {removed} temporary file(s) from {directory}")
    else:
        print_info(f"No temporary files found in {directory}")
