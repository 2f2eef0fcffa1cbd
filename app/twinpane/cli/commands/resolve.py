"""Resolve command implementation.

Prints the canonical form of one or more paths.
"""

from typing import Annotated

import typer

from twinpane.cli.runtime import build_profile
from twinpane.errors import FileOperationError
from twinpane.filesystem.resolver import PathResolver
from twinpane.utils.formatting import console, print_error

app = typer.Typer()


@app.command()
def resolve(
    ctx: typer.Context,
    paths: Annotated[list[str], typer.Argument(help="Paths to resolve.")],
) -> None:
    """Expand '~', normalize and follow symbolic links."""
    resolver = PathResolver(profile=build_profile(ctx))
    failed = False

    for path in paths:
        try:
            resolved = resolver.resolve(path)
            console.print(resolved, markup=False, highlight=False, soft_wrap=True)
        except FileOperationError as e:
            print_error(str(e))
            failed = True

    if failed:
        raise typer.Exit(code=1)
