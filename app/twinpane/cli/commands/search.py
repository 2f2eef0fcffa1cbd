"""Search command implementation.

Streams entries matching a glob pattern below a root directory.
"""

import json
from enum import Enum
from typing import Annotated

import typer

from twinpane.cli.runtime import build_profile
from twinpane.core.cancellation import CancellationToken
from twinpane.errors import FileOperationError, OperationCancelledError
from twinpane.filesystem.search import SearchEngine
from twinpane.models.entry import FileSystemEntry
from twinpane.utils.formatting import (
    console,
    create_entry_table,
    print_error,
    print_info,
    print_warning,
)

app = typer.Typer()


class OutputFormat(str, Enum):
    """Output format options for search."""

    TABLE = "table"
    JSON = "json"
    PLAIN = "plain"


@app.command()
def search(
    ctx: typer.Context,
    root: Annotated[str, typer.Argument(help="Directory to search.")],
    pattern: Annotated[str, typer.Argument(help="Glob pattern, e.g. '**/*.py'.")],
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-l",
            help="Stop after this many matches.",
        ),
    ] = None,
) -> None:
    """Find files and directories whose relative path matches a glob."""
    engine = SearchEngine(profile=build_profile(ctx))
    token = CancellationToken()
    matches: list[FileSystemEntry] = []

    try:
        for entry in engine.search(root, pattern, token):
            if output_format == OutputFormat.PLAIN:
                console.print(entry.path, markup=False, highlight=False, soft_wrap=True)
            matches.append(entry)
            if limit and len(matches) >= limit:
                break
    except KeyboardInterrupt:
        token.cancel()
        print_warning(f"Search interrupted after {len(matches)} match(es)")
    except OperationCancelledError:
        print_warning("Search cancelled")
    except FileOperationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.PLAIN:
        return

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([m.to_dict() for m in matches]))
        return

    if not matches:
        print_info(f"No entries below {root} match {pattern}")
        return

    table = create_entry_table(title=f"Matches for {pattern}")
    for entry in matches:
        kind = "[directory]dir[/]" if entry.is_dir else "file"
        size = "-" if entry.is_dir else str(entry.size)
        table.add_row(entry.path, kind, size, entry.modified.strftime("%Y-%m-%d %H:%M"))
    console.print(table)
    console.print(f"\n[muted]{len(matches)} match(es)[/]")
