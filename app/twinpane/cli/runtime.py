"""Shared helpers for CLI commands.

Builds engines from the settings loaded by the main callback and runs
long operations on a worker thread behind a Rich progress bar, turning
Ctrl-C into a cooperative cancellation request.
"""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

import typer
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

from twinpane.core.cancellation import CancellationToken
from twinpane.core.config import EngineSettings
from twinpane.filesystem.operator import FileOperationEngine, ProgressCallback
from twinpane.filesystem.platform import PlatformProfile, get_profile
from twinpane.models.operation import OperationProgress
from twinpane.utils.formatting import err_console, print_warning

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Seconds between checks for Ctrl-C while the worker runs
_POLL_INTERVAL = 0.1


def get_settings(ctx: typer.Context) -> EngineSettings:
    """Settings loaded by the main callback (defaults if absent)."""
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    settings = obj.get("settings")
    return settings if isinstance(settings, EngineSettings) else EngineSettings()


def build_engine(ctx: typer.Context) -> FileOperationEngine:
    """Create an engine configured from the current settings."""
    return FileOperationEngine.from_settings(get_settings(ctx))


def build_profile(ctx: typer.Context) -> PlatformProfile:
    """Platform profile selected by the current settings."""
    return get_profile(get_settings(ctx).platform)


def run_operation(
    label: str,
    call: Callable[[ProgressCallback, CancellationToken], T],
) -> T:
    """Run an engine call on a worker thread with a progress bar.

    Ctrl-C cancels the token; the call then stops at its next
    cancellation checkpoint and its OperationCancelledError is re-raised
    here.

    Args:
        label: Description shown next to the progress bar.
        call: Receives the progress callback and the cancellation token.

    Returns:
        Whatever call returns.
    """
    token = CancellationToken()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        transient=True,
    ) as bar:
        task = bar.add_task(label, total=None)

        def on_progress(snapshot: OperationProgress) -> None:
            bar.update(
                task,
                completed=snapshot.bytes_processed,
                total=snapshot.total_bytes or None,
            )

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="twinpane") as pool:
            future = pool.submit(call, on_progress, token)
            while True:
                try:
                    return future.result(timeout=_POLL_INTERVAL)
                except TimeoutError:
                    continue
                except KeyboardInterrupt:
                    logger.debug("Interrupt received, cancelling %s", label)
                    token.cancel()
                    print_warning("Cancelling at the next safe point...")
                    return future.result()
