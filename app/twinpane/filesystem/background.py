"""Run engine operations off the caller's event loop.

Each coroutine hands the blocking engine call to a worker thread with
asyncio.to_thread. Signals and progress callbacks fire on that worker
thread, not on the loop.
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from twinpane.core.cancellation import CancellationToken
from twinpane.filesystem.operator import FileOperationEngine, ProgressCallback
from twinpane.filesystem.search import SearchEngine
from twinpane.models.entry import FileSystemEntry

logger = logging.getLogger(__name__)

_DONE = object()


class BackgroundOperations:
    """Async facade over a FileOperationEngine and a SearchEngine.

    Example:
        >>> ops = BackgroundOperations(FileOperationEngine())
        >>> await ops.copy("/data/src", "/backup/src")
        >>> async for entry in ops.search("/data", "**/*.log"):
        ...     print(entry.path)
    """

    def __init__(
        self,
        engine: FileOperationEngine,
        search_engine: SearchEngine | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            engine: Engine performing mutations.
            search_engine: Engine performing searches. Defaults to one
                sharing the mutation engine's storage and profile.
        """
        self._engine = engine
        self._search_engine = search_engine or SearchEngine(engine.storage, engine.profile)

    @property
    def engine(self) -> FileOperationEngine:
        """Wrapped mutation engine."""
        return self._engine

    async def delete(
        self,
        path: str,
        recursive: bool = False,
        progress: ProgressCallback | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        await asyncio.to_thread(self._engine.delete, path, recursive, progress, token)

    async def rename(
        self,
        path: str,
        new_name: str,
        progress: ProgressCallback | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        await asyncio.to_thread(self._engine.rename, path, new_name, progress, token)

    async def copy(
        self,
        source: str,
        destination: str,
        overwrite: bool = False,
        progress: ProgressCallback | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        await asyncio.to_thread(
            self._engine.copy, source, destination, overwrite, progress, token
        )

    async def move(
        self,
        source: str,
        destination: str,
        progress: ProgressCallback | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        await asyncio.to_thread(self._engine.move, source, destination, progress, token)

    async def cleanup(
        self,
        directory: str,
        recursive: bool = True,
        token: CancellationToken | None = None,
    ) -> int:
        return await asyncio.to_thread(self._engine.cleanup, directory, recursive, token)

    async def search(
        self,
        root: str,
        pattern: str,
        token: CancellationToken | None = None,
    ) -> AsyncIterator[FileSystemEntry]:
        """Stream search results, enumerating one entry per worker hop.

        Validation errors are raised on the first iteration.
        """
        matches = await asyncio.to_thread(self._search_engine.search, root, pattern, token)
        while True:
            entry = await asyncio.to_thread(next, matches, _DONE)
            if entry is _DONE:
                return
            yield entry
