"""Tests for BackgroundOperations."""

import asyncio
import threading

import pytest
from twinpane.errors import ArgumentInvalidError, ProtectedPathError
from twinpane.filesystem.background import BackgroundOperations
from twinpane.filesystem.memory import InMemoryStorage
from twinpane.filesystem.operator import FileOperationEngine
from twinpane.models.entry import FileSystemEntry
from twinpane.models.operation import OperationProgress


class TestBackgroundOperations:
    """Tests for the async facade."""

    def test_copy_runs_off_loop_thread(
        self, engine: FileOperationEngine, storage: InMemoryStorage
    ) -> None:
        """Progress callbacks fire on a worker thread."""
        threads: set[int] = set()

        def on_progress(snapshot: OperationProgress) -> None:
            threads.add(threading.get_ident())

        async def scenario() -> int:
            await BackgroundOperations(engine).copy(
                "/data/project", "/backup/project", progress=on_progress
            )
            return threading.get_ident()

        loop_thread = asyncio.run(scenario())

        assert storage.exists("/backup/project/src/util.cs")
        assert threads
        assert loop_thread not in threads

    def test_mutations(self, engine: FileOperationEngine, storage: InMemoryStorage) -> None:
        """Each mutation is awaited to completion."""
        storage.write("/data/scratch/part.bin.tmp", "x")

        async def scenario() -> int:
            ops = BackgroundOperations(engine)
            await ops.rename("/data/readme.txt", "README")
            await ops.move("/data/README", "/backup/README")
            await ops.delete("/data/project", recursive=True)
            return await ops.cleanup("/data")

        removed = asyncio.run(scenario())

        assert removed == 1
        assert storage.read_text("/backup/README") == "hello world"
        assert not storage.exists("/data/project")

    def test_errors_propagate(self, engine: FileOperationEngine) -> None:
        """Engine errors surface from the awaited call."""

        async def scenario() -> None:
            await BackgroundOperations(engine).delete("/etc", recursive=True)

        with pytest.raises(ProtectedPathError):
            asyncio.run(scenario())

    def test_search_stream(self, engine: FileOperationEngine) -> None:
        """Search results are streamed asynchronously."""

        async def scenario() -> list[FileSystemEntry]:
            return [e async for e in BackgroundOperations(engine).search("/data", "**/*.cs")]

        entries = asyncio.run(scenario())

        assert sorted(e.path for e in entries) == [
            "/data/project/main.cs",
            "/data/project/src/util.cs",
        ]

    def test_search_validation(self, engine: FileOperationEngine) -> None:
        """Validation errors are raised on first iteration."""

        async def scenario() -> None:
            async for _ in BackgroundOperations(engine).search("/data", ""):
                pass

        with pytest.raises(ArgumentInvalidError):
            asyncio.run(scenario())

    def test_engine_property(self, engine: FileOperationEngine) -> None:
        """The wrapped engine is exposed."""
        assert BackgroundOperations(engine).engine is engine
