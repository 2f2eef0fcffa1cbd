"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import pytest
from twinpane.filesystem.memory import InMemoryStorage
from twinpane.filesystem.operator import FileOperationEngine
from twinpane.filesystem.platform import PlatformProfile, posix_profile
from twinpane.models.operation import (
    OperationCompleted,
    OperationFailed,
    OperationProgressed,
    OperationStarted,
)

TEST_HOME = "/home/tester"


class EventRecorder:
    """Collects engine notifications in delivery order."""

    def __init__(self, engine: FileOperationEngine) -> None:
        self.events: list[object] = []
        engine.started.connect(self.events.append)
        engine.progressed.connect(self.events.append)
        engine.completed.connect(self.events.append)
        engine.failed.connect(self.events.append)

    @property
    def kinds(self) -> list[str]:
        names = {
            OperationStarted: "started",
            OperationProgressed: "progress",
            OperationCompleted: "completed",
            OperationFailed: "failed",
        }
        return [names[type(event)] for event in self.events]

    def of_type(self, kind: type) -> list:
        return [event for event in self.events if isinstance(event, kind)]


@pytest.fixture
def profile() -> PlatformProfile:
    """POSIX platform profile, independent of the host platform."""
    return posix_profile()


@pytest.fixture
def storage() -> InMemoryStorage:
    """Small in-memory tree with a nested project directory."""
    return InMemoryStorage(
        files={
            "/data/readme.txt": "hello world",
            "/data/project/main.cs": "class Main {}",
            "/data/project/src/util.cs": "static class Util {}",
            "/data/project/src/notes.md": "# notes",
        },
        dirs=["/data/empty", TEST_HOME, "/backup"],
    )


@pytest.fixture
def engine(storage: InMemoryStorage, profile: PlatformProfile) -> FileOperationEngine:
    """Engine over the in-memory tree with a fixed home directory."""
    return FileOperationEngine(storage=storage, profile=profile, home=TEST_HOME)


@pytest.fixture
def recorder(engine: FileOperationEngine) -> EventRecorder:
    """Recorder attached to the engine fixture."""
    return EventRecorder(engine)
