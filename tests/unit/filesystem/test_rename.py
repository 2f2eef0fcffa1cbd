"""Tests for FileOperationEngine.rename."""

import pytest
from twinpane.errors import (
    ArgumentInvalidError,
    NameCollisionError,
    PathNotFoundError,
    ProtectedPathError,
)
from twinpane.filesystem.memory import InMemoryStorage
from twinpane.filesystem.operator import FileOperationEngine


class TestRename:
    """Tests for renaming files and directories."""

    def test_rename_with_bare_name(
        self, engine: FileOperationEngine, storage: InMemoryStorage
    ) -> None:
        """A bare name renames within the same parent."""
        engine.rename("/data/readme.txt", "README.md")

        assert storage.read_text("/data/README.md") == "hello world"
        assert not storage.exists("/data/readme.txt")

    def test_rename_with_full_path(
        self, engine: FileOperationEngine, storage: InMemoryStorage
    ) -> None:
        """A full destination path is used as-is."""
        engine.rename("/data/readme.txt", "/data/project/readme.txt")

        assert storage.exists("/data/project/readme.txt")
        assert not storage.exists("/data/readme.txt")

    def test_rename_directory_moves_subtree(
        self, engine: FileOperationEngine, storage: InMemoryStorage
    ) -> None:
        """Renaming a directory carries every descendant along."""
        engine.rename("/data/project", "proj")

        assert storage.read_text("/data/proj/src/util.cs") == "static class Util {}"
        assert not storage.exists("/data/project")

    def test_missing_source(self, engine: FileOperationEngine) -> None:
        """A missing source raises PathNotFoundError."""
        with pytest.raises(PathNotFoundError, match="not found"):
            engine.rename("/data/ghost.txt", "spirit.txt")

    def test_existing_destination(
        self, engine: FileOperationEngine, storage: InMemoryStorage
    ) -> None:
        """An existing destination is never replaced."""
        storage.write("/data/taken.txt", "taken")

        with pytest.raises(NameCollisionError, match="already exists"):
            engine.rename("/data/readme.txt", "taken.txt")

        assert storage.read_text("/data/taken.txt") == "taken"
        assert storage.exists("/data/readme.txt")

    def test_same_name_rejected(self, engine: FileOperationEngine, recorder) -> None:
        """Renaming to the current name is an argument error, reported as failed only."""
        with pytest.raises(ArgumentInvalidError, match="same"):
            engine.rename("/data/readme.txt", "readme.txt")

        assert recorder.kinds == ["failed"]

    @pytest.mark.parametrize("new_name", ["", "   "])
    def test_blank_new_name(self, engine: FileOperationEngine, new_name: str) -> None:
        """A blank new name names the offending parameter."""
        with pytest.raises(ArgumentInvalidError) as exc_info:
            engine.rename("/data/readme.txt", new_name)

        assert exc_info.value.param == "new_name"

    def test_protected_destination(self, engine: FileOperationEngine) -> None:
        """Renaming onto a protected path is refused."""
        with pytest.raises(ProtectedPathError):
            engine.rename("/data/readme.txt", "/usr")
