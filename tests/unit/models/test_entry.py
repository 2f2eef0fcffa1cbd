"""Unit tests for FileSystemEntry."""

from datetime import UTC, datetime

import pytest
from twinpane.models.entry import FileSystemEntry

MODIFIED = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)


class TestFileSystemEntry:
    """Tests for FileSystemEntry model."""

    def test_file_entry(self) -> None:
        """A file entry keeps its size."""
        entry = FileSystemEntry("a.txt", "/data/a.txt", 42, False, MODIFIED)

        assert entry.name == "a.txt"
        assert entry.size == 42

    def test_frozen(self) -> None:
        """Entries are immutable snapshots."""
        entry = FileSystemEntry("a.txt", "/data/a.txt", 42, False, MODIFIED)

        with pytest.raises(AttributeError):
            entry.size = 0  # type: ignore[misc]

    def test_empty_path_rejected(self) -> None:
        """An entry must have a path."""
        with pytest.raises(ValueError, match="Path cannot be empty"):
            FileSystemEntry("a", "", 0, False, MODIFIED)

    def test_negative_size_rejected(self) -> None:
        """Sizes cannot be negative."""
        with pytest.raises(ValueError, match="negative"):
            FileSystemEntry("a", "/a", -1, False, MODIFIED)

    def test_directory_size_must_be_zero(self) -> None:
        """Directories always report size 0."""
        with pytest.raises(ValueError, match="Directory size must be 0"):
            FileSystemEntry("d", "/d", 10, True, MODIFIED)

    def test_to_dict(self) -> None:
        """to_dict produces JSON-friendly values."""
        entry = FileSystemEntry("d", "/d", 0, True, MODIFIED)

        assert entry.to_dict() == {
            "name": "d",
            "path": "/d",
            "size": 0,
            "is_dir": True,
            "modified": "2024-05-01T12:30:00+00:00",
        }
