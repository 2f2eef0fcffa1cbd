"""Filesystem entry snapshot model.

A FileSystemEntry captures one node as seen at enumeration time. It is
never mutated afterwards and may go stale as the filesystem changes.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class FileSystemEntry:
    """Immutable snapshot of a file or directory.

    Attributes:
        name: Final path component.
        path: Absolute path of the entry.
        size: Size in bytes (always 0 for directories).
        is_dir: Whether the entry is a directory.
        modified: Last modification time (UTC).
    """

    name: str
    path: str
    size: int
    is_dir: bool
    modified: datetime

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.size < 0:
            msg = f"Size cannot be negative, got {self.size}"
            raise ValueError(msg)
        if self.is_dir and self.size != 0:
            msg = f"Directory size must be 0, got {self.size}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "path": self.path,
            "size": self.size,
            "is_dir": self.is_dir,
            "modified": self.modified.isoformat(),
        }
