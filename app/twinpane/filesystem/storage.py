"""Storage abstraction consumed by the engine, resolver and search engine.

The core never calls platform file APIs directly; it talks to a Storage
implementation. Failures are reported with the builtin OSError family
(FileNotFoundError, FileExistsError, PermissionError, or OSError with
errno ENOTEMPTY / EXDEV) so callers can translate them uniformly.
"""

import errno
import logging
import os
import shutil
import stat
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Protocol

from twinpane.models.entry import FileSystemEntry

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Protocol for primitive file and directory operations.

    Paths are plain strings. Symbolic links are never followed when
    classifying entries: a link to a directory is reported as a file.
    """

    def exists(self, path: str) -> bool:
        """Check if a file, directory or link exists at path."""
        ...

    def is_file(self, path: str) -> bool:
        """Check if path exists and is not a directory."""
        ...

    def is_dir(self, path: str) -> bool:
        """Check if path is a real directory (not a link to one)."""
        ...

    def make_dirs(self, path: str) -> None:
        """Create a directory and any missing parents."""
        ...

    def list_files(self, path: str, recursive: bool = False) -> list[str]:
        """List non-directory entries of a directory, sorted by name.

        Args:
            path: Directory to list.
            recursive: Include files of all subdirectories.
        """
        ...

    def list_dirs(self, path: str) -> list[str]:
        """List the immediate subdirectories of a directory, sorted by name."""
        ...

    def walk(self, path: str) -> Iterator[str]:
        """Lazily yield every entry below path, depth-first."""
        ...

    def file_size(self, path: str) -> int:
        """Size of a file in bytes (links report their own size)."""
        ...

    def entry(self, path: str) -> FileSystemEntry:
        """Snapshot of the node at path."""
        ...

    def copy_file(self, source: str, destination: str) -> None:
        """Write the content of source to destination, replacing it."""
        ...

    def replace(self, source: str, destination: str) -> None:
        """Atomically rename source over destination."""
        ...

    def move(self, source: str, destination: str) -> None:
        """Relocate a file or directory tree as one unit.

        Raises:
            FileExistsError: If destination already exists.
            OSError: With errno EXDEV if source and destination are on
                different volumes.
        """
        ...

    def remove_file(self, path: str) -> None:
        """Remove a file or link."""
        ...

    def remove_dir(self, path: str, recursive: bool = False) -> None:
        """Remove a directory.

        Raises:
            OSError: With errno ENOTEMPTY if the directory is not empty
                and recursive is False.
        """
        ...

    def read_link(self, path: str) -> str | None:
        """Target of a symbolic link, or None if path is not a link."""
        ...


class LocalStorage:
    """Storage backed by the local filesystem."""

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def is_file(self, path: str) -> bool:
        return os.path.lexists(path) and not self.is_dir(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path) and not os.path.islink(path)

    def make_dirs(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def list_files(self, path: str, recursive: bool = False) -> list[str]:
        if not recursive:
            return [e.path for e in self._scan(path) if not e.is_dir(follow_symlinks=False)]

        files: list[str] = []
        pending = [path]
        while pending:
            current = pending.pop()
            for entry in self._scan(current):
                if entry.is_dir(follow_symlinks=False):
                    pending.append(entry.path)
                else:
                    files.append(entry.path)
        return sorted(files)

    def list_dirs(self, path: str) -> list[str]:
        return [e.path for e in self._scan(path) if e.is_dir(follow_symlinks=False)]

    def walk(self, path: str) -> Iterator[str]:
        stack: list[Iterator[os.DirEntry[str]]] = [iter(self._scan(path))]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue
            yield entry.path
            if entry.is_dir(follow_symlinks=False):
                try:
                    stack.append(iter(self._scan(entry.path)))
                except PermissionError:
                    logger.warning("Permission denied scanning directory: %s", entry.path)

    def file_size(self, path: str) -> int:
        return os.lstat(path).st_size

    def entry(self, path: str) -> FileSystemEntry:
        st = os.lstat(path)
        is_dir = stat.S_ISDIR(st.st_mode)
        full_path = os.path.abspath(path)
        return FileSystemEntry(
            name=os.path.basename(full_path) or full_path,
            path=full_path,
            size=0 if is_dir else st.st_size,
            is_dir=is_dir,
            modified=datetime.fromtimestamp(st.st_mtime, tz=UTC),
        )

    def copy_file(self, source: str, destination: str) -> None:
        # Links are recreated as links rather than dereferenced
        shutil.copy2(source, destination, follow_symlinks=False)

    def replace(self, source: str, destination: str) -> None:
        os.replace(source, destination)

    def move(self, source: str, destination: str) -> None:
        if os.path.lexists(destination):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), destination)
        os.rename(source, destination)

    def remove_file(self, path: str) -> None:
        os.unlink(path)

    def remove_dir(self, path: str, recursive: bool = False) -> None:
        if recursive:
            shutil.rmtree(path)
        else:
            os.rmdir(path)

    def read_link(self, path: str) -> str | None:
        if not os.path.islink(path):
            return None
        return os.readlink(path)

    @staticmethod
    def _scan(path: str) -> list[os.DirEntry[str]]:
        with os.scandir(path) as it:
            return sorted(it, key=lambda e: e.name)
