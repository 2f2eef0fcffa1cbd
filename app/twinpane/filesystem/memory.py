"""In-memory Storage implementation.

InMemoryStorage keeps a POSIX-style tree of files, directories and
symbolic links in a dictionary. It behaves like LocalStorage, including
the errors it raises, and adds two knobs real filesystems make awkward
to reproduce: simulated mount points (moves between them fail with
EXDEV) and read-only subtrees (writes fail with EACCES).
"""

import errno
import os
import posixpath
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

from twinpane.models.entry import FileSystemEntry


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class _File:
    data: bytes
    modified: datetime = field(default_factory=_now)


@dataclass(slots=True)
class _Dir:
    modified: datetime = field(default_factory=_now)


@dataclass(slots=True)
class _Link:
    target: str
    modified: datetime = field(default_factory=_now)


_Node = _File | _Dir | _Link


def _oserror(cls: type[OSError], code: int, path: str) -> OSError:
    return cls(code, os.strerror(code), path)


class InMemoryStorage:
    """Storage holding the whole tree in memory.

    Example:
        >>> storage = InMemoryStorage(files={"/data/a.txt": "hello"})
        >>> storage.is_file("/data/a.txt")
        True
        >>> storage.list_files("/data")
        ['/data/a.txt']
    """

    def __init__(
        self,
        files: Mapping[str, bytes | str] | None = None,
        dirs: Iterable[str] = (),
        links: Mapping[str, str] | None = None,
        mounts: Iterable[str] = (),
        read_only: Iterable[str] = (),
    ) -> None:
        """Initialize the tree.

        Parent directories of every seeded path are created implicitly.

        Args:
            files: File paths mapped to their content.
            dirs: Directories to create (may be empty).
            links: Symbolic link paths mapped to their targets.
            mounts: Volume roots. Moving between volumes raises EXDEV.
            read_only: Paths whose subtree refuses modification.
        """
        self._nodes: dict[str, _Node] = {"/": _Dir()}
        self._mounts = sorted({self._norm(m) for m in mounts}, key=len, reverse=True)
        self._read_only: set[str] = set()

        for path in dirs:
            self.make_dirs(path)
        for path, content in (files or {}).items():
            self.write(path, content)
        for path, target in (links or {}).items():
            self.symlink(path, target)

        self._read_only = {self._norm(p) for p in read_only}

    # -- Storage protocol ---------------------------------------------------

    def exists(self, path: str) -> bool:
        return self._norm(path) in self._nodes

    def is_file(self, path: str) -> bool:
        node = self._nodes.get(self._norm(path))
        return node is not None and not isinstance(node, _Dir)

    def is_dir(self, path: str) -> bool:
        return isinstance(self._nodes.get(self._norm(path)), _Dir)

    def make_dirs(self, path: str) -> None:
        current = "/"
        for part in self._norm(path).strip("/").split("/"):
            if not part:
                continue
            current = posixpath.join(current, part)
            node = self._nodes.get(current)
            if node is None:
                self._check_writable(current)
                self._nodes[current] = _Dir()
            elif not isinstance(node, _Dir):
                raise _oserror(FileExistsError, errno.EEXIST, current)

    def list_files(self, path: str, recursive: bool = False) -> list[str]:
        root = self._require_dir(path)
        if recursive:
            descendants = self._descendants(root)
            return sorted(p for p in descendants if not isinstance(self._nodes[p], _Dir))
        return [p for p in self._children(root) if not isinstance(self._nodes[p], _Dir)]

    def list_dirs(self, path: str) -> list[str]:
        root = self._require_dir(path)
        return [p for p in self._children(root) if isinstance(self._nodes[p], _Dir)]

    def walk(self, path: str) -> Iterator[str]:
        stack = [iter(self._children(self._require_dir(path)))]
        while stack:
            current = next(stack[-1], None)
            if current is None:
                stack.pop()
                continue
            # Entries removed while the walk is suspended are skipped
            if current not in self._nodes:
                continue
            yield current
            if isinstance(self._nodes.get(current), _Dir):
                stack.append(iter(self._children(current)))

    def file_size(self, path: str) -> int:
        node = self._require(path)
        if isinstance(node, _File):
            return len(node.data)
        if isinstance(node, _Link):
            return len(node.target.encode())
        return 0

    def entry(self, path: str) -> FileSystemEntry:
        key = self._norm(path)
        node = self._require(key)
        is_dir = isinstance(node, _Dir)
        return FileSystemEntry(
            name=posixpath.basename(key) or key,
            path=key,
            size=0 if is_dir else self.file_size(key),
            is_dir=is_dir,
            modified=node.modified,
        )

    def copy_file(self, source: str, destination: str) -> None:
        src, dst = self._norm(source), self._norm(destination)
        node = self._require(src)
        if isinstance(node, _Dir):
            raise _oserror(IsADirectoryError, errno.EISDIR, src)
        self._prepare_target(dst)
        if isinstance(node, _Link):
            self._nodes[dst] = _Link(node.target)
        else:
            self._nodes[dst] = _File(node.data, node.modified)

    def replace(self, source: str, destination: str) -> None:
        src, dst = self._norm(source), self._norm(destination)
        node = self._require(src)
        self._check_writable(src)
        self._prepare_target(dst)
        del self._nodes[src]
        self._nodes[dst] = node

    def move(self, source: str, destination: str) -> None:
        src, dst = self._norm(source), self._norm(destination)
        self._require(src)
        if dst in self._nodes:
            raise _oserror(FileExistsError, errno.EEXIST, dst)
        self._require_dir(posixpath.dirname(dst))
        self._check_writable(src)
        self._check_writable(dst)
        if self._volume(src) != self._volume(dst):
            raise _oserror(OSError, errno.EXDEV, dst)
        if dst.startswith(src.rstrip("/") + "/"):
            raise _oserror(OSError, errno.EINVAL, dst)

        moved = [src, *self._descendants(src)]
        for old in moved:
            self._nodes[dst + old[len(src) :]] = self._nodes.pop(old)

    def remove_file(self, path: str) -> None:
        key = self._norm(path)
        node = self._require(key)
        if isinstance(node, _Dir):
            raise _oserror(IsADirectoryError, errno.EISDIR, key)
        self._check_writable(key)
        del self._nodes[key]

    def remove_dir(self, path: str, recursive: bool = False) -> None:
        key = self._require_dir(path)
        descendants = self._descendants(key)
        if descendants and not recursive:
            raise _oserror(OSError, errno.ENOTEMPTY, key)
        for target in (key, *descendants):
            self._check_writable(target)
        for target in (*descendants, key):
            del self._nodes[target]

    def read_link(self, path: str) -> str | None:
        node = self._nodes.get(self._norm(path))
        return node.target if isinstance(node, _Link) else None

    # -- Seeding and inspection ---------------------------------------------

    def write(self, path: str, content: bytes | str) -> None:
        """Create or overwrite a file, creating parents as needed."""
        key = self._norm(path)
        data = content.encode() if isinstance(content, str) else content
        self.make_dirs(posixpath.dirname(key))
        self._prepare_target(key)
        self._nodes[key] = _File(data)

    def symlink(self, path: str, target: str) -> None:
        """Create a symbolic link, creating parents as needed."""
        key = self._norm(path)
        self.make_dirs(posixpath.dirname(key))
        self._prepare_target(key)
        self._nodes[key] = _Link(target)

    def read_bytes(self, path: str) -> bytes:
        """Content of a file."""
        node = self._require(path)
        if not isinstance(node, _File):
            raise _oserror(IsADirectoryError, errno.EISDIR, self._norm(path))
        return node.data

    def read_text(self, path: str) -> str:
        """Content of a file decoded as UTF-8."""
        return self.read_bytes(path).decode()

    def all_files(self) -> list[str]:
        """Every non-directory path in the tree, sorted."""
        return sorted(p for p, node in self._nodes.items() if not isinstance(node, _Dir))

    # -- Internals ------------------------------------------------------------

    @staticmethod
    def _norm(path: str) -> str:
        return posixpath.normpath(posixpath.join("/", path))

    def _require(self, path: str) -> _Node:
        key = self._norm(path)
        try:
            return self._nodes[key]
        except KeyError:
            raise _oserror(FileNotFoundError, errno.ENOENT, key) from None

    def _require_dir(self, path: str) -> str:
        key = self._norm(path)
        if not isinstance(self._require(key), _Dir):
            raise _oserror(NotADirectoryError, errno.ENOTDIR, key)
        return key

    def _prepare_target(self, path: str) -> None:
        """Check that a file may be created or replaced at path."""
        self._require_dir(posixpath.dirname(path))
        if isinstance(self._nodes.get(path), _Dir):
            raise _oserror(IsADirectoryError, errno.EISDIR, path)
        self._check_writable(path)

    def _children(self, path: str) -> list[str]:
        return sorted(p for p in self._nodes if p != path and posixpath.dirname(p) == path)

    def _descendants(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        return sorted(p for p in self._nodes if p != path and p.startswith(prefix))

    def _volume(self, path: str) -> str:
        for mount in self._mounts:
            if path == mount or path.startswith(mount.rstrip("/") + "/"):
                return mount
        return "/"

    def _check_writable(self, path: str) -> None:
        current = path
        while True:
            if current in self._read_only:
                raise _oserror(PermissionError, errno.EACCES, path)
            parent = posixpath.dirname(current)
            if parent == current:
                return
            current = parent
