"""Mutation engine for files and directory trees.

FileOperationEngine deletes, renames, copies and moves nodes through a
Storage implementation and removes leftover temporary copy artifacts.
Every public operation follows the same contract:

1. validate arguments and check the protected-path guard (a failure here
   emits ``failed`` only),
2. emit ``started``,
3. check cancellation, then perform the work, reporting progress,
4. emit ``completed`` with the byte total, or ``failed`` and raise.

Single-file copies are atomic: content is written to a temporary sibling,
verified by size and renamed over the destination. Tree operations are
not atomic and may stop part-way on cancellation or failure.
"""

import errno
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar
from uuid import uuid4

from twinpane.core.cancellation import CancellationToken
from twinpane.core.notifications import OperationSignals
from twinpane.errors import (
    ArgumentInvalidError,
    FileOperationError,
    NameCollisionError,
    PathNotFoundError,
    PermissionDeniedError,
)
from twinpane.filesystem.platform import PlatformProfile, get_profile
from twinpane.filesystem.protected import ProtectedPathGuard
from twinpane.filesystem.storage import LocalStorage, Storage
from twinpane.models.operation import (
    OperationCompleted,
    OperationFailed,
    OperationKind,
    OperationProgress,
    OperationProgressed,
    OperationStarted,
)

if TYPE_CHECKING:
    from twinpane.core.config import EngineSettings

logger = logging.getLogger(__name__)

# Suffix of the temporary sibling used by atomic copies; cleanup removes
# every file carrying it.
TEMP_SUFFIX = ".tmp"

ProgressCallback = Callable[[OperationProgress], None]

T = TypeVar("T")


@dataclass(slots=True)
class _Tally:
    """Running byte count of one operation."""

    operation: OperationKind
    total: int = 0
    processed: int = 0


class FileOperationEngine(OperationSignals):
    """Safe delete, rename, copy, move and cleanup.

    The engine owns a ProtectedPathGuard; every path an operation would
    read from or write to is checked against it before any I/O happens.
    Calls are independent and may run concurrently on different threads.

    Example:
        >>> engine = FileOperationEngine()
        >>> engine.copy("/data/report.pdf", "/backup/report.pdf", overwrite=True)
        >>> engine.delete("/data/old", recursive=True)
    """

    def __init__(
        self,
        storage: Storage | None = None,
        profile: PlatformProfile | None = None,
        home: str | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            storage: Storage to operate on. Defaults to LocalStorage.
            profile: Platform profile. Defaults to the running platform.
            home: Home directory to protect. Defaults to Path.home().
        """
        super().__init__()
        self._storage = storage or LocalStorage()
        self._guard = ProtectedPathGuard(profile=profile, home=home)
        self._profile = self._guard.profile

    @classmethod
    def from_settings(
        cls,
        settings: "EngineSettings",
        storage: Storage | None = None,
        home: str | None = None,
    ) -> "FileOperationEngine":
        """Build an engine from user settings.

        Extra protected paths are added before unprotected paths are
        removed, so an entry in both lists ends up unprotected.

        Args:
            settings: Loaded engine settings.
            storage: Storage to operate on. Defaults to LocalStorage.
            home: Home directory to protect. Defaults to Path.home().

        Returns:
            Configured FileOperationEngine.
        """
        engine = cls(storage=storage, profile=get_profile(settings.platform), home=home)
        for path in settings.extra_protected_paths:
            engine.add_protected_path(path)
        for path in settings.unprotected_paths:
            engine.remove_protected_path(path)
        return engine

    @property
    def storage(self) -> Storage:
        """Storage the engine operates on."""
        return self._storage

    @property
    def profile(self) -> PlatformProfile:
        """Platform profile in effect."""
        return self._profile

    @property
    def protected_paths(self) -> frozenset[str]:
        """Snapshot of the protected paths."""
        return self._guard.protected_paths

    def add_protected_path(self, path: str) -> None:
        """Refuse mutation of path from now on."""
        self._guard.add_protected_path(path)

    def remove_protected_path(self, path: str) -> None:
        """Allow mutation of path from now on."""
        self._guard.remove_protected_path(path)

    def is_protected(self, path: str) -> bool:
        """Check whether path is currently protected."""
        return self._guard.is_protected(path)

    # -- Operations -----------------------------------------------------------

    def delete(
        self,
        path: str,
        recursive: bool = False,
        progress: ProgressCallback | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        """Delete a file, link or directory.

        Deleting a path that does not exist succeeds without doing anything.

        Args:
            path: Path to delete.
            recursive: Delete a non-empty directory with its whole subtree.
            progress: Called after each removed file.
            token: Cancellation token checked before each file and subdirectory.

        Raises:
            ArgumentInvalidError: If path is blank or malformed.
            ProtectedPathError: If path is protected.
            NameCollisionError: If path is a non-empty directory and
                recursive is False.
            PermissionDeniedError: If the storage refuses access.
            OperationCancelledError: If cancellation is observed.
        """
        operation = OperationKind.DELETE
        with self._validation(operation, path):
            self._require_path(operation, "path", path)
            self._guard.guard(path, operation)

        def work(tally: _Tally) -> None:
            if not self._storage.exists(path):
                logger.debug("Nothing to delete at %s", path)
                return
            if not self._storage.is_dir(path):
                tally.total = self._storage.file_size(path)
                self._storage.remove_file(path)
                self._report(tally, path, tally.total, progress)
                return
            if not recursive:
                if self._storage.list_files(path) or self._storage.list_dirs(path):
                    msg = f"Directory is not empty: {path}"
                    raise NameCollisionError(operation, path, msg)
                self._storage.remove_dir(path)
                return
            tally.total = self._tree_size(path)
            self._delete_tree(path, tally, progress, token)

        self._run(operation, path, token, work)

    def rename(
        self,
        path: str,
        new_name: str,
        progress: ProgressCallback | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        """Rename a file or directory.

        Args:
            path: Node to rename.
            new_name: New name within the same parent, or a full
                destination path.
            progress: Called once after the rename.
            token: Cancellation token checked before the rename.

        Raises:
            ArgumentInvalidError: If an argument is blank or malformed, or
                the new location equals the old one.
            ProtectedPathError: If either location is protected.
            PathNotFoundError: If path does not exist.
            NameCollisionError: If the new location already exists.
            PermissionDeniedError: If the storage refuses access.
            OperationCancelledError: If cancellation is observed.
        """
        operation = OperationKind.RENAME
        with self._validation(operation, path):
            self._require_path(operation, "path", path)
            self._require_path(operation, "new_name", new_name)
            destination = self._sibling(path, new_name)
            self._require_distinct(operation, path, destination)
            self._guard.guard(path, operation)
            self._guard.guard(destination, operation)

        def work(tally: _Tally) -> None:
            if not self._storage.exists(path):
                raise PathNotFoundError(operation, path, f"Source not found: {path}")
            if self._storage.exists(destination):
                raise NameCollisionError(operation, destination)
            self._storage.move(path, destination)
            self._report(tally, destination, 0, progress)

        self._run(operation, path, token, work)

    def copy(
        self,
        source: str,
        destination: str,
        overwrite: bool = False,
        progress: ProgressCallback | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        """Copy a file or directory tree.

        Each file is written to a fresh ``<destination>.<random>.tmp``
        sibling, verified by size and renamed into place, so a destination
        file is either the complete copy or untouched. Existing files are
        never used as the temporary. Directory copies report progress after
        every file against the precomputed size of the whole tree.

        Args:
            source: File or directory to copy.
            destination: Target path; missing parent directories are created.
            overwrite: Replace existing destination files.
            progress: Called after each copied file.
            token: Cancellation token checked before each file and subdirectory.

        Raises:
            ArgumentInvalidError: If a path is blank or malformed, the paths
                are equal, or destination lies inside source.
            ProtectedPathError: If either path is protected.
            PathNotFoundError: If source does not exist.
            NameCollisionError: If a destination file exists and overwrite
                is False, or a destination is an existing directory where a
                file is expected.
            PermissionDeniedError: If the storage refuses access.
            OperationCancelledError: If cancellation is observed.
        """
        operation = OperationKind.COPY
        self._check_pair(operation, source, destination)

        def work(tally: _Tally) -> None:
            if not self._storage.exists(source):
                raise PathNotFoundError(operation, source, f"Source not found: {source}")
            self._transfer(operation, source, destination, overwrite, tally, progress, token)

        self._run(operation, source, token, work)

    def move(
        self,
        source: str,
        destination: str,
        progress: ProgressCallback | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        """Move a file or directory tree.

        A direct relocation is attempted first. If the storage cannot do it
        (different volumes, existing destination, unsupported) the source is
        copied with overwrite and then deleted. A failure to delete the
        source after a successful copy is logged and otherwise ignored.

        Args:
            source: File or directory to move.
            destination: Target path; missing parent directories are created.
            progress: Called after the move, or after each file of a fallback copy.
            token: Cancellation token checked before each file and subdirectory.

        Raises:
            ArgumentInvalidError: If a path is blank or malformed, the paths
                are equal, or destination lies inside source.
            ProtectedPathError: If either path is protected.
            PathNotFoundError: If source does not exist.
            PermissionDeniedError: If the storage refuses access.
            OperationCancelledError: If cancellation is observed.
        """
        operation = OperationKind.MOVE
        self._check_pair(operation, source, destination)

        def work(tally: _Tally) -> None:
            if not self._storage.exists(source):
                raise PathNotFoundError(operation, source, f"Source not found: {source}")
            tally.total = self._tree_size(source)
            self._make_parent(destination)
            try:
                self._storage.move(source, destination)
            except PermissionError:
                raise
            except OSError as e:
                logger.info("Direct move of %s failed (%s), copying instead", source, e)
                self._transfer(operation, source, destination, True, tally, progress, token)
                self._discard_source(source)
                return
            self._report(tally, destination, tally.total, progress)

        self._run(operation, source, token, work)

    def cleanup(
        self,
        directory: str,
        recursive: bool = True,
        token: CancellationToken | None = None,
    ) -> int:
        """Remove temporary copy artifacts left behind by interrupted copies.

        Every file whose name ends with TEMP_SUFFIX is removed. Files that
        cannot be removed are logged and skipped.

        Args:
            directory: Directory to clean.
            recursive: Include all subdirectories.
            token: Cancellation token checked before each removal.

        Returns:
            Number of files removed. 0 if the directory does not exist.

        Raises:
            ArgumentInvalidError: If directory is blank or malformed.
            ProtectedPathError: If directory is protected.
            OperationCancelledError: If cancellation is observed.
        """
        operation = OperationKind.CLEANUP
        with self._validation(operation, directory):
            self._require_path(operation, "directory", directory)
            self._guard.guard(directory, operation)

        def work(tally: _Tally) -> int:
            if not self._storage.is_dir(directory):
                return 0
            removed = 0
            for path in self._storage.list_files(directory, recursive=recursive):
                if not path.endswith(TEMP_SUFFIX):
                    continue
                self._checkpoint(token, operation, path)
                try:
                    size = self._storage.file_size(path)
                    self._storage.remove_file(path)
                except OSError as e:
                    logger.warning("Could not remove temporary file %s: %s", path, e)
                    continue
                tally.processed += size
                removed += 1
            if removed:
                logger.info("Removed %d temporary file(s) from %s", removed, directory)
            return removed

        return self._run(operation, directory, token, work)

    # -- Outer contract -------------------------------------------------------

    @contextmanager
    def _validation(self, operation: OperationKind, path: str | None) -> Iterator[None]:
        """Report validation and guard failures through the failed signal."""
        try:
            yield
        except FileOperationError as e:
            self.failed.emit(OperationFailed(operation, path, e))
            raise

    def _run(
        self,
        operation: OperationKind,
        path: str,
        token: CancellationToken | None,
        work: Callable[[_Tally], T],
    ) -> T:
        tally = _Tally(operation)
        self.started.emit(OperationStarted(operation, path))
        try:
            self._checkpoint(token, operation, path)
            result = work(tally)
        except Exception as e:
            error = self._translate(operation, path, e)
            self.failed.emit(OperationFailed(operation, path, error))
            if error is e:
                raise
            raise error from e
        self.completed.emit(OperationCompleted(operation, tally.processed))
        return result

    @staticmethod
    def _translate(operation: OperationKind, path: str, error: Exception) -> Exception:
        """Map storage errors onto the operation error taxonomy."""
        if isinstance(error, FileOperationError) or not isinstance(error, OSError):
            return error
        target = str(error.filename) if error.filename else path
        if isinstance(error, PermissionError):
            return PermissionDeniedError(operation, target)
        if isinstance(error, FileNotFoundError):
            return PathNotFoundError(operation, target)
        if isinstance(error, FileExistsError):
            return NameCollisionError(operation, target)
        if error.errno == errno.ENOTEMPTY:
            return NameCollisionError(operation, target, f"Directory is not empty: {target}")
        return error

    def _check_pair(self, operation: OperationKind, source: str, destination: str) -> None:
        with self._validation(operation, source):
            self._require_path(operation, "source", source)
            self._require_path(operation, "destination", destination)
            self._require_distinct(operation, source, destination)
            self._guard.guard(source, operation)
            self._guard.guard(destination, operation)

    def _require_path(self, operation: OperationKind, param: str, value: str | None) -> None:
        if value is None or not value.strip():
            msg = f"{param} cannot be null, empty or whitespace"
            raise ArgumentInvalidError(operation, param, msg)
        if self._profile.has_invalid_chars(value):
            msg = f"{param} contains invalid characters: {value!r}"
            raise ArgumentInvalidError(operation, param, msg, value)

    def _require_distinct(self, operation: OperationKind, source: str, destination: str) -> None:
        sep = self._profile.sep
        src = self._profile.path_key(self._profile.pathmod.normpath(source))
        dst = self._profile.path_key(self._profile.pathmod.normpath(destination))
        if src == dst:
            msg = f"Source and destination are the same path: {source}"
            raise ArgumentInvalidError(operation, "destination", msg, destination)
        if dst.startswith(src.rstrip(sep) + sep):
            msg = f"Destination {destination} is inside source {source}"
            raise ArgumentInvalidError(operation, "destination", msg, destination)

    @staticmethod
    def _checkpoint(token: CancellationToken | None, operation: OperationKind, path: str) -> None:
        if token is not None:
            token.raise_if_cancelled(operation, path)

    def _report(
        self,
        tally: _Tally,
        current_path: str,
        nbytes: int,
        progress: ProgressCallback | None,
    ) -> None:
        tally.processed += nbytes
        if progress is not None:
            progress(OperationProgress(tally.operation, current_path, tally.processed, tally.total))
        self.progressed.emit(OperationProgressed(tally.processed, tally.total))

    # -- Work -------------------------------------------------------------------

    def _sibling(self, path: str, new_name: str) -> str:
        pathmod = self._profile.pathmod
        parent = pathmod.dirname(self._profile.strip_separators(path))
        return pathmod.join(parent, new_name)

    def _make_parent(self, path: str) -> None:
        parent = self._profile.pathmod.dirname(self._profile.strip_separators(path))
        if parent:
            self._storage.make_dirs(parent)

    def _tree_size(self, path: str) -> int:
        if not self._storage.is_dir(path):
            return self._storage.file_size(path)
        files = self._storage.list_files(path, recursive=True)
        return sum(self._storage.file_size(f) for f in files)

    def _transfer(
        self,
        operation: OperationKind,
        source: str,
        destination: str,
        overwrite: bool,
        tally: _Tally,
        progress: ProgressCallback | None,
        token: CancellationToken | None,
    ) -> None:
        """Copy a file or tree, reporting progress per file."""
        pathmod = self._profile.pathmod
        tally.total = self._tree_size(source)

        if not self._storage.is_dir(source):
            self._copy_file(operation, source, destination, overwrite)
            self._report(tally, destination, tally.total, progress)
            return

        pending = [(source, destination)]
        while pending:
            src_dir, dst_dir = pending.pop()
            self._checkpoint(token, operation, src_dir)
            self._storage.make_dirs(dst_dir)
            for src_file in self._storage.list_files(src_dir):
                self._checkpoint(token, operation, src_file)
                dst_file = pathmod.join(dst_dir, pathmod.basename(src_file))
                self._copy_file(operation, src_file, dst_file, overwrite)
                self._report(tally, dst_file, self._storage.file_size(src_file), progress)
            for src_sub in reversed(self._storage.list_dirs(src_dir)):
                pending.append((src_sub, pathmod.join(dst_dir, pathmod.basename(src_sub))))

    def _copy_file(
        self,
        operation: OperationKind,
        source: str,
        destination: str,
        overwrite: bool,
    ) -> None:
        """Copy one file through a size-verified temporary sibling."""
        if self._storage.is_dir(destination):
            msg = f"Destination already exists as a directory: {destination}"
            raise NameCollisionError(operation, destination, msg)
        if not overwrite and self._storage.exists(destination):
            msg = f"Destination file already exists: {destination}"
            raise NameCollisionError(operation, destination, msg)

        self._make_parent(destination)
        temp_path = self._temp_name(destination)
        try:
            self._storage.copy_file(source, temp_path)
            expected = self._storage.file_size(source)
            written = self._storage.file_size(temp_path)
            if written != expected:
                msg = f"Size mismatch copying {source}: expected {expected} bytes, wrote {written}"
                raise OSError(errno.EIO, msg)
            self._storage.replace(temp_path, destination)
        except Exception:
            self._discard_temp(temp_path)
            raise
        logger.debug("Copied %s -> %s", source, destination)

    def _temp_name(self, destination: str) -> str:
        """Unused sibling of destination ending in TEMP_SUFFIX."""
        while True:
            temp_path = f"{destination}.{uuid4().hex[:12]}{TEMP_SUFFIX}"
            if not self._storage.exists(temp_path):
                return temp_path

    def _discard_temp(self, temp_path: str) -> None:
        try:
            if self._storage.exists(temp_path):
                self._storage.remove_file(temp_path)
        except OSError as e:
            logger.debug("Could not remove temporary file %s: %s", temp_path, e)

    def _discard_source(self, source: str) -> None:
        """Remove the source of a fallback move. Failures are logged only."""
        try:
            if self._storage.is_dir(source):
                self._storage.remove_dir(source, recursive=True)
            else:
                self._storage.remove_file(source)
        except OSError as e:
            logger.warning("Moved by copy but could not remove source %s: %s", source, e)

    def _delete_tree(
        self,
        root: str,
        tally: _Tally,
        progress: ProgressCallback | None,
        token: CancellationToken | None,
    ) -> None:
        """Remove a tree depth-first, files before their directory."""
        operation = tally.operation
        pending = [(root, False)]
        while pending:
            directory, emptied = pending.pop()
            if emptied:
                self._storage.remove_dir(directory)
                continue
            self._checkpoint(token, operation, directory)
            pending.append((directory, True))
            for path in self._storage.list_files(directory):
                self._checkpoint(token, operation, path)
                size = self._storage.file_size(path)
                self._storage.remove_file(path)
                self._report(tally, path, size, progress)
            pending.extend((sub, False) for sub in reversed(self._storage.list_dirs(directory)))
