"""Operation models: kinds, progress snapshots and notification payloads.

Each instance is an independent immutable value. Progress snapshots are
produced repeatedly during one operation and share no mutable state.
"""

from dataclasses import dataclass
from enum import Enum


class OperationKind(str, Enum):
    """Name of an operation as reported in progress, events and errors.

    Attributes:
        DELETE: Delete a file or directory tree.
        RENAME: Rename a node within its volume.
        COPY: Copy a file or directory tree.
        MOVE: Move a file or directory tree.
        CLEANUP: Remove orphaned temporary copy artifacts.
        SEARCH: Glob search over a tree.
        RESOLVE: Canonicalize a path.
    """

    DELETE = "delete"
    RENAME = "rename"
    COPY = "copy"
    MOVE = "move"
    CLEANUP = "cleanup"
    SEARCH = "search"
    RESOLVE = "resolve"


def _percent(processed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return processed * 100.0 / total


@dataclass(frozen=True, slots=True)
class OperationProgress:
    """Progress snapshot delivered to progress callbacks.

    Attributes:
        operation: Operation being performed.
        current_path: Path processed most recently.
        bytes_processed: Bytes handled so far.
        total_bytes: Bytes expected in total (0 when unknown or empty).
    """

    operation: OperationKind
    current_path: str
    bytes_processed: int
    total_bytes: int

    @property
    def percent_complete(self) -> float:
        """Percentage complete (0-100). Returns 0 if total_bytes is 0."""
        return _percent(self.bytes_processed, self.total_bytes)


@dataclass(frozen=True, slots=True)
class OperationStarted:
    """Payload of the started signal."""

    operation: OperationKind
    path: str


@dataclass(frozen=True, slots=True)
class OperationProgressed:
    """Payload of the progress signal."""

    bytes_processed: int
    total_bytes: int

    @property
    def percent_complete(self) -> float:
        """Percentage complete (0-100). Returns 0 if total_bytes is 0."""
        return _percent(self.bytes_processed, self.total_bytes)


@dataclass(frozen=True, slots=True)
class OperationCompleted:
    """Payload of the completed signal."""

    operation: OperationKind
    total_bytes: int


@dataclass(frozen=True, slots=True)
class OperationFailed:
    """Payload of the failed signal.

    Attributes:
        operation: Operation that failed.
        path: Path the operation was started on (None if it was missing).
        error: Exception about to be raised to the caller.
    """

    operation: OperationKind
    path: str | None
    error: BaseException
