"""Exception taxonomy for file operations.

Every failure surfaced by the mutation engine, the path resolver and the
search engine is a subclass of FileOperationError carrying the operation
name and the offending path.
"""

from enum import Enum
from typing import ClassVar

from twinpane.models.operation import OperationKind


class OperationErrorKind(str, Enum):
    """Tag identifying the kind of a FileOperationError.

    Attributes:
        PROTECTED_PATH: Mutation attempted on a guarded system path.
        NOT_FOUND: The source path does not exist.
        PERMISSION_DENIED: The storage layer refused access.
        NAME_COLLISION: Destination exists or directory is not empty.
        CIRCULAR_SYMLINK: Symlink cycle or depth bound exceeded.
        CANCELLED: Cooperative cancellation was observed.
        ARGUMENT_INVALID: Null, blank, malformed or equal paths.
    """

    PROTECTED_PATH = "protected_path"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    NAME_COLLISION = "name_collision"
    CIRCULAR_SYMLINK = "circular_symlink"
    CANCELLED = "cancelled"
    ARGUMENT_INVALID = "argument_invalid"


class FileOperationError(Exception):
    """Base exception for file operation errors.

    Attributes:
        operation: Operation that failed.
        path: Path the failure relates to.
    """

    kind: ClassVar[OperationErrorKind]

    def __init__(self, operation: OperationKind, path: str | None, message: str) -> None:
        super().__init__(message)
        self.operation = operation
        self.path = path


class ProtectedPathError(FileOperationError):
    """Raised when an operation targets a protected path."""

    kind = OperationErrorKind.PROTECTED_PATH

    def __init__(self, operation: OperationKind, path: str) -> None:
        super().__init__(
            operation,
            path,
            f"Operation '{operation.value}' not permitted on protected path: {path}",
        )


class PathNotFoundError(FileOperationError):
    """Raised when the source of an operation does not exist."""

    kind = OperationErrorKind.NOT_FOUND

    def __init__(self, operation: OperationKind, path: str, message: str | None = None) -> None:
        super().__init__(operation, path, message or f"Path not found: {path}")


class PermissionDeniedError(FileOperationError):
    """Raised when the storage layer denies access to a non-protected path."""

    kind = OperationErrorKind.PERMISSION_DENIED

    def __init__(self, operation: OperationKind, path: str) -> None:
        super().__init__(
            operation,
            path,
            f"Insufficient permissions to perform '{operation.value}' on path: {path}",
        )


class NameCollisionError(FileOperationError):
    """Raised when a destination already exists or a directory is not empty."""

    kind = OperationErrorKind.NAME_COLLISION

    def __init__(self, operation: OperationKind, path: str, message: str | None = None) -> None:
        super().__init__(operation, path, message or f"Destination already exists: {path}")


class CircularSymlinkError(FileOperationError):
    """Raised when symlink resolution revisits a path or runs too deep."""

    kind = OperationErrorKind.CIRCULAR_SYMLINK

    def __init__(self, operation: OperationKind, path: str) -> None:
        super().__init__(operation, path, f"Circular symbolic link detected at path: {path}")


class OperationCancelledError(FileOperationError):
    """Raised when a cancellation request is observed at a checkpoint."""

    kind = OperationErrorKind.CANCELLED

    def __init__(self, operation: OperationKind, path: str | None) -> None:
        super().__init__(operation, path, f"Operation '{operation.value}' was cancelled")


class ArgumentInvalidError(FileOperationError):
    """Raised for null, blank, malformed or equivalent path arguments.

    Attributes:
        param: Name of the offending parameter.
    """

    kind = OperationErrorKind.ARGUMENT_INVALID

    def __init__(
        self,
        operation: OperationKind,
        param: str,
        message: str,
        path: str | None = None,
    ) -> None:
        super().__init__(operation, path, message)
        self.param = param
