"""Data models for twinpane.

This module exports the core data structures shared by the engine,
the search engine and the notification layer.
"""

from twinpane.models.entry import FileSystemEntry
from twinpane.models.operation import (
    OperationCompleted,
    OperationFailed,
    OperationKind,
    OperationProgress,
    OperationProgressed,
    OperationStarted,
)

__all__ = [
    "FileSystemEntry",
    "OperationCompleted",
    "OperationFailed",
    "OperationKind",
    "OperationProgress",
    "OperationProgressed",
    "OperationStarted",
]
