"""Cooperative cancellation.

A CancellationToken is checked by the engine at explicit checkpoints
(top of every operation, before each file transfer, before each
subdirectory descent, before each search entry). Nothing is ever
interrupted mid-write.
"""

import threading
import time

from twinpane.errors import OperationCancelledError
from twinpane.models.operation import OperationKind


class CancellationToken:
    """Thread-safe cancellation signal with an optional deadline.

    Timeouts are expressed only through the deadline: once it passes the
    token reports itself as cancelled.

    Example:
        >>> token = CancellationToken(timeout=30.0)
        >>> engine.copy("/data/src", "/backup/src", token=token)
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the token.

        Args:
            timeout: Seconds after which the token cancels itself.
                None means no deadline.
        """
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Check if cancellation was requested or the deadline passed."""
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._event.set()
            return True
        return False

    def raise_if_cancelled(self, operation: OperationKind, path: str | None = None) -> None:
        """Raise OperationCancelledError if cancellation was requested.

        Args:
            operation: Operation performing the check.
            path: Path about to be processed.

        Raises:
            OperationCancelledError: If the token is cancelled.
        """
        if self.cancelled:
            raise OperationCancelledError(operation, path)
