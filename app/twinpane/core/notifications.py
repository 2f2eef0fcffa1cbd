"""Operation notifications.

Signals are explicit lists of handlers (observer pattern). Emitting a
signal calls every connected handler synchronously on the emitting
thread; with no handlers connected the payload is dropped.
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, TypeVar

from twinpane.models.operation import (
    OperationCompleted,
    OperationFailed,
    OperationProgressed,
    OperationStarted,
)

if TYPE_CHECKING:
    from twinpane.filesystem.operator import FileOperationEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Signal(Generic[T]):
    """A list of handlers receiving one payload type."""

    def __init__(self) -> None:
        self._handlers: list[Callable[[T], None]] = []

    def connect(self, handler: Callable[[T], None]) -> Callable[[T], None]:
        """Register a handler.

        Returns the handler so the method can be used as a decorator.
        """
        self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable[[T], None]) -> None:
        """Unregister a handler. Unknown handlers are ignored."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def emit(self, payload: T) -> None:
        """Deliver a payload to every connected handler in order."""
        for handler in list(self._handlers):
            handler(payload)

    def __len__(self) -> int:
        return len(self._handlers)


class OperationSignals:
    """The four signals exposed by the mutation engine.

    Delivery order per operation is started, zero or more progress
    notifications, then exactly one of completed or failed.

    Attributes:
        started: Emitted once an operation passes validation.
        progressed: Emitted after each unit of work.
        completed: Emitted when an operation succeeds.
        failed: Emitted before any error reaches the caller.
    """

    def __init__(self) -> None:
        self.started: Signal[OperationStarted] = Signal()
        self.progressed: Signal[OperationProgressed] = Signal()
        self.completed: Signal[OperationCompleted] = Signal()
        self.failed: Signal[OperationFailed] = Signal()


def attach_logging(
    engine: "FileOperationEngine",
    log: logging.Logger | None = None,
) -> Callable[[], None]:
    """Log every engine notification.

    Started and completed go to INFO, progress to DEBUG and failures to
    WARNING.

    Args:
        engine: Engine whose signals should be logged.
        log: Logger to write to. Defaults to this module's logger.

    Returns:
        A callable that detaches the logging handlers again.
    """
    target = log or logger

    def on_started(event: OperationStarted) -> None:
        target.info("%s started: %s", event.operation.value, event.path)

    def on_progressed(event: OperationProgressed) -> None:
        target.debug(
            "progress %d/%d bytes (%.1f%%)",
            event.bytes_processed,
            event.total_bytes,
            event.percent_complete,
        )

    def on_completed(event: OperationCompleted) -> None:
        target.info("%s completed: %d bytes", event.operation.value, event.total_bytes)

    def on_failed(event: OperationFailed) -> None:
        target.warning("%s failed on %s: %s", event.operation.value, event.path, event.error)

    engine.started.connect(on_started)
    engine.progressed.connect(on_progressed)
    engine.completed.connect(on_completed)
    engine.failed.connect(on_failed)

    def detach() -> None:
        engine.started.disconnect(on_started)
        engine.progressed.disconnect(on_progressed)
        engine.completed.disconnect(on_completed)
        engine.failed.disconnect(on_failed)

    return detach
