"""Unit tests for CancellationToken."""

import threading
from unittest.mock import patch

import pytest
from twinpane.core.cancellation import CancellationToken
from twinpane.errors import OperationCancelledError, OperationErrorKind
from twinpane.models.operation import OperationKind


class TestCancellationToken:
    """Tests for explicit and deadline-based cancellation."""

    def test_initially_not_cancelled(self) -> None:
        """A fresh token is live."""
        token = CancellationToken()

        assert token.cancelled is False
        token.raise_if_cancelled(OperationKind.COPY)

    def test_cancel(self) -> None:
        """cancel() is observed by raise_if_cancelled."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError) as exc_info:
            token.raise_if_cancelled(OperationKind.COPY, "/data/a.txt")

        assert exc_info.value.kind == OperationErrorKind.CANCELLED
        assert exc_info.value.operation == OperationKind.COPY
        assert exc_info.value.path == "/data/a.txt"

    def test_cancel_from_other_thread(self) -> None:
        """Cancellation requested on another thread is visible."""
        token = CancellationToken()
        worker = threading.Thread(target=token.cancel)
        worker.start()
        worker.join()

        assert token.cancelled is True

    def test_deadline(self) -> None:
        """The token cancels itself once the deadline passes."""
        with patch("twinpane.core.cancellation.time.monotonic", return_value=100.0):
            token = CancellationToken(timeout=5.0)

        with patch("twinpane.core.cancellation.time.monotonic", return_value=104.9):
            assert token.cancelled is False
        with patch("twinpane.core.cancellation.time.monotonic", return_value=105.0):
            assert token.cancelled is True

    def test_deadline_is_sticky(self) -> None:
        """Once expired, the token stays cancelled."""
        with patch("twinpane.core.cancellation.time.monotonic", return_value=0.0):
            token = CancellationToken(timeout=1.0)
        with patch("twinpane.core.cancellation.time.monotonic", return_value=2.0):
            assert token.cancelled is True
        with patch("twinpane.core.cancellation.time.monotonic", return_value=0.5):
            assert token.cancelled is True
