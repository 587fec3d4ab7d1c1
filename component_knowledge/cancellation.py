"""Cooperative cancellation for long-running pipeline steps."""

import threading

from .errors import OperationCancelledError


class CancellationToken:
    """Thread-safe cancellation flag checked between store calls.

    The pairwise inference steps check the token between iterations,
    so a cancelled build stops at the next node or edge boundary.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, operation: str) -> None:
        """Raise OperationCancelledError if cancellation was requested."""
        if self._event.is_set():
            raise OperationCancelledError(operation)
