"""Deadline and cancellation carried by every unit of work."""

import threading
import time
from typing import Optional

from stockledger.core.exceptions import OperationCancelledError, OperationTimeoutError


class OperationScope:
    """
    Deadline plus cancellation flag for a single operation.

    Backoff sleeps wait on the cancellation event so that cancel() wakes a
    sleeping caller immediately. check() raises the matching InventoryError
    once the scope is cancelled or expired; callers must call it before every
    store mutation.
    """

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self._deadline = (
            time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        )
        self._cancel_event = cancel_event or threading.Event()

    def cancel(self) -> None:
        """Cancel the operation; wakes any pending sleep."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise if the operation was cancelled or ran out of time."""
        if self.cancelled:
            raise OperationCancelledError()
        if self.expired:
            raise OperationTimeoutError()

    def sleep(self, seconds: float) -> None:
        """
        Sleep for up to `seconds`, aborting early on cancellation or deadline.

        Raises OperationCancelledError / OperationTimeoutError instead of
        returning when the wait was cut short.
        """
        self.check()
        remaining = self.remaining()
        wait = seconds if remaining is None else min(seconds, remaining)
        if self._cancel_event.wait(wait):
            raise OperationCancelledError()
        if remaining is not None and remaining <= seconds:
            raise OperationTimeoutError()

