"""Cancellation token shared by the crawler and the scheduler."""

import threading
import time
from typing import Optional

from ..exceptions import S3SyncCancelledError


class CancelToken:
    """Signals cancellation to long-running operations.

    A token is cancelled either explicitly through :meth:`cancel` or
    implicitly once its deadline has passed.

    Examples:
        >>> token = CancelToken(timeout=300)
        >>> token.raise_if_cancelled()  # no-op until cancelled or expired
    """

    def __init__(self, timeout: Optional[float] = None):
        """Initialize the token.

        Args:
            timeout: Seconds from now until the token expires (None for never)
        """
        self._event = threading.Event()
        self._deadline: Optional[float] = (
            time.monotonic() + timeout if timeout is not None else None
        )

    def cancel(self) -> None:
        self._event.set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.expired

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, None if there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        """Raise S3SyncCancelledError if the token is cancelled or expired."""
        if self._event.is_set():
            raise S3SyncCancelledError("Operation cancelled")
        if self.expired:
            raise S3SyncCancelledError("Operation timed out")
