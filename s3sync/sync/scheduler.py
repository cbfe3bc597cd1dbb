"""Bounded-concurrency execution of copy and delete actions."""

import logging
import threading
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from ..config import DEFAULT_MAX_THREADS
from ..models import File
from ..output import OutputFormatter
from .cancel import CancelToken
from .operations import SyncOperations

logger = logging.getLogger(__name__)

# How long the dispatcher blocks on a slot before re-checking cancellation
SLOT_POLL_INTERVAL: float = 0.5


class SyncScheduler:
    """Executes copy and delete actions under a worker-count ceiling.

    A single bounded semaphore is shared by the copy and the delete phase.
    The dispatcher takes a slot before submitting a unit of work and the
    worker gives it back when the unit finishes, whatever the outcome. A
    failing file is reported and counted; its siblings keep running.

    Examples:
        >>> scheduler = SyncScheduler(SyncOperations(src, dst), output, 10)
        >>> ok, failed = scheduler.execute(to_copy, [], "/data", "s3://b/data")
    """

    def __init__(
        self,
        operations: SyncOperations,
        output: Optional[OutputFormatter] = None,
        max_workers: int = DEFAULT_MAX_THREADS,
        cancel_token: Optional[CancelToken] = None,
    ):
        """Initialize the scheduler.

        Args:
            operations: Copy/delete operations bound to both providers
            output: Output formatter for per-file status lines
            max_workers: Maximum number of actions in flight
            cancel_token: Optional token that stops further dispatching
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.operations = operations
        self.output = output or OutputFormatter()
        self.max_workers = max_workers
        self.cancel_token = cancel_token or CancelToken()

        self._slots = threading.BoundedSemaphore(max_workers)
        self._lock = threading.Lock()
        self._success = 0
        self._failure = 0
        self.not_dispatched = 0

    def execute(
        self,
        to_copy: Sequence[File],
        to_delete: Sequence[File],
        source_base: str,
        dest_base: str,
        public: bool = False,
    ) -> tuple[int, int]:
        """Run all copies, then all deletions, and wait for them to finish.

        Args:
            to_copy: Source files to copy
            to_delete: Destination files to delete
            source_base: Listing root on the source provider
            dest_base: Listing root on the destination provider
            public: Whether copied objects should be publicly readable

        Returns:
            Tuple of (success_count, failure_count); actions that were never
            started because of cancellation count as failures
        """
        self._success = 0
        self._failure = 0
        self.not_dispatched = 0

        logger.debug(
            "Executing %d copy and %d delete action(s) with %d workers",
            len(to_copy),
            len(to_delete),
            self.max_workers,
        )

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="s3sync-sync"
        ) as executor:
            total = len(to_copy)
            for i, file in enumerate(to_copy):
                label = f"({i + 1} / {total}) {file.filename}"
                if not self._dispatch(
                    executor,
                    label,
                    lambda f=file: self.operations.copy_file(
                        f.filename, source_base, dest_base, public
                    ),
                ):
                    self.not_dispatched += total - i
                    break

            if not self.not_dispatched:
                for i, file in enumerate(to_delete):
                    label = f"delete: {file.filename}"
                    if not self._dispatch(
                        executor,
                        label,
                        lambda f=file: self.operations.delete_file(
                            f.filename, dest_base
                        ),
                    ):
                        self.not_dispatched += len(to_delete) - i
                        break
            else:
                self.not_dispatched += len(to_delete)
        # Leaving the executor block waits for every dispatched unit

        if self.not_dispatched:
            self.output.warning(
                f"Sync cancelled: {self.not_dispatched} action(s) not started"
            )
            with self._lock:
                self._failure += self.not_dispatched

        return self._success, self._failure

    def _dispatch(
        self,
        executor: ThreadPoolExecutor,
        label: str,
        action: Callable[[], None],
    ) -> bool:
        """Acquire a slot and submit one unit of work.

        Returns:
            False if the cancel token fired before a slot was free
        """
        while not self._slots.acquire(timeout=SLOT_POLL_INTERVAL):
            if self.cancel_token.cancelled:
                return False
        if self.cancel_token.cancelled:
            self._slots.release()
            return False

        try:
            executor.submit(self._run, label, action)
        except BaseException:
            self._slots.release()
            raise
        return True

    def _run(self, label: str, action: Callable[[], None]) -> None:
        start = time.time()
        try:
            action()
        except Exception as e:
            with self._lock:
                self._failure += 1
            self.output.error(f"{label} ERR: {e}")
            logger.debug("Failed %s in %.2fs", label, time.time() - start)
        else:
            with self._lock:
                self._success += 1
            self.output.info(f"{label} OK")
            logger.debug("Completed %s in %.2fs", label, time.time() - start)
        finally:
            self._slots.release()
