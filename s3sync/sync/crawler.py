"""Concurrent, prefix-recursive enumeration of object store listings."""

import logging
import time
from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Optional

from ..exceptions import S3SyncListError
from ..models import File, ListingPage
from .cancel import CancelToken

logger = logging.getLogger(__name__)

# Size of the crawl worker pool, independent of the transfer concurrency
CRAWL_WORKERS: int = 10

# Interval for re-checking cancellation and logging progress
POLL_INTERVAL: float = 0.5

ListPageFunc = Callable[[str, Optional[str]], ListingPage]


class PrefixCrawler:
    """Enumerates every object below a prefix of a hierarchical store.

    The store is listed with a delimiter, so each page contains the objects
    directly under a prefix plus the "common prefixes" one level deeper.
    Every newly seen common prefix becomes a new work item, and every page
    that carries a continuation token schedules a follow-up page for the
    same prefix.

    The calling thread acts as the only coordinator: it owns the pending
    queue, the set of dispatched prefixes and the result list. Workers only
    fetch one page each and hand it back through their future, so new work
    is always registered before the task that found it counts as finished.
    The crawl therefore ends exactly when the queue is empty and no page
    request is in flight.

    Examples:
        >>> crawler = PrefixCrawler(provider.list_page)
        >>> files = crawler.crawl("photos/")
    """

    def __init__(
        self,
        list_page: ListPageFunc,
        max_workers: int = CRAWL_WORKERS,
        cancel_token: Optional[CancelToken] = None,
    ):
        """Initialize the crawler.

        Args:
            list_page: Callable fetching one listing page for
                (prefix, continuation_token)
            max_workers: Number of concurrent page requests
            cancel_token: Optional token to abort the crawl
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.list_page = list_page
        self.max_workers = max_workers
        self.cancel_token = cancel_token or CancelToken()

    def crawl(self, root_prefix: str) -> list[File]:
        """List all objects below ``root_prefix``.

        Args:
            root_prefix: Key prefix to enumerate

        Returns:
            Files with filenames relative to ``root_prefix``

        Raises:
            S3SyncListError: If any page request fails
            S3SyncCancelledError: If the cancel token fires
        """
        start = time.time()
        pending: deque[tuple[str, Optional[str]]] = deque([(root_prefix, None)])
        dispatched: set[str] = {root_prefix}
        in_flight: dict[Future, str] = {}
        files: list[File] = []
        pages = 0

        executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="s3sync-crawl"
        )
        try:
            while pending or in_flight:
                self.cancel_token.raise_if_cancelled()

                while pending and len(in_flight) < self.max_workers:
                    prefix, token = pending.popleft()
                    future = executor.submit(self.list_page, prefix, token)
                    in_flight[future] = prefix

                done, _ = wait(
                    in_flight, timeout=self._wait_timeout(), return_when=FIRST_COMPLETED
                )
                if not done:
                    logger.debug(
                        "scanning prefixes (%d working, %d left)...",
                        len(in_flight),
                        len(pending),
                    )
                    continue

                for future in done:
                    prefix = in_flight.pop(future)
                    page = self._page_result(future, prefix)
                    pages += 1
                    files.extend(self._relative_files(page, root_prefix))

                    for sub_prefix in page.common_prefixes:
                        if sub_prefix not in dispatched:
                            dispatched.add(sub_prefix)
                            pending.append((sub_prefix, None))

                    if page.next_token:
                        pending.append((prefix, page.next_token))
        finally:
            for future in in_flight:
                future.cancel()
            executor.shutdown(wait=not in_flight, cancel_futures=True)

        logger.debug(
            "Crawled %d prefix(es), %d page(s), %d file(s) in %.2fs",
            len(dispatched),
            pages,
            len(files),
            time.time() - start,
        )
        return files

    def _wait_timeout(self) -> float:
        remaining = self.cancel_token.remaining()
        if remaining is None:
            return POLL_INTERVAL
        return min(POLL_INTERVAL, remaining)

    @staticmethod
    def _page_result(future: Future, prefix: str) -> ListingPage:
        try:
            return future.result()
        except S3SyncListError:
            raise
        except Exception as e:
            raise S3SyncListError(f"Listing prefix {prefix!r} failed: {e}") from e

    @staticmethod
    def _relative_files(page: ListingPage, root_prefix: str) -> list[File]:
        """Rewrite page keys relative to the crawl root."""
        result = []
        for entry in page.files:
            key = entry.filename
            # Folder placeholder objects
            if key.endswith("/"):
                continue
            if root_prefix and key.startswith(root_prefix):
                key = key[len(root_prefix) :]
            key = key.lstrip("/")
            if not key:
                continue
            result.append(
                File(filename=key, size=entry.size, last_modified=entry.last_modified)
            )
        return result
