"""Sync engine for s3sync - listing, diffing and transferring files."""

from .cancel import CancelToken
from .comparator import FileComparator, SyncAction, SyncDecision
from .crawler import CRAWL_WORKERS, PrefixCrawler
from .engine import SyncEngine, SyncOptions
from .operations import SyncOperations
from .scanner import DirectoryScanner
from .scheduler import SyncScheduler

__all__ = [
    "SyncEngine",
    "SyncOptions",
    "SyncOperations",
    "SyncScheduler",
    "PrefixCrawler",
    "CRAWL_WORKERS",
    "CancelToken",
    "DirectoryScanner",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
]
