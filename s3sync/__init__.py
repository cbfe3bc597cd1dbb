"""s3sync - Sync files between local directories and S3-compatible storage."""

from .exceptions import (
    S3SyncAddressError,
    S3SyncCancelledError,
    S3SyncConfigError,
    S3SyncDeleteError,
    S3SyncError,
    S3SyncListError,
    S3SyncReadError,
    S3SyncTransferError,
    S3SyncWriteError,
)
from .models import File, ListingPage
from .providers import LocalProvider, S3Provider, StorageProvider, get_provider
from .sync import FileComparator, PrefixCrawler, SyncEngine, SyncOptions, SyncScheduler

__version__ = "0.3.0"

__all__ = [
    "File",
    "ListingPage",
    "StorageProvider",
    "LocalProvider",
    "S3Provider",
    "get_provider",
    "SyncEngine",
    "SyncOptions",
    "SyncScheduler",
    "PrefixCrawler",
    "FileComparator",
    "S3SyncError",
    "S3SyncAddressError",
    "S3SyncCancelledError",
    "S3SyncConfigError",
    "S3SyncDeleteError",
    "S3SyncListError",
    "S3SyncReadError",
    "S3SyncTransferError",
    "S3SyncWriteError",
]
