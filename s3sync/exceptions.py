"""Exceptions raised by s3sync."""


class S3SyncError(Exception):
    """Base exception for all s3sync errors."""


class S3SyncConfigError(S3SyncError):
    """Raised when the configuration is invalid."""


class S3SyncAddressError(S3SyncError, ValueError):
    """Raised when a storage address cannot be parsed."""


class S3SyncListError(S3SyncError):
    """Raised when listing a storage backend fails."""


class S3SyncCancelledError(S3SyncError):
    """Raised when an operation was cancelled or ran past its deadline."""


class S3SyncTransferError(S3SyncError):
    """Base exception for per-file transfer failures."""


class S3SyncReadError(S3SyncTransferError):
    """Raised when a file cannot be read from a backend."""


class S3SyncWriteError(S3SyncTransferError):
    """Raised when a file cannot be written to a backend."""


class S3SyncDeleteError(S3SyncTransferError):
    """Raised when a file cannot be deleted from a backend."""
