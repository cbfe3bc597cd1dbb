"""Utility functions for s3sync."""

import mimetypes
import os
import re
from datetime import datetime, timezone

from .exceptions import S3SyncAddressError

# =============================================================================
# Constants
# =============================================================================

S3_SCHEME: str = "s3://"

# Content type used when the extension is unknown
DEFAULT_CONTENT_TYPE: str = "application/octet-stream"

# Accepts s3://bucket/key, s3:/bucket/key and s3://bucket
_S3_ADDRESS_RE = re.compile(r"^s3://?([^/]+)(?:/(.*))?$")


# =============================================================================
# Address utilities
# =============================================================================


def is_s3_address(address: str) -> bool:
    """Check whether an address points to an S3-compatible object store.

    Args:
        address: Address given on the command line

    Returns:
        True for ``s3://`` addresses
    """
    return address.startswith("s3:/")


def parse_s3_address(address: str) -> tuple[str, str]:
    """Split an ``s3://bucket/path`` address into bucket and key.

    Args:
        address: Address to parse

    Returns:
        Tuple of (bucket, key); the key uses forward slashes and may be empty

    Raises:
        S3SyncAddressError: If the address does not match the expected format

    Examples:
        >>> parse_s3_address("s3://my-bucket/some/dir")
        ('my-bucket', 'some/dir')
        >>> parse_s3_address("s3://my-bucket")
        ('my-bucket', '')
    """
    match = _S3_ADDRESS_RE.match(address)
    if match is None:
        raise S3SyncAddressError(
            f"Address {address!r} did not match s3://bucket/path"
        )

    bucket = match.group(1)
    key = (match.group(2) or "").replace(os.sep, "/")
    return bucket, key


# =============================================================================
# Content type detection
# =============================================================================


def detect_content_type(path: str) -> str:
    """Guess the content type of a file from its extension.

    Args:
        path: File path or object key

    Returns:
        MIME type string (defaults to 'application/octet-stream')
    """
    _, ext = os.path.splitext(path)
    if not ext:
        return DEFAULT_CONTENT_TYPE
    if not mimetypes.inited:
        mimetypes.init()
    mime_type = mimetypes.types_map.get(ext.lower())
    return mime_type or DEFAULT_CONTENT_TYPE


# =============================================================================
# Timestamp and size formatting
# =============================================================================


def timestamp_to_datetime(timestamp: float) -> datetime:
    """Convert a Unix timestamp to a timezone-aware UTC datetime."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
