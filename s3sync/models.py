"""Data models shared by providers and the sync engine."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class File:
    """Metadata of one file or object in a listing."""

    filename: str
    """Relative path (forward slashes), unique within a listing"""

    size: int
    """File size in bytes"""

    last_modified: Optional[datetime] = None
    """Last modification time (timezone-aware), None if not tracked"""

    def is_newer_than(self, other: "File") -> bool:
        """Check whether this file was modified strictly after ``other``.

        A missing timestamp on either side is never considered newer.

        Args:
            other: File to compare against

        Returns:
            True if this file's timestamp is strictly later
        """
        if self.last_modified is None or other.last_modified is None:
            return False
        return self.last_modified > other.last_modified


@dataclass
class ListingPage:
    """One page of a delimiter-scoped object store listing."""

    files: list[File] = field(default_factory=list)
    """Objects directly under the listed prefix (filename is the full key)"""

    common_prefixes: list[str] = field(default_factory=list)
    """Sub-prefixes grouped by the delimiter"""

    next_token: Optional[str] = None
    """Continuation token, None when this is the last page"""
