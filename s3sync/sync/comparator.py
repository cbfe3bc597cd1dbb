"""File comparison logic for sync operations."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models import File


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    COPY = "copy"
    """Copy source file to destination"""

    DELETE = "delete"
    """Delete destination file"""

    SKIP = "skip"
    """Skip file (no action needed)"""


@dataclass
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    source_file: Optional[File]
    """Source file (if exists)"""

    dest_file: Optional[File]
    """Destination file (if exists)"""

    relative_path: str
    """Relative path of the file"""


class FileComparator:
    """Compares source and destination listings to determine sync actions.

    Files are joined by filename. A source file is copied when it is missing
    on the destination, when the sizes differ or when the source is strictly
    newer. Destination-only files become delete candidates, but only when
    deletion is enabled.
    """

    def __init__(self, delete_enabled: bool = False):
        """Initialize file comparator.

        Args:
            delete_enabled: Whether destination-only files should be deleted
        """
        self.delete_enabled = delete_enabled

    def classify(
        self, source_files: Iterable[File], dest_files: Iterable[File]
    ) -> tuple[list[File], list[File]]:
        """Split two listings into files to copy and files to delete.

        Args:
            source_files: Listing of the source side
            dest_files: Listing of the destination side

        Returns:
            Tuple of (to_copy, to_delete); to_copy holds source files,
            to_delete holds destination files
        """
        decisions = self.compare_files(
            {f.filename: f for f in source_files},
            {f.filename: f for f in dest_files},
        )
        to_copy = [
            d.source_file
            for d in decisions
            if d.action == SyncAction.COPY and d.source_file is not None
        ]
        to_delete = [
            d.dest_file
            for d in decisions
            if d.action == SyncAction.DELETE and d.dest_file is not None
        ]
        return to_copy, to_delete

    def compare_files(
        self,
        source_files: dict[str, File],
        dest_files: dict[str, File],
    ) -> list[SyncDecision]:
        """Compare source and destination files and determine sync actions.

        Args:
            source_files: Dictionary mapping filename to source File
            dest_files: Dictionary mapping filename to destination File

        Returns:
            List of SyncDecision objects sorted by path
        """
        decisions: list[SyncDecision] = []

        for path in sorted(source_files):
            decisions.append(
                self._compare_source_file(path, source_files[path], dest_files.get(path))
            )

        if self.delete_enabled:
            for path in sorted(dest_files):
                if path not in source_files:
                    decisions.append(self._handle_dest_only(path, dest_files[path]))

        decisions.sort(key=lambda d: d.relative_path)
        return decisions

    def _compare_source_file(
        self, path: str, source_file: File, dest_file: Optional[File]
    ) -> SyncDecision:
        if dest_file is None:
            return SyncDecision(
                action=SyncAction.COPY,
                reason="New file",
                source_file=source_file,
                dest_file=None,
                relative_path=path,
            )

        if source_file.size != dest_file.size:
            return SyncDecision(
                action=SyncAction.COPY,
                reason=f"Size mismatch ({source_file.size} vs {dest_file.size})",
                source_file=source_file,
                dest_file=dest_file,
                relative_path=path,
            )

        if source_file.is_newer_than(dest_file):
            return SyncDecision(
                action=SyncAction.COPY,
                reason="Source file is newer",
                source_file=source_file,
                dest_file=dest_file,
                relative_path=path,
            )

        return SyncDecision(
            action=SyncAction.SKIP,
            reason="Files are identical",
            source_file=source_file,
            dest_file=dest_file,
            relative_path=path,
        )

    def _handle_dest_only(self, path: str, dest_file: File) -> SyncDecision:
        return SyncDecision(
            action=SyncAction.DELETE,
            reason="No source file",
            source_file=None,
            dest_file=dest_file,
            relative_path=path,
        )
