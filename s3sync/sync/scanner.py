"""Directory scanning utilities for sync operations."""

import logging
from pathlib import Path
from typing import Optional

from ..exceptions import S3SyncListError
from ..models import File
from ..utils import timestamp_to_datetime
from .cancel import CancelToken

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """Scans local directories and builds file lists.

    The walk is a single-threaded recursive pass. Symbolic links to files
    are recorded with the size and modification time of their target;
    symbolic links to directories are not followed. Special files such as
    FIFOs and sockets are skipped.

    Examples:
        >>> scanner = DirectoryScanner()
        >>> files = scanner.scan_local(Path("/sync/folder"))
        >>> for f in files:
        ...     print(f.filename)
    """

    def scan_local(
        self,
        directory: Path,
        base_path: Optional[Path] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> list[File]:
        """Recursively scan a local directory.

        Args:
            directory: Directory to scan
            base_path: Base path for calculating relative paths (defaults to directory)
            cancel_token: Optional token checked before each directory

        Returns:
            List of File objects with forward-slash relative filenames

        Raises:
            S3SyncListError: If a directory or file cannot be read
            S3SyncCancelledError: If the cancel token fires
        """
        if base_path is None:
            base_path = directory
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        files: list[File] = []

        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise S3SyncListError(f"Cannot read directory {directory}: {e}") from e

        for item in entries:
            if item.is_symlink() and item.is_dir():
                logger.debug("Not following directory link: %s", item)
                continue

            if item.is_dir():
                files.extend(self.scan_local(item, base_path, cancel_token))
                continue

            # Dangling links still go through _stat_file so the scan fails
            if not item.is_file() and item.exists():
                logger.debug("Skipping special file: %s", item)
                continue

            files.append(self._stat_file(item, base_path))

        return files

    @staticmethod
    def _stat_file(file_path: Path, base_path: Path) -> File:
        try:
            # stat() follows symlinks to the target's metadata
            stat = file_path.stat()
        except OSError as e:
            raise S3SyncListError(f"Cannot stat {file_path}: {e}") from e

        return File(
            # Use as_posix() to ensure forward slashes on all platforms
            filename=file_path.relative_to(base_path).as_posix(),
            size=stat.st_size,
            last_modified=timestamp_to_datetime(stat.st_mtime),
        )
