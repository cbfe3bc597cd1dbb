"""Local filesystem provider."""

import logging
import os
import shutil
import threading
from pathlib import Path
from typing import BinaryIO, Optional

from ..exceptions import (
    S3SyncDeleteError,
    S3SyncListError,
    S3SyncReadError,
    S3SyncWriteError,
)
from ..models import File
from ..sync.cancel import CancelToken
from ..sync.scanner import DirectoryScanner
from .base import StorageProvider

logger = logging.getLogger(__name__)

DIRECTORY_CREATE_PERMS = 0o750


class LocalProvider(StorageProvider):
    """Provider for files on the local filesystem."""

    def __init__(self, scanner: Optional[DirectoryScanner] = None):
        self.scanner = scanner or DirectoryScanner()
        self._mkdir_lock = threading.Lock()

    def list_files(
        self,
        prefix: str,
        cancel_token: Optional[CancelToken] = None,
        missing_ok: bool = False,
    ) -> list[File]:
        root = Path(prefix)
        if not root.exists():
            if not missing_ok:
                raise S3SyncListError(f"Local path does not exist: {root}")
            # Destination that has not been created yet
            logger.debug("Local path %s does not exist, nothing to list", root)
            return []
        if not root.is_dir():
            raise S3SyncListError(f"Local path is not a directory: {root}")
        return self.scanner.scan_local(root, cancel_token=cancel_token)

    def read_file(self, path: str) -> BinaryIO:
        try:
            return open(path, "rb")
        except OSError as e:
            raise S3SyncReadError(f"Opening file failed: {e}") from e

    def write_file(self, path: str, content: BinaryIO, public: bool = False) -> None:
        target = Path(path)
        try:
            with self._mkdir_lock:
                target.parent.mkdir(
                    mode=DIRECTORY_CREATE_PERMS, parents=True, exist_ok=True
                )
        except OSError as e:
            raise S3SyncWriteError(f"Creating file path failed: {e}") from e

        try:
            with open(target, "wb") as f:
                shutil.copyfileobj(content, f)
        except OSError as e:
            raise S3SyncWriteError(f"Writing file failed: {e}") from e

    def delete_file(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            raise S3SyncDeleteError(f"Removing file failed: {e}") from e

    def get_absolute_path(self, path: str) -> str:
        return os.path.abspath(path)

    def join_path(self, base: str, relative_path: str) -> str:
        """Join a listing root and a relative filename.

        Names coming from a remote listing are untrusted: a name that is
        absolute, contains ``..`` segments or otherwise resolves outside
        ``base`` is refused.

        Raises:
            S3SyncWriteError: If the joined path would escape ``base``
        """
        parts = relative_path.split("/")
        if relative_path.startswith("/") or ".." in parts:
            raise S3SyncWriteError(
                f"Refusing path outside of {base}: {relative_path!r}"
            )

        path = os.path.join(base, *parts)
        root = os.path.abspath(base)
        try:
            inside = os.path.commonpath([root, os.path.abspath(path)]) == root
        except ValueError:
            # Different drives on Windows
            inside = False
        if not inside:
            raise S3SyncWriteError(
                f"Refusing path outside of {base}: {relative_path!r}"
            )
        return path
