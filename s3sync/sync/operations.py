"""Single-file copy and delete operations between providers."""

import logging
import shutil
import tempfile
from contextlib import closing
from typing import TYPE_CHECKING

from ..exceptions import S3SyncReadError
from ..utils import format_size

if TYPE_CHECKING:
    from ..providers.base import StorageProvider

logger = logging.getLogger(__name__)

# Files up to this size are buffered in memory, larger ones spill to disk
SPOOL_MAX_SIZE: int = 8 * 1024 * 1024

COPY_CHUNK_SIZE: int = 1024 * 1024


class SyncOperations:
    """Unified copy/delete operations between a source and a destination."""

    def __init__(self, source: "StorageProvider", dest: "StorageProvider"):
        """Initialize sync operations.

        Args:
            source: Provider files are read from
            dest: Provider files are written to and deleted from
        """
        self.source = source
        self.dest = dest

    def copy_file(
        self,
        relative_path: str,
        source_base: str,
        dest_base: str,
        public: bool = False,
    ) -> None:
        """Copy one file from the source to the destination.

        The source content is read completely before the destination write
        starts, so a failing read never leaves a truncated destination file.

        Args:
            relative_path: Filename relative to both bases
            source_base: Listing root on the source provider
            dest_base: Listing root on the destination provider
            public: Whether the destination object should be publicly readable

        Raises:
            S3SyncTransferError: If reading or writing fails
        """
        source_path = self.source.join_path(source_base, relative_path)
        dest_path = self.dest.join_path(dest_base, relative_path)

        with tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_SIZE) as buffer:
            with closing(self.source.read_file(source_path)) as reader:
                try:
                    shutil.copyfileobj(reader, buffer, COPY_CHUNK_SIZE)
                except Exception as e:
                    raise S3SyncReadError(f"Reading {source_path} failed: {e}") from e

            logger.debug("Read %s from %s", format_size(buffer.tell()), source_path)
            buffer.seek(0)
            self.dest.write_file(dest_path, buffer, public)

    def delete_file(self, relative_path: str, dest_base: str) -> None:
        """Delete one file from the destination.

        Args:
            relative_path: Filename relative to ``dest_base``
            dest_base: Listing root on the destination provider

        Raises:
            S3SyncDeleteError: If the deletion fails
        """
        self.dest.delete_file(self.dest.join_path(dest_base, relative_path))
