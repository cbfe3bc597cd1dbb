"""Storage provider contract."""

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from ..models import File
from ..sync.cancel import CancelToken


class StorageProvider(ABC):
    """Uniform access to a storage backend.

    Implementations must be safe to call from several worker threads at
    once. All failures are raised as :class:`~s3sync.exceptions.S3SyncError`
    subclasses.
    """

    @abstractmethod
    def list_files(
        self,
        prefix: str,
        cancel_token: Optional[CancelToken] = None,
        missing_ok: bool = False,
    ) -> list[File]:
        """List all files below ``prefix`` with filenames relative to it.

        Listing is all-or-nothing: any failure raises
        :class:`~s3sync.exceptions.S3SyncListError` and no partial result
        is returned.

        Args:
            prefix: Listing root
            cancel_token: Optional token to abort the listing
            missing_ok: Treat a root that does not exist as empty instead
                of failing (used for destinations)
        """

    @abstractmethod
    def read_file(self, path: str) -> BinaryIO:
        """Open ``path`` for reading. The caller closes the stream."""

    @abstractmethod
    def write_file(self, path: str, content: BinaryIO, public: bool = False) -> None:
        """Store ``content`` at ``path``, optionally publicly readable."""

    @abstractmethod
    def delete_file(self, path: str) -> None:
        """Remove the file at ``path``."""

    @abstractmethod
    def get_absolute_path(self, path: str) -> str:
        """Normalize ``path`` into the provider's canonical form."""

    @abstractmethod
    def join_path(self, base: str, relative_path: str) -> str:
        """Join a listing root and a relative (forward-slash) filename."""
