"""Storage providers for the local filesystem and S3-compatible stores."""

from typing import Optional

from ..utils import is_s3_address
from .base import StorageProvider
from .local import LocalProvider
from .s3 import S3Provider


def get_provider(
    address: str,
    endpoint: Optional[str] = None,
    region: Optional[str] = None,
    timeout: Optional[float] = None,
) -> StorageProvider:
    """Create the provider responsible for an address.

    Args:
        address: ``s3://bucket/path`` or a local filesystem path
        endpoint: Alternate S3 endpoint URL
        region: S3 region name
        timeout: Per-request timeout for S3 in seconds

    Returns:
        S3Provider for ``s3://`` addresses, LocalProvider otherwise
    """
    if is_s3_address(address):
        kwargs: dict = {"endpoint": endpoint, "region": region}
        if timeout is not None:
            kwargs["timeout"] = timeout
        return S3Provider(**kwargs)
    return LocalProvider()


__all__ = [
    "StorageProvider",
    "LocalProvider",
    "S3Provider",
    "get_provider",
]
