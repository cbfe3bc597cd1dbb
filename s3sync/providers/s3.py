"""S3-compatible object store provider (AWS S3, MinIO, ...)."""

import logging
import posixpath
from typing import Any, BinaryIO, Optional

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import DEFAULT_TIMEOUT
from ..exceptions import (
    S3SyncConfigError,
    S3SyncDeleteError,
    S3SyncListError,
    S3SyncReadError,
    S3SyncWriteError,
)
from ..models import File, ListingPage
from ..sync.cancel import CancelToken
from ..sync.crawler import CRAWL_WORKERS, PrefixCrawler
from ..utils import S3_SCHEME, detect_content_type, parse_s3_address
from .base import StorageProvider

logger = logging.getLogger(__name__)

MAX_KEYS_PER_PAGE: int = 1000
DELIMITER: str = "/"

_BOTO_ERRORS = (ClientError, BotoCoreError)


class S3Provider(StorageProvider):
    """Provider for S3-compatible object stores.

    Listing walks the bucket prefix by prefix with a
    :class:`~s3sync.sync.crawler.PrefixCrawler`, so large trees are listed
    with many small concurrent requests instead of one long sequential scan.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        region: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        crawl_workers: int = CRAWL_WORKERS,
        client: Any = None,
    ):
        """Initialize the S3 provider.

        Args:
            endpoint: Alternate endpoint URL for S3-compatible services
            region: Region name (uses the boto3 default chain if None)
            timeout: Connect and read timeout per request in seconds
            max_retries: Maximum attempts for retryable request errors
            crawl_workers: Number of concurrent listing requests
            client: Preconfigured boto3 S3 client (mainly for testing)
        """
        self.endpoint = endpoint
        self.crawl_workers = crawl_workers
        self._client = client or self._create_client(
            endpoint, region, timeout, max_retries
        )

    @staticmethod
    def _create_client(
        endpoint: Optional[str],
        region: Optional[str],
        timeout: float,
        max_retries: int,
    ) -> Any:
        config_kwargs: dict = {
            "connect_timeout": timeout,
            "read_timeout": timeout,
            "retries": {"max_attempts": max_retries, "mode": "standard"},
        }
        if region:
            config_kwargs["region_name"] = region
        if endpoint:
            # MinIO and most S3 clones need path-style addressing
            config_kwargs["s3"] = {"addressing_style": "path"}

        kwargs: dict = {"config": Config(**config_kwargs)}
        if endpoint:
            kwargs["endpoint_url"] = endpoint

        try:
            return boto3.client("s3", **kwargs)
        except (BotoCoreError, ValueError) as e:
            raise S3SyncConfigError(f"Cannot create S3 client: {e}") from e

    def list_files(
        self,
        prefix: str,
        cancel_token: Optional[CancelToken] = None,
        missing_ok: bool = False,
    ) -> list[File]:
        # An empty prefix is not an error on S3, so missing_ok has no effect
        bucket, key_prefix = parse_s3_address(prefix)
        if key_prefix and not key_prefix.endswith(DELIMITER):
            key_prefix += DELIMITER

        logger.debug("Listing s3://%s/%s", bucket, key_prefix)

        def list_page(page_prefix: str, token: Optional[str]) -> ListingPage:
            return self.list_page(bucket, page_prefix, token)

        crawler = PrefixCrawler(
            list_page, max_workers=self.crawl_workers, cancel_token=cancel_token
        )
        return crawler.crawl(key_prefix)

    def list_page(
        self, bucket: str, prefix: str, token: Optional[str] = None
    ) -> ListingPage:
        """Fetch a single delimiter-scoped listing page.

        Args:
            bucket: Bucket name
            prefix: Key prefix to list
            token: Continuation token from the previous page

        Returns:
            ListingPage with full object keys as filenames
        """
        params: dict = {
            "Bucket": bucket,
            "Prefix": prefix,
            "Delimiter": DELIMITER,
            "MaxKeys": MAX_KEYS_PER_PAGE,
        }
        if token:
            params["ContinuationToken"] = token

        try:
            response = self._client.list_objects_v2(**params)
        except _BOTO_ERRORS as e:
            raise S3SyncListError(f"Listing objects failed: {e}") from e

        files = [
            File(
                filename=obj["Key"],
                size=int(obj.get("Size", 0)),
                last_modified=obj.get("LastModified"),
            )
            for obj in response.get("Contents", [])
        ]
        common_prefixes = [
            cp["Prefix"] for cp in response.get("CommonPrefixes", []) if cp.get("Prefix")
        ]
        next_token = (
            response.get("NextContinuationToken") if response.get("IsTruncated") else None
        )
        return ListingPage(
            files=files, common_prefixes=common_prefixes, next_token=next_token
        )

    def read_file(self, path: str) -> BinaryIO:
        bucket, key = parse_s3_address(path)
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except _BOTO_ERRORS as e:
            raise S3SyncReadError(f"Getting object failed: {e}") from e
        return response["Body"]

    def write_file(self, path: str, content: BinaryIO, public: bool = False) -> None:
        bucket, key = parse_s3_address(path)

        extra_args = {"ContentType": detect_content_type(key)}
        if public:
            extra_args["ACL"] = "public-read"

        try:
            self._client.upload_fileobj(content, bucket, key, ExtraArgs=extra_args)
        except (S3UploadFailedError, *_BOTO_ERRORS) as e:
            raise S3SyncWriteError(f"Uploading file failed: {e}") from e

    def delete_file(self, path: str) -> None:
        bucket, key = parse_s3_address(path)
        try:
            self._client.delete_object(Bucket=bucket, Key=key)
        except _BOTO_ERRORS as e:
            raise S3SyncDeleteError(f"Deleting object failed: {e}") from e

    def get_absolute_path(self, path: str) -> str:
        return path

    def join_path(self, base: str, relative_path: str) -> str:
        if not base.startswith(S3_SCHEME):
            # Normalize s3:/bucket to s3://bucket
            bucket, key = parse_s3_address(base)
            base = f"{S3_SCHEME}{bucket}/{key}"
        return posixpath.join(base, relative_path)
