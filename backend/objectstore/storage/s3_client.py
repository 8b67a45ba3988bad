"""
Bucket-scoped S3 client.

Wraps a boto3 S3 client with the helpers most callers need: s3:// path
handling, existence checks, upload/download of bytes, strings, JSON and
Msgpack payloads, prefix listing and bulk delete.

Every failure is re-raised as an objectstore error carrying the key, prefix
or path involved. Existence checks are the only place a missing object is
not an error.
"""
import enum
import io
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import boto3
import msgpack
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from objectstore.config import settings
from objectstore.exceptions import (
    BucketMismatchError,
    SerializationError,
    StorageError,
)
from objectstore.storage.paths import (
    S3_SCHEME,
    ensure_suffix,
    join_s3_paths,
    split_s3_path,
)
from objectstore.utils.logging import log_storage_failure, log_storage_request
from objectstore.utils.metrics import storage_bytes_total
from objectstore.utils.parallel import run_first_err
from objectstore.utils.storage_metrics import track_storage_metrics

logger = logging.getLogger(__name__)

# Error codes S3 uses for a missing object (HEAD responses carry no body, so
# boto3 reports the bare status code)
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})

# S3 list/delete APIs accept at most 1000 keys per call
DELETE_PAGE_SIZE = 1000

# Fixed for every upload
UPLOAD_ACL = "private"
UPLOAD_CONTENT_DISPOSITION = "attachment"
UPLOAD_SERVER_SIDE_ENCRYPTION = "AES256"

StoreErrors = (ClientError, BotoCoreError)


class Presence(enum.Enum):
    """Outcome of a single existence probe. Failures are raised, not returned."""
    EXISTS = "exists"
    ABSENT = "absent"


def is_not_found_error(error: ClientError) -> bool:
    code = error.response.get("Error", {}).get("Code")
    return code in NOT_FOUND_CODES


def build_boto3_client() -> BaseClient:
    """
    Create a boto3 S3 client from settings.

    Explicit keys are used when both are configured, otherwise boto3 resolves
    credentials itself. A custom endpoint (MinIO, R2, ...) switches to
    path-style addressing.
    """
    client_kwargs: Dict[str, Any] = {}

    if settings.s3_endpoint:
        client_kwargs["endpoint_url"] = settings.s3_endpoint
        client_kwargs["config"] = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'}
        )

    if settings.s3_access_key and settings.s3_secret_key:
        client_kwargs["aws_access_key_id"] = settings.s3_access_key
        client_kwargs["aws_secret_access_key"] = settings.s3_secret_key

    return boto3.client('s3', region_name=settings.s3_region, **client_kwargs)


class S3Client:
    """
    S3 client scoped to a single bucket.

    Holds no mutable state besides the boto3 client, which is thread-safe,
    so one instance can be shared across threads.
    """

    def __init__(self, bucket: str, client: Optional[BaseClient] = None):
        """
        Args:
            bucket: Bucket every key refers to
            client: boto3 S3 client (default: built from settings)
        """
        self._bucket = bucket
        self._client = client or build_boto3_client()
        logger.info(f"S3 client initialized for bucket: {bucket}")

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def client(self) -> BaseClient:
        """Underlying boto3 client."""
        return self._client

    # Paths

    def s3_path(self, key: str) -> str:
        """Canonical s3:// path of a key in this bucket."""
        return join_s3_paths(S3_SCHEME + self._bucket, key)

    def extract_s3_path_prefixes(self, *s3_paths: str) -> List[str]:
        """
        Convert s3:// paths in this bucket into bucket-relative keys.

        Raises:
            InvalidPathError: If a path is malformed
            BucketMismatchError: If a path points at another bucket
        """
        prefixes = []
        for s3_path in s3_paths:
            bucket, prefix = split_s3_path(s3_path)
            if bucket != self._bucket:
                raise BucketMismatchError(s3_path, self._bucket)
            prefixes.append(prefix)
        return prefixes

    # Existence checks

    @track_storage_metrics("head_object")
    def _probe_object(self, key: str) -> Presence:
        try:
            self._client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if is_not_found_error(e):
                return Presence.ABSENT
            raise StorageError(key, e) from e
        except BotoCoreError as e:
            raise StorageError(key, e) from e
        return Presence.EXISTS

    @track_storage_metrics("list_objects")
    def _probe_prefix(self, prefix: str) -> Presence:
        try:
            response = self._client.list_objects_v2(Bucket=self._bucket, Prefix=prefix)
        except StoreErrors as e:
            raise StorageError(prefix, e) from e
        if response.get("KeyCount", 0) == 0:
            return Presence.ABSENT
        return Presence.EXISTS

    def is_s3_file(self, *keys: str) -> bool:
        """
        Check that every key is an existing object.

        Keys are probed in order; the first missing key returns False without
        probing the rest.

        Raises:
            StorageError: If a probe fails for a reason other than not-found
        """
        for key in keys:
            if self._probe_object(key) is Presence.ABSENT:
                return False
        return True

    def is_s3_prefix(self, *prefixes: str) -> bool:
        """Check that at least one object exists under every prefix."""
        for prefix in prefixes:
            if self._probe_prefix(prefix) is Presence.ABSENT:
                return False
        return True

    def is_s3_dir(self, *dir_paths: str) -> bool:
        """Like is_s3_prefix, treating each argument as a directory (trailing "/")."""
        return self.is_s3_prefix(*[ensure_suffix(dir_path, "/") for dir_path in dir_paths])

    def is_s3_path_file(self, *s3_paths: str) -> bool:
        return self.is_s3_file(*self.extract_s3_path_prefixes(*s3_paths))

    def is_s3_path_prefix(self, *s3_paths: str) -> bool:
        return self.is_s3_prefix(*self.extract_s3_path_prefixes(*s3_paths))

    def is_s3_path_dir(self, *s3_paths: str) -> bool:
        return self.is_s3_prefix(*self.extract_s3_path_prefixes(*s3_paths))

    # Uploads

    @track_storage_metrics("put_object")
    def upload_bytes(self, data: bytes, key: str) -> None:
        """
        Upload bytes as a private, AES256-encrypted attachment.

        Raises:
            StorageError: If the upload fails
        """
        start_time = time.time()
        try:
            self._client.put_object(
                Body=data,
                Key=key,
                Bucket=self._bucket,
                ACL=UPLOAD_ACL,
                ContentDisposition=UPLOAD_CONTENT_DISPOSITION,
                ServerSideEncryption=UPLOAD_SERVER_SIDE_ENCRYPTION,
            )
        except StoreErrors as e:
            log_storage_failure(logger, "put_object", str(e), bucket=self._bucket, key=key)
            raise StorageError(key, e) from e

        storage_bytes_total.labels(direction="upload").inc(len(data))
        log_storage_request(
            logger,
            "put_object",
            bucket=self._bucket,
            key=key,
            duration_ms=(time.time() - start_time) * 1000,
            size=len(data),
        )

    def upload_bytes_multi(self, data: bytes, *keys: str) -> None:
        """
        Upload the same payload to several keys concurrently.

        Raises the first failure. Uploads already in flight when that happens
        are not cancelled, so some keys may have been written.
        """
        workers = min(len(keys), settings.s3_upload_workers) or None
        fns = [lambda key=key: self.upload_bytes(data, key) for key in keys]
        run_first_err(*fns, max_workers=workers)

    def upload_file(self, file_path: Union[str, Path], key: str) -> None:
        """Read a local file fully into memory and upload it."""
        data = Path(file_path).read_bytes()
        self.upload_bytes(data, key)

    def upload_buffer(self, buffer: Union[io.BytesIO, bytes, bytearray], key: str) -> None:
        if isinstance(buffer, io.BytesIO):
            data = buffer.getvalue()
        else:
            data = bytes(buffer)
        self.upload_bytes(data, key)

    def upload_string(self, text: str, key: str) -> None:
        """Upload text (surrounding whitespace removed) as UTF-8."""
        self.upload_bytes(text.strip().encode("utf-8"), key)

    def upload_json(self, obj: Any, key: str) -> None:
        try:
            data = json.dumps(obj).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(key, e) from e
        self.upload_bytes(data, key)

    def upload_msgpack(self, obj: Any, key: str) -> None:
        try:
            data = msgpack.packb(obj, use_bin_type=True)
        except (TypeError, ValueError, OverflowError) as e:
            raise SerializationError(key, e) from e
        self.upload_bytes(data, key)

    # Downloads

    @track_storage_metrics("get_object")
    def read_bytes(self, key: str) -> bytes:
        """
        Download an object fully into memory.

        Raises:
            StorageError: On any failure, including a missing key
        """
        start_time = time.time()
        try:
            response = self._client.get_object(Key=key, Bucket=self._bucket)
            data = response["Body"].read()
        except StoreErrors as e:
            log_storage_failure(logger, "get_object", str(e), bucket=self._bucket, key=key)
            raise StorageError(key, e) from e

        storage_bytes_total.labels(direction="download").inc(len(data))
        log_storage_request(
            logger,
            "get_object",
            bucket=self._bucket,
            key=key,
            duration_ms=(time.time() - start_time) * 1000,
            size=len(data),
        )
        return data

    def read_string(self, key: str) -> str:
        data = self.read_bytes(key)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError(key, e) from e

    def read_json(self, key: str) -> Any:
        """Download and decode a JSON object."""
        data = self.read_bytes(key)
        try:
            return json.loads(data)
        except ValueError as e:
            raise SerializationError(key, e) from e

    def read_msgpack(self, key: str) -> Any:
        """Download and decode a Msgpack object."""
        data = self.read_bytes(key)
        try:
            return msgpack.unpackb(data, raw=False)
        except (ValueError, msgpack.UnpackException) as e:
            raise SerializationError(key, e) from e

    # Listing and deletion

    @track_storage_metrics("list_objects")
    def list_prefix(self, prefix: str, max_results: int) -> List[Dict[str, Any]]:
        """
        List up to max_results objects under a prefix (a single page).

        Returns:
            Object dicts as returned by S3 (Key, Size, LastModified, ...),
            in the order S3 returns them
        """
        try:
            response = self._client.list_objects_v2(
                Bucket=self._bucket,
                Prefix=prefix,
                MaxKeys=max_results,
            )
        except StoreErrors as e:
            raise StorageError(prefix, e) from e
        return response.get("Contents", [])

    @track_storage_metrics("delete_objects")
    def _delete_page(self, objects: List[Dict[str, Any]]) -> None:
        response = self._client.delete_objects(
            Bucket=self._bucket,
            Delete={
                'Objects': [{'Key': obj['Key']} for obj in objects],
                'Quiet': True  # Only return errors, not successes
            }
        )

        errors = response.get('Errors', [])
        if errors:
            for error in errors[:5]:  # Log first 5 errors
                logger.warning(
                    f"Failed to delete {error.get('Key')}: "
                    f"{error.get('Code')} - {error.get('Message')}"
                )
            if len(errors) > 5:
                logger.warning(f"... and {len(errors) - 5} more errors")
            first = errors[0]
            raise StorageError(
                f"failed to delete {len(errors)} of {len(objects)} objects "
                f"(first: {first.get('Key')}: {first.get('Code')} - {first.get('Message')})"
            )

    def delete_by_prefix(self, prefix: str, continue_on_failure: bool = False) -> None:
        """
        Delete every object under a prefix, one page of up to 1000 keys at a time.

        A page fails when the batch delete call fails or reports per-key
        errors. Without continue_on_failure the first failing page stops the
        deletion. With it, remaining pages are still processed and the most
        recent page failure is raised at the end.

        Raises:
            StorageError: Wrapped with the prefix
        """
        paginator = self._client.get_paginator('list_objects_v2')
        pages = paginator.paginate(
            Bucket=self._bucket,
            Prefix=prefix,
            PaginationConfig={'PageSize': DELETE_PAGE_SIZE},
        )

        page_error: Optional[Exception] = None
        list_error: Optional[Exception] = None
        deleted = 0

        try:
            for page_number, page in enumerate(pages, start=1):
                objects = page.get('Contents', [])
                if not objects:
                    continue
                try:
                    self._delete_page(objects)
                except (StorageError, *StoreErrors) as e:
                    page_error = e
                    log_storage_failure(
                        logger,
                        "delete_objects",
                        str(e),
                        bucket=self._bucket,
                        key=prefix,
                        page=page_number,
                    )
                    if not continue_on_failure:
                        break
                else:
                    deleted += len(objects)
        except StoreErrors as e:
            list_error = e

        if page_error is not None:
            raise StorageError(prefix, page_error) from page_error
        if list_error is not None:
            raise StorageError(prefix, list_error) from list_error

        logger.info(f"Deleted {deleted} objects under s3://{self._bucket}/{prefix}")


# Singleton instance
_s3_client: Optional[S3Client] = None


def get_s3_client() -> S3Client:
    """
    Get the singleton S3 client for the configured bucket.

    Returns:
        S3Client for settings.s3_bucket
    """
    global _s3_client
    if _s3_client is None:
        _s3_client = S3Client(settings.s3_bucket)
    return _s3_client
