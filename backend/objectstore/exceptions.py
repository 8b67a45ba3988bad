"""
Exception types raised by the object store client.

Only existence checks treat "not found" as a normal outcome (they return
False). Everything else surfaces as one of the errors below, annotated with
the key, prefix or path involved.
"""
from typing import Optional


class ObjectStoreError(Exception):
    """Base class for all object store errors."""


class StorageError(ObjectStoreError):
    """
    An underlying store or transport failure, wrapped with context.

    Attributes:
        context: Key, prefix or path the failing operation was working on
        cause: The original exception
    """

    def __init__(self, context: str, cause: Optional[BaseException] = None):
        self.context = context
        self.cause = cause
        message = f"{context}: {cause}" if cause is not None else context
        super().__init__(message)


class SerializationError(StorageError):
    """JSON or Msgpack encoding/decoding failed."""


class InvalidPathError(ObjectStoreError, ValueError):
    """A path does not match the s3://bucket/key (or s3a://) format."""

    def __init__(self, path: str, scheme: str = "s3://"):
        self.path = path
        self.scheme = scheme
        super().__init__(
            f"{path!r} is not a valid {scheme.rstrip(':/')} path "
            f"(e.g. {scheme}bucket/key)"
        )


class BucketMismatchError(ObjectStoreError):
    """A path names a different bucket than the client is scoped to (unexpected)."""

    def __init__(self, path: str, bucket: str):
        self.path = path
        self.bucket = bucket
        super().__init__(
            f"bucket of S3 path {path} does not match client bucket ({bucket})"
        )


class BucketInaccessibleError(ObjectStoreError):
    """Bucket region could not be determined; the underlying cause is not exposed."""

    def __init__(self, bucket: str):
        self.bucket = bucket
        super().__init__(
            f"bucket {bucket!r} is not accessible "
            "(it may not exist, or your credentials may not allow access to it)"
        )
