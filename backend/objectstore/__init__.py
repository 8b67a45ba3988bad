"""
Bucket-scoped S3 object store client.
"""
from objectstore.exceptions import (
    BucketInaccessibleError,
    BucketMismatchError,
    InvalidPathError,
    ObjectStoreError,
    SerializationError,
    StorageError,
)
from objectstore.storage import S3Client, get_s3_client

__version__ = "0.1.0"

__all__ = [
    "S3Client",
    "get_s3_client",
    "ObjectStoreError",
    "StorageError",
    "SerializationError",
    "InvalidPathError",
    "BucketMismatchError",
    "BucketInaccessibleError",
]
