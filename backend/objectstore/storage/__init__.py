"""
Storage module for S3 and S3-compatible object storage.

S3Client wraps one bucket; path helpers and region lookup are plain functions.
"""
from objectstore.storage.s3_client import get_s3_client, S3Client
from objectstore.storage.paths import (
    is_valid_s3_path,
    is_valid_s3a_path,
    join_s3_paths,
    split_s3_path,
    split_s3a_path,
)
from objectstore.storage.regions import (
    DEFAULT_S3_REGION,
    get_bucket_region,
    get_s3_regions,
    is_valid_s3_region,
    load_s3_regions,
)

__all__ = [
    "get_s3_client",
    "S3Client",
    "is_valid_s3_path",
    "is_valid_s3a_path",
    "join_s3_paths",
    "split_s3_path",
    "split_s3a_path",
    "DEFAULT_S3_REGION",
    "get_bucket_region",
    "get_s3_regions",
    "is_valid_s3_region",
    "load_s3_regions",
]
