"""
S3 region metadata and bucket region lookup.

The set of valid S3 regions is built once per process from botocore's
endpoint data (commercial and China partitions) and is read-only after that.
"""
import logging
import threading
from typing import FrozenSet, Optional

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from objectstore.exceptions import BucketInaccessibleError

logger = logging.getLogger(__name__)

DEFAULT_S3_REGION = "us-west-2"

S3_PARTITIONS = ("aws", "aws-cn")

_s3_regions: Optional[FrozenSet[str]] = None
_s3_regions_lock = threading.Lock()


def load_s3_regions(session: Optional[boto3.session.Session] = None) -> FrozenSet[str]:
    """
    Build the process-wide set of S3 region ids.

    Safe to call from several threads; only the first call queries botocore,
    later calls return the cached set.

    Args:
        session: boto3 session to read endpoint metadata from (default: new session)

    Returns:
        Frozen set of region ids, e.g. {"us-east-1", "cn-north-1", ...}
    """
    global _s3_regions
    with _s3_regions_lock:
        if _s3_regions is None:
            session = session or boto3.session.Session()
            regions = set()
            for partition in S3_PARTITIONS:
                regions.update(
                    session.get_available_regions("s3", partition_name=partition)
                )
            _s3_regions = frozenset(regions)
            logger.debug(f"Loaded {len(_s3_regions)} S3 regions")
        return _s3_regions


def get_s3_regions() -> FrozenSet[str]:
    """Get the set of valid S3 regions, loading it on first use."""
    if _s3_regions is not None:
        return _s3_regions
    return load_s3_regions()


def is_valid_s3_region(region: str) -> bool:
    return region in get_s3_regions()


def _region_from_headers(response: dict) -> Optional[str]:
    headers = response.get("ResponseMetadata", {}).get("HTTPHeaders", {})
    return response.get("BucketRegion") or headers.get("x-amz-bucket-region")


def get_bucket_region(bucket: str, client: Optional[BaseClient] = None) -> str:
    """
    Look up the region a bucket lives in.

    Probes the bucket from DEFAULT_S3_REGION. S3 reports the bucket's home
    region in a response header even for redirect and access-denied
    responses, so those still resolve.

    Args:
        bucket: Bucket name
        client: boto3 S3 client to probe with (default: new client in DEFAULT_S3_REGION)

    Returns:
        Region id, e.g. "eu-central-1"

    Raises:
        BucketInaccessibleError: If the region cannot be determined for any reason
    """
    try:
        client = client or boto3.client("s3", region_name=DEFAULT_S3_REGION)
        response = client.head_bucket(Bucket=bucket)
        region = _region_from_headers(response)
    except ClientError as e:
        region = _region_from_headers(e.response)
        if region is None:
            logger.warning(f"Bucket region lookup failed for {bucket}: {e}")
    except BotoCoreError as e:
        logger.warning(f"Bucket region lookup failed for {bucket}: {e}")
        region = None

    if not region:
        raise BucketInaccessibleError(bucket)
    return region
