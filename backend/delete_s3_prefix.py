#!/usr/bin/env python3
"""
Script to delete all objects under a prefix in an S3 bucket.

Usage:
    python delete_s3_prefix.py uploads/2024/

    # Non-interactive mode (skip confirmations):
    python delete_s3_prefix.py uploads/2024/ --yes

    # Keep going when a batch fails:
    python delete_s3_prefix.py uploads/2024/ --yes --continue-on-failure

    # With environment variables:
    S3_BUCKET=xxx S3_REGION=xxx python delete_s3_prefix.py uploads/2024/
"""
import argparse
import logging
import sys

from objectstore.config import settings
from objectstore.exceptions import ObjectStoreError
from objectstore.storage.s3_client import S3Client
from objectstore.utils.logging import configure_logging

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 5


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Delete all objects under an S3 prefix')
    parser.add_argument('prefix', help='Key prefix to delete (e.g. uploads/2024/)')
    parser.add_argument('--bucket', default=None,
                        help=f'Bucket name (default: S3_BUCKET, currently {settings.s3_bucket!r})')
    parser.add_argument('--yes', '-y', action='store_true',
                        help='Skip confirmation prompts (non-interactive mode)')
    parser.add_argument('--continue-on-failure', action='store_true',
                        help='Keep deleting remaining pages when a batch fails')
    return parser.parse_args(argv)


def main(argv=None, client=None) -> int:
    args = parse_args(argv)
    configure_logging('objectstore-cli', settings.log_level)

    bucket = args.bucket or settings.s3_bucket
    s3 = client or S3Client(bucket)

    print("=" * 50)
    print("S3 - DELETE BY PREFIX")
    print("=" * 50)
    print(f"Bucket: {s3.bucket}")
    print(f"Prefix: {args.prefix!r}")
    print()

    if not args.prefix and not args.yes:
        print("WARNING: An empty prefix matches EVERY object in the bucket!")

    try:
        sample = s3.list_prefix(args.prefix, SAMPLE_SIZE + 1)
    except ObjectStoreError as e:
        print(f"ERROR listing objects: {e}")
        return 1

    if not sample:
        print("No objects found under this prefix.")
        return 0

    print("Sample objects to delete:")
    for obj in sample[:SAMPLE_SIZE]:
        size_kb = obj.get('Size', 0) / 1024
        print(f"  - {obj['Key']} ({size_kb:.1f} KB)")
    if len(sample) > SAMPLE_SIZE:
        print("  ... and more")

    if not args.yes:
        print()
        confirm = input("Type 'DELETE' to confirm: ")
        if confirm != 'DELETE':
            print("Aborted.")
            return 0

    try:
        s3.delete_by_prefix(args.prefix, continue_on_failure=args.continue_on_failure)
    except ObjectStoreError as e:
        logger.error(f"Delete by prefix failed: {e}")
        print(f"\nERROR: {e}")
        return 1

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
