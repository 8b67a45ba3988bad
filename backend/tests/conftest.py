"""
Test configuration and fixtures.
The boto3 client is replaced with a MagicMock, so no S3 access is needed.
"""
import os

# Set test environment before any imports
os.environ["ENVIRONMENT"] = "test"
os.environ["S3_BUCKET"] = "test-bucket"
os.environ["S3_REGION"] = "us-west-2"

import pytest
from unittest.mock import MagicMock
from botocore.exceptions import ClientError

from objectstore.storage.s3_client import S3Client


TEST_BUCKET = "test-bucket"


def make_client_error(code: str, operation: str = "HeadObject", message: str = "error", headers=None) -> ClientError:
    """Build a botocore ClientError as boto3 raises it."""
    response = {
        "Error": {"Code": code, "Message": message},
        "ResponseMetadata": {"HTTPHeaders": headers or {}},
    }
    return ClientError(response, operation)


@pytest.fixture
def boto_client() -> MagicMock:
    """Mocked boto3 S3 client."""
    return MagicMock()


@pytest.fixture
def s3(boto_client: MagicMock) -> S3Client:
    """S3Client for TEST_BUCKET backed by the mocked boto3 client."""
    return S3Client(TEST_BUCKET, client=boto_client)


@pytest.fixture
def client_error():
    """Factory fixture for botocore ClientError instances."""
    return make_client_error
