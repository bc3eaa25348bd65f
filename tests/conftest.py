"""
Test fixtures for the multipart uploader.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws as moto_mock_aws

from multipart_uploader.coordinator import UploadCoordinator
from multipart_uploader.models import UploadSession
from multipart_uploader.notifier import Notifier
from multipart_uploader.uploader import PartUploader

TEST_BUCKET = "test-bucket"
TEST_REGION = "us-east-1"
MIN_PART_SIZE = 5 * 1024 * 1024


@pytest.fixture
def session():
    """Create a test upload session."""
    return UploadSession(
        bucket=TEST_BUCKET,
        key="test-object",
        upload_id="mpu-123",
        expires=datetime(2030, 1, 1, tzinfo=timezone.utc)
    )


@pytest.fixture
def mock_store(session):
    """Object store double whose parts all succeed on the first attempt."""
    store = MagicMock()
    store.create_upload.return_value = session
    store.upload_part.side_effect = lambda s, part_number, body: f'"etag-{part_number}"'
    store.complete_upload.return_value = f"https://{TEST_BUCKET}.s3.amazonaws.com/test-object"
    return store


@pytest.fixture
def mock_publisher():
    return MagicMock()


@pytest.fixture
def notifier(mock_publisher):
    return Notifier(mock_publisher)


@pytest.fixture
def no_sleep():
    """Sleep double recording the delays requested between retries."""
    return MagicMock()


@pytest.fixture
def part_uploader(mock_store, no_sleep):
    return PartUploader(mock_store, retries=2, retry_delay=15.0, sleep=no_sleep)


@pytest.fixture
def coordinator(mock_store, notifier, no_sleep):
    """Create a coordinator with 50 byte parts and instant retries."""
    return UploadCoordinator(
        mock_store,
        notifier,
        part_size=50,
        retries=2,
        retry_delay=15.0,
        sleep=no_sleep
    )


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never reaches real AWS."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)


@pytest.fixture
def mock_aws(aws_credentials):
    """Mock S3 client using moto."""
    with moto_mock_aws():
        s3 = boto3.client('s3', region_name=TEST_REGION)
        s3.create_bucket(Bucket=TEST_BUCKET)
        yield s3


@pytest.fixture
def sns_topic(mock_aws):
    """Create a test SNS topic and return its ARN."""
    sns = boto3.client('sns', region_name=TEST_REGION)
    return sns.create_topic(Name="upload-notifications")['TopicArn']


@pytest.fixture
def large_data():
    """Two full minimum-size parts plus a short tail."""
    return b"a" * MIN_PART_SIZE + b"b" * MIN_PART_SIZE + b"c" * 1000
