# tests/test_storage/test_s3_client.py

"""
S3Client against a real botocore client with `Stubber` (no network).
"""

from datetime import datetime, timezone
from urllib.parse import parse_qs, urlparse

import boto3
import pytest
from botocore.config import Config as BotoConfig
from botocore.stub import Stubber

from livecam.core.config import Settings
from livecam.core.storage import ObjectStore
from livecam.utils.aws import S3Client, S3StorageError


def _boto(endpoint_url=None):
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="AKIDEXAMPLE",
        aws_secret_access_key="secret",
        endpoint_url=endpoint_url,
        config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
    )


@pytest.fixture()
def s3_pair():
    raw = _boto()
    return S3Client("unit-test-bucket", client=raw), raw


def test_satisfies_object_store_protocol(s3_pair):
    s3, _ = s3_pair
    assert isinstance(s3, ObjectStore)


def test_requires_bucket():
    with pytest.raises(S3StorageError):
        S3Client(settings=Settings(S3_BUCKET_NAME=None), client=_boto())


def test_list_objects_passes_bounded_page_params(s3_pair):
    s3, raw = s3_pair
    modified = datetime(2024, 1, 1, 3, 0, tzinfo=timezone.utc)
    with Stubber(raw) as stub:
        stub.add_response(
            "list_objects_v2",
            {
                "Contents": [
                    {"Key": "cams/streams/2024-01-01/2024-01-01_10-00-00-front.mp4", "LastModified": modified, "Size": 1024},
                    {"Key": "cams/streams/2024-01-01/2024-01-01_10-00-00-back.mp4", "LastModified": modified, "Size": 2048},
                ]
            },
            {
                "Bucket": "unit-test-bucket",
                "Prefix": "cams/streams/2024-01-01",
                "StartAfter": "cams/streams/2024-01-01/2024-01-01_09-55-00",
                "MaxKeys": 100,
            },
        )
        clips = s3.list_objects(
            "cams/streams/2024-01-01",
            start_after="cams/streams/2024-01-01/2024-01-01_09-55-00",
            max_keys=100,
        )
        stub.assert_no_pending_responses()

    assert [c.key for c in clips] == [
        "cams/streams/2024-01-01/2024-01-01_10-00-00-front.mp4",
        "cams/streams/2024-01-01/2024-01-01_10-00-00-back.mp4",
    ]
    assert clips[0].last_modified == modified
    assert clips[1].size == 2048


def test_list_objects_empty_page(s3_pair):
    s3, raw = s3_pair
    with Stubber(raw) as stub:
        stub.add_response("list_objects_v2", {"KeyCount": 0})
        assert s3.list_objects("cams/streams/2024-01-01", start_after="x", max_keys=100) == []


def test_list_objects_wraps_client_errors(s3_pair):
    s3, raw = s3_pair
    with Stubber(raw) as stub:
        stub.add_client_error("list_objects_v2", service_error_code="NoSuchBucket", http_status_code=404)
        with pytest.raises(S3StorageError) as ei:
            s3.list_objects("cams/streams/2024-01-01", start_after="x", max_keys=100)
    assert "Failed to list objects" in str(ei.value)


def test_presigned_get_signs_key_with_ttl(s3_pair):
    s3, _ = s3_pair
    url = s3.presigned_get("cams/streams/2024-01-01/2024-01-01_10-00-00-front.mp4", expires_in=5)

    parsed = urlparse(url)
    assert parsed.path.endswith("/unit-test-bucket/cams/streams/2024-01-01/2024-01-01_10-00-00-front.mp4")
    qs = parse_qs(parsed.query)
    assert qs["X-Amz-Expires"] == ["5"]
    assert "X-Amz-Signature" in qs


def test_presigned_get_uses_custom_endpoint():
    s3 = S3Client("unit-test-bucket", client=_boto(endpoint_url="http://minio.local:9000"))
    url = s3.presigned_get("placeholder.mp4", expires_in=5)
    assert url.startswith("http://minio.local:9000/unit-test-bucket/placeholder.mp4?")


@pytest.mark.parametrize("key", ["", "   ", "cams/../secrets.mp4"])
def test_presigned_get_rejects_unsafe_keys(s3_pair, key):
    s3, _ = s3_pair
    with pytest.raises(S3StorageError):
        s3.presigned_get(key, expires_in=5)


def test_builds_path_style_client_for_custom_endpoint():
    cfg = Settings(
        S3_BUCKET_NAME="unit-test-bucket",
        S3_CUSTOM_ENDPOINT="http://minio.local:9000",
        AWS_REGION="ap-southeast-1",
        AWS_ACCESS_KEY_ID="AKIDEXAMPLE",
        AWS_SECRET_ACCESS_KEY="secret",
    )
    s3 = S3Client(settings=cfg)
    assert s3.bucket == "unit-test-bucket"
    assert s3.region == "ap-southeast-1"
    assert s3.client.meta.endpoint_url == "http://minio.local:9000"
    assert s3.client.meta.config.s3["addressing_style"] == "path"


def test_builds_path_style_client_against_aws_too():
    cfg = Settings(
        S3_BUCKET_NAME="unit-test-bucket",
        S3_CUSTOM_ENDPOINT=None,
        AWS_REGION="ap-southeast-1",
        AWS_ACCESS_KEY_ID="AKIDEXAMPLE",
        AWS_SECRET_ACCESS_KEY="secret",
    )
    s3 = S3Client(settings=cfg)
    assert s3.client.meta.config.s3["addressing_style"] == "path"

    url = s3.presigned_get("placeholder.mp4", expires_in=5)
    parsed = urlparse(url)
    assert parsed.netloc == "s3.ap-southeast-1.amazonaws.com"
    assert parsed.path == "/unit-test-bucket/placeholder.mp4"
