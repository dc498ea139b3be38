import io
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from mailblocks.infrastructure.storage import S3StorageProvider, S3StorageSettings


def _client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)


@pytest.fixture
def s3_client():
    with patch("boto3.client") as client_factory:
        client = MagicMock()
        client_factory.return_value = client
        yield client


@pytest.fixture
def provider():
    return S3StorageProvider(
        S3StorageSettings(bucket="acme-email", region="eu-west-1", object_prefix="/images/")
    )


class TestS3StorageProvider:

    def test_object_key_applies_prefix(self, provider):
        assert provider.object_key("2026/10/a.png") == "images/2026/10/a.png"

    def test_default_url(self, provider):
        assert provider.url_for("a.png") == (
            "https://acme-email.s3.eu-west-1.amazonaws.com/images/a.png"
        )

    def test_public_base_url(self):
        provider = S3StorageProvider(
            S3StorageSettings(bucket="acme-email", public_base_url="https://cdn.acme.test/")
        )
        assert provider.url_for("a.png") == "https://cdn.acme.test/a.png"

    def test_client_credentials(self):
        provider = S3StorageProvider(
            S3StorageSettings(
                bucket="b",
                access_key_id="AKIA",
                secret_access_key="secret",
                endpoint_url="http://minio:9000",
            )
        )
        with patch("boto3.client") as client_factory:
            provider._get_client()
            provider._get_client()

        client_factory.assert_called_once_with(
            "s3",
            region_name="us-east-1",
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            endpoint_url="http://minio:9000",
        )

    @pytest.mark.asyncio
    async def test_save_file(self, provider, s3_client):
        url = await provider.save_file("a.png", b"data", "image/png")

        s3_client.put_object.assert_called_once_with(
            Bucket="acme-email",
            Key="images/a.png",
            Body=b"data",
            ContentType="image/png",
        )
        assert url == "https://acme-email.s3.eu-west-1.amazonaws.com/images/a.png"

    @pytest.mark.asyncio
    async def test_save_file_failure(self, provider, s3_client):
        s3_client.put_object.side_effect = _client_error("AccessDenied", "PutObject")

        with pytest.raises(RuntimeError, match="Failed to upload file to S3"):
            await provider.save_file("a.png", b"data", "image/png")

    @pytest.mark.asyncio
    async def test_get_file(self, provider, s3_client):
        s3_client.get_object.return_value = {
            "Body": io.BytesIO(b"png-bytes"),
            "ContentType": "image/png",
        }

        stored = await provider.get_file("2026/10/a.png")

        assert stored.content == b"png-bytes"
        assert stored.filename == "a.png"
        assert stored.mime_type == "image/png"
        assert stored.local_path is None

    @pytest.mark.asyncio
    async def test_get_missing_file(self, provider, s3_client):
        s3_client.get_object.side_effect = _client_error("NoSuchKey")

        with pytest.raises(FileNotFoundError):
            await provider.get_file("a.png")

    @pytest.mark.asyncio
    async def test_get_file_other_error(self, provider, s3_client):
        s3_client.get_object.side_effect = _client_error("AccessDenied")

        with pytest.raises(RuntimeError):
            await provider.get_file("a.png")

    @pytest.mark.asyncio
    async def test_connection_failure(self, provider, s3_client):
        s3_client.head_bucket.side_effect = _client_error("403", "HeadBucket")

        ok, message = await provider.test_connection()

        assert ok is False
        assert message == "S3 connection failed (403): boom"
