"""S3-compatible image storage.

Uploaded images are written as objects under an optional key prefix and
linked from emails by their public URL: either a configured base URL (a CDN
or a MinIO endpoint) or the bucket's virtual-hosted AWS URL. boto3 is
blocking, so every call runs in a worker thread.
"""

import asyncio
from pathlib import PurePosixPath
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict

from mailblocks.core.logging import get_logger
from mailblocks.infrastructure.storage.base import StorageProvider, StoredFile

logger = get_logger(__name__)

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


class S3StorageSettings(BaseModel):
    """Bucket, credentials and URL settings for ``S3StorageProvider``."""

    model_config = ConfigDict(from_attributes=True)

    bucket: str
    region: str = "us-east-1"
    access_key_id: str | None = None
    secret_access_key: str | None = None
    endpoint_url: str | None = None
    object_prefix: str = ""
    public_base_url: str | None = None


class S3StorageProvider(StorageProvider):
    name = "s3"

    def __init__(self, settings: S3StorageSettings) -> None:
        self.settings = settings
        self._client = None

    def _get_client(self):
        """Create the boto3 client on first use.

        Explicit keys are passed only as a pair; otherwise boto3's own
        credential chain applies.
        """
        if self._client is None:
            options: dict[str, Any] = {"region_name": self.settings.region}
            if self.settings.access_key_id and self.settings.secret_access_key:
                options.update(
                    aws_access_key_id=self.settings.access_key_id,
                    aws_secret_access_key=self.settings.secret_access_key,
                )
            if self.settings.endpoint_url:
                options["endpoint_url"] = self.settings.endpoint_url
            self._client = boto3.client("s3", **options)
        return self._client

    async def _call(self, operation: str, **params: Any) -> Any:
        method = getattr(self._get_client(), operation)
        return await asyncio.to_thread(method, Bucket=self.settings.bucket, **params)

    def object_key(self, path: str) -> str:
        prefix = self.settings.object_prefix.strip("/")
        return f"{prefix}/{path}" if prefix else path

    def url_for(self, path: str) -> str:
        """Public URL embedded in emails for the image at ``path``."""
        key = self.object_key(path)
        if self.settings.public_base_url:
            return f"{self.settings.public_base_url.rstrip('/')}/{key}"
        return f"https://{self.settings.bucket}.s3.{self.settings.region}.amazonaws.com/{key}"

    async def save_file(self, path: str, content: bytes, mime_type: str) -> str:
        key = self.object_key(path)
        try:
            await self._call("put_object", Key=key, Body=content, ContentType=mime_type)
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 upload failed", bucket=self.settings.bucket, key=key, error=str(e))
            raise RuntimeError(f"Failed to upload file to S3: {e}") from e

        logger.info("Image saved to S3", bucket=self.settings.bucket, key=key, size=len(content))
        return self.url_for(path)

    async def get_file(self, path: str) -> StoredFile:
        key = self.object_key(path)
        try:
            response = await self._call("get_object", Key=key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise FileNotFoundError(f"File not found: {path}") from e
            raise RuntimeError(f"Failed to fetch file from S3: {e}") from e
        except BotoCoreError as e:
            raise RuntimeError(f"Failed to fetch file from S3: {e}") from e

        body = response.get("Body")
        if body is None:
            raise FileNotFoundError(f"File not found: {path}")

        return StoredFile(
            content=await asyncio.to_thread(body.read),
            filename=PurePosixPath(key).name,
            mime_type=response.get("ContentType", "application/octet-stream"),
        )

    async def delete_file(self, path: str) -> None:
        try:
            await self._call("delete_object", Key=self.object_key(path))
        except (ClientError, BotoCoreError) as e:
            raise RuntimeError(f"Failed to delete file from S3: {e}") from e

    async def test_connection(self) -> tuple[bool, str | None]:
        try:
            await self._call("head_bucket")
        except ClientError as e:
            message = e.response.get("Error", {}).get("Message", str(e))
            return False, f"S3 connection failed ({_error_code(e)}): {message}"
        except BotoCoreError as e:
            return False, f"S3 connection failed: {e}"
        return True, f"Bucket '{self.settings.bucket}' is reachable in {self.settings.region}"
