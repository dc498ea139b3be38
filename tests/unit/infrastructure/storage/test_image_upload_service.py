import base64
import re
from unittest.mock import AsyncMock, MagicMock

import pytest

from mailblocks.core.config import Settings
from mailblocks.infrastructure.storage import (
    ImageUploadError,
    ImageUploadService,
    LocalStorageProvider,
    S3StorageProvider,
    build_storage_provider,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
PNG_B64 = base64.b64encode(PNG_BYTES).decode()


@pytest.fixture
def provider(tmp_path):
    return LocalStorageProvider(str(tmp_path), "http://test/api/v1")


@pytest.fixture
def service(provider):
    return ImageUploadService(provider)


class TestDecode:

    def test_plain_base64(self):
        assert ImageUploadService.decode(PNG_B64) == (PNG_BYTES, None)

    def test_data_url(self):
        content, mime = ImageUploadService.decode(f"data:image/png;base64,{PNG_B64}")
        assert content == PNG_BYTES
        assert mime == "image/png"

    def test_whitespace_is_ignored(self):
        wrapped = "\n".join(PNG_B64[i : i + 10] for i in range(0, len(PNG_B64), 10))
        assert ImageUploadService.decode(wrapped)[0] == PNG_BYTES

    @pytest.mark.parametrize("data", ["", "   ", "data:image/png;base64,"])
    def test_empty(self, data):
        with pytest.raises(ImageUploadError, match="Image data is empty"):
            ImageUploadService.decode(data)

    def test_invalid_base64(self):
        with pytest.raises(ImageUploadError, match="Image data is not valid base64"):
            ImageUploadService.decode("not*base64!")


class TestValidate:

    def test_valid(self, service):
        assert service.validate("photo.JPG", "image/jpeg", 1024) == "jpg"

    def test_mime_type_not_allowed(self, service):
        with pytest.raises(ImageUploadError) as exc_info:
            service.validate("photo.webp", "image/webp", 10)

        assert str(exc_info.value) == (
            "File type 'image/webp' is not allowed. "
            "Allowed types: image/jpeg, image/png, image/gif"
        )

    def test_extension_not_allowed(self, service):
        with pytest.raises(ImageUploadError, match=re.escape("File extension '.txt' is not allowed")):
            service.validate("notes.txt", "image/png", 10)

    def test_extension_mismatch(self, service):
        with pytest.raises(ImageUploadError) as exc_info:
            service.validate("photo.gif", "image/png", 10)

        assert str(exc_info.value) == "File extension '.gif' does not match file type 'image/png'"

    def test_size_limit(self, service):
        with pytest.raises(ImageUploadError) as exc_info:
            service.validate("photo.png", "image/png", 500 * 1024 + 1)

        assert str(exc_info.value) == (
            "File size (500.0KB) exceeds maximum allowed size (500KB)"
        )

    def test_size_at_limit(self, service):
        assert service.validate("photo.png", "image/png", 500 * 1024) == "png"


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload(self, service, tmp_path):
        stored = await service.upload("logo.png", "image/png", PNG_B64)

        assert re.fullmatch(r"\d{4}/\d{2}/[0-9a-f-]{36}\.png", stored.path)
        assert stored.url == f"http://test/api/v1/uploads/files/{stored.path}"
        assert stored.size == len(PNG_BYTES)
        assert stored.mime_type == "image/png"
        assert stored.filename == "logo.png"
        assert (tmp_path / stored.path).read_bytes() == PNG_BYTES

    @pytest.mark.asyncio
    async def test_data_url_type_wins(self, service):
        with pytest.raises(ImageUploadError, match="does not match"):
            await service.upload("logo.png", "image/png", f"data:image/gif;base64,{PNG_B64}")

    @pytest.mark.asyncio
    async def test_rejected_upload_is_not_stored(self, tmp_path):
        provider = MagicMock()
        provider.save_file = AsyncMock()
        service = ImageUploadService(provider, max_size_bytes=8)

        with pytest.raises(ImageUploadError, match="exceeds maximum"):
            await service.upload("logo.png", "image/png", PNG_B64)

        provider.save_file.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_failure(self):
        provider = MagicMock()
        provider.name = "s3"
        provider.save_file = AsyncMock(side_effect=RuntimeError("Failed to upload file to S3"))

        with pytest.raises(ImageUploadError, match="Image could not be stored"):
            await ImageUploadService(provider).upload("logo.png", "image/png", PNG_B64)


class TestBuildStorageProvider:

    def test_local(self, tmp_path):
        settings = Settings(
            storage_path=str(tmp_path),
            external_url="https://mail.acme.test",
        )
        provider = build_storage_provider(settings)

        assert isinstance(provider, LocalStorageProvider)
        assert provider.url_for("a.png") == "https://mail.acme.test/api/v1/uploads/files/a.png"

    def test_s3(self):
        settings = Settings(storage_provider="s3", s3_bucket="acme-email", s3_region="eu-west-1")
        provider = build_storage_provider(settings)

        assert isinstance(provider, S3StorageProvider)
        assert provider.settings.bucket == "acme-email"
        assert provider.settings.region == "eu-west-1"
