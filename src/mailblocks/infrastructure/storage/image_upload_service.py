"""Image upload handling for the editor's image fields.

Uploads arrive base64 encoded (optionally as a ``data:`` URL), are checked
against the email-safe image catalog and handed to the configured provider.
"""

import base64
import binascii
import re
import uuid
from datetime import datetime, timezone
from pathlib import PurePosixPath

from mailblocks.core.config import Settings, get_settings
from mailblocks.core.logging import get_logger
from mailblocks.domain.constraints import IMAGE_FORMATS, IMAGE_MIME_TYPES, MAX_IMAGE_SIZE_KB
from mailblocks.infrastructure.storage.base import StorageProvider, StoredImage
from mailblocks.infrastructure.storage.local_storage_provider import LocalStorageProvider
from mailblocks.infrastructure.storage.s3_storage_provider import (
    S3StorageProvider,
    S3StorageSettings,
)

logger = get_logger(__name__)

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,]*)?;base64,", re.IGNORECASE)


class ImageUploadError(ValueError):
    """Raised when an upload is rejected; the message is shown to the user."""


def build_storage_provider(settings: Settings | None = None) -> StorageProvider:
    """Create the storage provider selected by ``settings.storage_provider``."""
    settings = settings or get_settings()
    if settings.storage_provider == "s3":
        return S3StorageProvider(
            S3StorageSettings(
                bucket=settings.s3_bucket,
                region=settings.s3_region,
                access_key_id=settings.s3_access_key_id,
                secret_access_key=settings.s3_secret_access_key,
                endpoint_url=settings.s3_endpoint_url,
                object_prefix=settings.s3_object_prefix,
                public_base_url=settings.s3_public_base_url,
            )
        )
    return LocalStorageProvider(
        storage_path=settings.storage_path,
        public_base_url=settings.public_api_url,
    )


class ImageUploadService:
    """Validates and stores uploaded images."""

    def __init__(
        self,
        provider: StorageProvider,
        max_size_bytes: int = MAX_IMAGE_SIZE_KB * 1024,
    ) -> None:
        self.provider = provider
        self.max_size_bytes = max_size_bytes

    @staticmethod
    def decode(data: str) -> tuple[bytes, str | None]:
        """Decode a base64 payload.

        Returns:
            Tuple of (content, mime type declared by a data URL or None).

        Raises:
            ImageUploadError: If the payload is empty or not valid base64.
        """
        declared_mime = None
        match = _DATA_URL_PATTERN.match(data)
        if match:
            declared_mime = match.group("mime")
            data = data[match.end():]

        data = "".join(data.split())
        if not data:
            raise ImageUploadError("Image data is empty")
        try:
            content = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageUploadError("Image data is not valid base64") from e
        if not content:
            raise ImageUploadError("Image data is empty")
        return content, declared_mime

    def validate(self, filename: str, mime_type: str, size: int) -> str:
        """Check the file against the image catalog.

        Returns:
            str: The lower-cased file extension.

        Raises:
            ImageUploadError: On unsupported type, extension or size.
        """
        mime_type = mime_type.lower()
        extensions = IMAGE_MIME_TYPES.get(mime_type)
        if extensions is None:
            raise ImageUploadError(
                f"File type '{mime_type}' is not allowed. "
                f"Allowed types: {', '.join(IMAGE_MIME_TYPES)}"
            )

        extension = PurePosixPath(filename).suffix.lstrip(".").lower()
        if extension not in IMAGE_FORMATS:
            raise ImageUploadError(
                f"File extension '.{extension}' is not allowed. "
                f"Allowed extensions: {', '.join(IMAGE_FORMATS)}"
            )
        if extension not in extensions:
            raise ImageUploadError(
                f"File extension '.{extension}' does not match file type '{mime_type}'"
            )

        if size > self.max_size_bytes:
            raise ImageUploadError(
                f"File size ({size / 1024:.1f}KB) exceeds maximum allowed "
                f"size ({self.max_size_bytes / 1024:.0f}KB)"
            )
        return extension

    @staticmethod
    def _generate_path(extension: str) -> str:
        now = datetime.now(timezone.utc)
        return f"{now:%Y/%m}/{uuid.uuid4()}.{extension}"

    async def upload(self, filename: str, mime_type: str, data: str) -> StoredImage:
        """Decode, validate and store an uploaded image.

        Args:
            filename: Original file name, used for its extension.
            mime_type: MIME type reported by the client. A ``data:`` URL's
                own type takes precedence when present.
            data: Base64 content or a ``data:<mime>;base64,`` URL.

        Returns:
            StoredImage: Where the image was stored and its public URL.

        Raises:
            ImageUploadError: If the image is rejected or cannot be stored.
        """
        content, declared_mime = self.decode(data)
        mime_type = (declared_mime or mime_type or "").lower()
        extension = self.validate(filename, mime_type, len(content))

        path = self._generate_path(extension)
        try:
            url = await self.provider.save_file(path, content, mime_type)
        except (OSError, RuntimeError, ValueError) as e:
            logger.error(
                "Image upload failed",
                provider=self.provider.name,
                filename=filename,
                error=str(e),
            )
            raise ImageUploadError("Image could not be stored") from e

        logger.info(
            "Image uploaded",
            provider=self.provider.name,
            filename=filename,
            path=path,
            size=len(content),
        )
        return StoredImage(
            url=url,
            path=path,
            filename=filename,
            size=len(content),
            mime_type=mime_type,
        )
