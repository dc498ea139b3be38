"""Image storage services and provider implementations."""

from mailblocks.infrastructure.storage.base import StorageProvider, StoredFile, StoredImage
from mailblocks.infrastructure.storage.image_upload_service import (
    ImageUploadError,
    ImageUploadService,
    build_storage_provider,
)
from mailblocks.infrastructure.storage.local_storage_provider import LocalStorageProvider
from mailblocks.infrastructure.storage.s3_storage_provider import (
    S3StorageProvider,
    S3StorageSettings,
)

__all__ = [
    "ImageUploadError",
    "ImageUploadService",
    "LocalStorageProvider",
    "S3StorageProvider",
    "S3StorageSettings",
    "StorageProvider",
    "StoredFile",
    "StoredImage",
    "build_storage_provider",
]
