"""FastAPI dependencies for the rendering engine, publishing and image storage."""

from typing import Annotated

from fastapi import Depends

from mailblocks.core.config import get_settings
from mailblocks.infrastructure.services.mjml.html_renderer import (
    MjmlRenderer,
    get_mjml_renderer,
)
from mailblocks.infrastructure.services.template_publisher import TemplatePublisher
from mailblocks.infrastructure.storage.base import StorageProvider
from mailblocks.infrastructure.storage.image_upload_service import (
    ImageUploadService,
    build_storage_provider,
)

_storage_provider: StorageProvider | None = None


def get_renderer() -> MjmlRenderer:
    return get_mjml_renderer()


def get_publisher(renderer: Annotated[MjmlRenderer, Depends(get_renderer)]) -> TemplatePublisher:
    return TemplatePublisher(renderer, render_html=get_settings().render_html_on_save)


def get_storage_provider() -> StorageProvider:
    """Get the process-wide storage provider selected in settings."""
    global _storage_provider
    if _storage_provider is None:
        _storage_provider = build_storage_provider(get_settings())
    return _storage_provider


def get_upload_service(
    provider: Annotated[StorageProvider, Depends(get_storage_provider)],
) -> ImageUploadService:
    return ImageUploadService(provider)


Renderer = Annotated[MjmlRenderer, Depends(get_renderer)]
Publisher = Annotated[TemplatePublisher, Depends(get_publisher)]
Storage = Annotated[StorageProvider, Depends(get_storage_provider)]
UploadService = Annotated[ImageUploadService, Depends(get_upload_service)]
