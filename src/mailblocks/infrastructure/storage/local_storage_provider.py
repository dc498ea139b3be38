"""Local filesystem storage provider."""

import asyncio
from pathlib import Path

from mailblocks.core.logging import get_logger
from mailblocks.infrastructure.storage.base import StorageProvider, StoredFile

logger = get_logger(__name__)

UPLOADS_ROUTE = "/uploads/files"


class LocalStorageProvider(StorageProvider):
    """Stores images on disk and serves them through the uploads route."""

    name = "local"

    def __init__(self, storage_path: str, public_base_url: str) -> None:
        """Initialize the provider.

        Args:
            storage_path: Directory images are written under.
            public_base_url: External URL plus API prefix; file URLs are
                ``<public_base_url>/uploads/files/<path>``.
        """
        self.storage_path = Path(storage_path)
        self.public_base_url = public_base_url.rstrip("/")

    def resolve_path(self, path: str) -> Path:
        """Resolve a relative key inside the storage directory.

        Raises:
            ValueError: If the key escapes the storage directory.
        """
        root = self.storage_path.resolve()
        absolute_path = (root / path).resolve()
        if not absolute_path.is_relative_to(root):
            raise ValueError("Invalid file path")
        return absolute_path

    def url_for(self, path: str) -> str:
        return f"{self.public_base_url}{UPLOADS_ROUTE}/{path}"

    async def save_file(self, path: str, content: bytes, mime_type: str) -> str:
        file_path = self.resolve_path(path)

        def _write() -> None:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(content)

        await asyncio.to_thread(_write)
        logger.info("Image saved to local storage", path=path, size=len(content))
        return self.url_for(path)

    async def get_file(self, path: str) -> StoredFile:
        absolute_path = self.resolve_path(path)
        if not absolute_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return StoredFile(local_path=absolute_path, filename=absolute_path.name)

    async def delete_file(self, path: str) -> None:
        absolute_path = self.resolve_path(path)
        if not absolute_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        absolute_path.unlink()

    async def test_connection(self) -> tuple[bool, str | None]:
        """Verify that the configured local storage path is writable."""
        try:
            self.storage_path.mkdir(parents=True, exist_ok=True)

            probe_file = self.storage_path / ".storage_provider_probe"
            probe_file.write_text("ok", encoding="utf-8")
            probe_file.unlink(missing_ok=True)

            return True, f"Local storage is writable at '{self.storage_path}'."
        except OSError as e:
            return False, f"Local storage test failed: {str(e)}"
