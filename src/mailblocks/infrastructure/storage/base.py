"""Base abstractions for image storage providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class StoredImage:
    """Result of a successful image upload."""

    url: str
    path: str
    filename: str
    size: int
    mime_type: str

    def to_dict(self) -> dict[str, str | int]:
        return {
            "url": self.url,
            "path": self.path,
            "filename": self.filename,
            "size": self.size,
            "mime_type": self.mime_type,
        }


@dataclass(slots=True)
class StoredFile:
    """Transport object returned by storage providers for file retrieval."""

    local_path: Path | None = None
    content: bytes | None = None
    filename: str | None = None
    mime_type: str | None = None


class StorageProvider(ABC):
    """Abstract base class for image storage providers.

    Paths are provider-relative keys such as ``2026/10/<uuid>.png``.
    """

    name: str = "base"

    @abstractmethod
    async def save_file(self, path: str, content: bytes, mime_type: str) -> str:
        """Store ``content`` at ``path`` and return its public URL."""
        ...

    @abstractmethod
    async def get_file(self, path: str) -> StoredFile:
        """Get a stored file."""
        ...

    @abstractmethod
    async def delete_file(self, path: str) -> None:
        """Delete a stored file."""
        ...

    @abstractmethod
    async def test_connection(self) -> tuple[bool, str | None]:
        """Test provider connectivity and credentials."""
        ...
