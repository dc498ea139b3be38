"""Fixtures for API route tests."""

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mailblocks.infrastructure.api.app import app
from mailblocks.infrastructure.api.dependencies import get_renderer, get_storage_provider
from mailblocks.infrastructure.persistence.database import get_db_session
from mailblocks.infrastructure.services.mjml import RenderResult
from mailblocks.infrastructure.storage import LocalStorageProvider


@pytest.fixture
def renderer():
    """Renderer stub standing in for the MJML engine."""
    mock = MagicMock()
    mock.render_async = AsyncMock(return_value=RenderResult(html="<html>rendered</html>"))
    return mock


@pytest.fixture
def storage(tmp_path):
    return LocalStorageProvider(str(tmp_path), "http://test/api/v1")


@pytest_asyncio.fixture
async def client(db_session, renderer, storage) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with database, renderer and storage overridden."""

    async def override_get_db_session():
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_renderer] = lambda: renderer
    app.dependency_overrides[get_storage_provider] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
