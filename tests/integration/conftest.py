"""Pytest configuration for integration tests."""

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from mailblocks.infrastructure.api.app import app
from mailblocks.infrastructure.api.dependencies import get_storage_provider
from mailblocks.infrastructure.persistence import models  # noqa: F401
from mailblocks.infrastructure.persistence.database import Base, get_db_session
from mailblocks.infrastructure.storage import LocalStorageProvider


@pytest_asyncio.fixture
async def client(tmp_path) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client backed by an in-memory database and the real MJML engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_storage_provider] = lambda: LocalStorageProvider(
        str(tmp_path), "http://test/api/v1"
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    await engine.dispose()
