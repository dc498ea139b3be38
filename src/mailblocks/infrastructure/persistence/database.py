"""Async database access for saved email designs.

Designs live in SQLite by default (aiosqlite); any SQLAlchemy async URL works.
The engine and session factory are created lazily on first use so importing
the API module never opens a connection.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from mailblocks.core.config import Settings, get_settings
from mailblocks.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for MailBlocks models."""


def sqlite_database_path(database_url: str) -> Path | None:
    """Return the file behind a SQLite URL, or None for memory/server databases."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
        return None
    return Path(url.database)


def engine_options(settings: Settings) -> dict[str, Any]:
    """Build ``create_async_engine`` keyword arguments for the configured URL.

    SQLite connections are shared across threads and do not take pool
    sizing; an in-memory database is pinned to one connection.
    """
    url = make_url(settings.database_url)
    options: dict[str, Any] = {"echo": settings.db_echo}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options

    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
    )
    return options


class DatabaseManager:
    """Owns the async engine and the session factory."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.database_url, **engine_options(self.settings)
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    async def create_tables(self) -> None:
        """Create the design tables.

        Development and tests only; production schemas come from Alembic.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def disconnect(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session scope that rolls back on error.

        Example:
            async with db.session() as session:
                designs = await EmailDesignRepository(session).list_all()
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Run ``SELECT 1``; used by the health check and at startup."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database connection check failed", error=str(e))
            return False


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session.

    Example:
        @router.get("")
        async def list_designs(db: AsyncSession = Depends(get_db_session)):
            return await EmailDesignRepository(db).list_all()
    """
    async with get_db_manager().session() as session:
        yield session


async def init_database() -> None:
    """Prepare the database on application startup.

    Creates the SQLite directory when needed, verifies the connection and,
    outside production, creates missing tables.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    # Register models with Base.metadata
    from mailblocks.infrastructure.persistence.models import EmailDesignModel  # noqa: F401

    db = get_db_manager()
    settings = db.settings

    db_path = sqlite_database_path(settings.database_url)
    if db_path is not None:
        db_path.parent.mkdir(parents=True, exist_ok=True)

    if not await db.check_connection():
        raise RuntimeError("Failed to connect to database")

    if settings.is_production:
        logger.info("Production mode: skipping table creation, use migrations")
    else:
        await db.create_tables()


async def close_database() -> None:
    """Dispose the engine on application shutdown."""
    await get_db_manager().disconnect()
