"""
Database Connection Pool Management
====================================

Async connection pool management using SQLAlchemy AsyncIO
(asyncpg in production, aiosqlite for local runs and tests).
Provides session management and health checks.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from lekhapal.config.settings import Settings, get_settings
from lekhapal.db.models import Base
from lekhapal.utils.errors import PersistenceError
from lekhapal.utils.logger import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """
    Manages async database connections with connection pooling.

    Features:
        - AsyncIO connection pool
        - Optional table creation on startup
        - Health check functionality
        - Session lifecycle management (commit / rollback)
    """

    _instance: "DatabaseManager | None" = None
    _engine: AsyncEngine | None = None
    _session_factory: async_sessionmaker[AsyncSession] | None = None

    def __new__(cls) -> "DatabaseManager":
        """Singleton pattern to ensure single database manager."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    async def initialize(cls, settings: Settings | None = None) -> "DatabaseManager":
        """
        Initialize the database connection pool.

        Args:
            settings: Application settings (uses default if not provided)

        Returns:
            DatabaseManager instance

        Raises:
            PersistenceError: If connection initialization fails
        """
        instance = cls()

        if instance._engine is not None:
            logger.debug("Database already initialized, reusing connection pool")
            return instance

        settings = settings or get_settings()

        engine_kwargs: dict[str, Any] = {"echo": False, "pool_pre_ping": True}
        if not settings.database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.db_pool_min,
                max_overflow=settings.db_pool_max - settings.db_pool_min,
                pool_recycle=3600,
            )

        try:
            logger.info(
                "Initializing database connection pool",
                pool_min=settings.db_pool_min,
                pool_max=settings.db_pool_max,
            )

            instance._engine = create_async_engine(settings.database_url, **engine_kwargs)
            instance._session_factory = async_sessionmaker(
                instance._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            if settings.db_create_tables:
                async with instance._engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                logger.info("Database tables ensured")

            logger.info("Database connection pool initialized successfully")
            return instance

        except Exception as e:
            logger.error("Failed to initialize database", error=str(e))
            instance._engine = None
            instance._session_factory = None
            raise PersistenceError(
                message="Database initialization failed",
                details={"error": str(e)},
            ) from e

    @classmethod
    async def close(cls) -> None:
        """
        Close the database connection pool.

        Should be called during application shutdown.
        """
        instance = cls._instance

        if instance is None or instance._engine is None:
            logger.debug("Database not initialized, nothing to close")
            return

        try:
            logger.info("Closing database connection pool")
            await instance._engine.dispose()
            logger.info("Database connection pool closed")
        except Exception as e:
            logger.error("Error closing database connection pool", error=str(e))
            raise PersistenceError(
                message="Failed to close database connection",
                details={"error": str(e)},
            ) from e
        finally:
            instance._engine = None
            instance._session_factory = None
            cls._instance = None

    @classmethod
    @asynccontextmanager
    async def get_session(cls) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session.

        Yields:
            AsyncSession instance, committed on success and rolled back on error

        Raises:
            PersistenceError: If database is not initialized
        """
        instance = cls._instance

        if instance is None or instance._session_factory is None:
            raise PersistenceError(
                message="Database not initialized",
                details={"hint": "Call DatabaseManager.initialize() first"},
            )

        async with instance._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error("Database session error, rolled back", error=str(e))
                raise

    @classmethod
    async def health_check(cls) -> dict[str, Any]:
        """
        Check database connection health.

        Returns:
            Health check result dict, e.g. {"status": "healthy", "latency_ms": 5.2}
        """
        instance = cls._instance

        if instance is None or instance._engine is None:
            return {"status": "not_initialized", "error": "Database not initialized"}

        start = time.perf_counter()

        try:
            async with instance._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

            latency = (time.perf_counter() - start) * 1000

            return {
                "status": "healthy",
                "latency_ms": round(latency, 2),
            }

        except Exception as e:
            return {
                "status": "unhealthy",
                "error": str(e),
            }


# Convenience functions for direct import
async def init_database(settings: Settings | None = None) -> DatabaseManager:
    """Initialize database connection pool."""
    return await DatabaseManager.initialize(settings)


async def close_database() -> None:
    """Close database connection pool."""
    await DatabaseManager.close()


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session."""
    async with DatabaseManager.get_session() as session:
        yield session


async def health_check() -> dict[str, Any]:
    """Check database health."""
    return await DatabaseManager.health_check()
