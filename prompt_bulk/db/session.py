"""Database session management for the async SQL record store.

Provides async session creation and dependency injection for FastAPI.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from prompt_bulk.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


# Global engine and session maker
_engine: AsyncEngine | None = None
_async_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    """Get or create the async database engine.

    Args:
        settings: Optional settings. If None, uses global settings.

    Returns:
        The async SQLAlchemy engine.
    """
    global _engine

    if _engine is None:
        settings = settings or get_settings()

        logger.info(f"Creating async database engine: {settings.database_url}")

        engine_kwargs: dict = {
            "echo": settings.log_level == "DEBUG",
            "pool_pre_ping": True,
        }
        if not settings.is_sqlite:
            engine_kwargs.update(pool_size=10, max_overflow=20)

        _engine = create_async_engine(settings.database_url, **engine_kwargs)

        logger.info("Database engine created successfully")

    return _engine


def get_session_maker(settings: Settings | None = None) -> async_sessionmaker[AsyncSession]:
    """Get or create the async session maker.

    Args:
        settings: Optional settings. If None, uses global settings.

    Returns:
        The async session maker.
    """
    global _async_session_maker

    if _async_session_maker is None:
        engine = get_engine(settings)

        _async_session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info("Session maker created successfully")

    return _async_session_maker


async def get_async_session(settings: Settings | None = None) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session, rolling back on error.

    Args:
        settings: Optional settings. If None, uses global settings.

    Yields:
        An async database session.
    """
    session_maker = get_session_maker(settings)
    async with session_maker() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}", exc_info=True)
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


async def create_all_tables(settings: Settings | None = None) -> None:
    """Create all database tables.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    # Import models to ensure they're registered with SQLModel metadata
    from prompt_bulk.db import models  # noqa: F401

    engine = get_engine(settings)

    logger.info("Creating database tables...")

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    logger.info("Database tables created successfully")


async def drop_all_tables(settings: Settings | None = None) -> None:
    """Drop all database tables.

    WARNING: This will delete all data.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    from prompt_bulk.db import models  # noqa: F401

    engine = get_engine(settings)

    logger.warning("Dropping all database tables...")

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    logger.warning("All database tables dropped")


async def init_db(settings: Settings | None = None) -> None:
    """Initialize the database schema.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    try:
        await create_all_tables(settings)
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        raise


async def close_db() -> None:
    """Close the database engine and all connections."""
    global _engine, _async_session_maker

    if _engine is not None:
        logger.info("Closing database engine...")
        await _engine.dispose()
        _engine = None
        _async_session_maker = None
        logger.info("Database engine closed")
