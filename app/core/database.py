"""Async SQLAlchemy engine and session factory.

The engine is built lazily on first use so that importing the package (for
example from a Temporal workflow sandbox or a unit test) never opens a
database connection.
"""

from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


_engine: Optional[AsyncEngine] = None
_session_maker: Optional[async_sessionmaker[AsyncSession]] = None


def create_engine_from_settings() -> AsyncEngine:
    """Create the async engine described by the database settings."""
    engine_kwargs = {"echo": settings.db.echo, "future": True}
    if settings.db.is_postgres:
        engine_kwargs.update(
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.max_overflow,
            # Disable prepared statement cache for PgBouncer compatibility
            connect_args={"statement_cache_size": 0},
        )
    return create_async_engine(settings.database_url, **engine_kwargs)


def get_engine() -> AsyncEngine:
    """Get (and lazily create) the process-wide async engine."""
    global _engine
    if _engine is None:
        _engine = create_engine_from_settings()
    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get (and lazily create) the process-wide session factory."""
    global _session_maker
    if _session_maker is None:
        _session_maker = async_sessionmaker(
            get_engine(), class_=AsyncSession, expire_on_commit=False
        )
    return _session_maker


async def init_database(create_tables: bool = True) -> None:
    """Check connectivity and optionally create missing tables.

    Args:
        create_tables: Whether to run ``Base.metadata.create_all``
    """
    # Register models on Base.metadata
    import app.database.models  # noqa: F401

    engine = get_engine()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        LOGGER.info("Database connection successful")

        if create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            LOGGER.info("Database tables created/verified successfully")
    except Exception:
        LOGGER.error("Database initialization failed", exc_info=True)
        raise


async def close_database() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_maker
    if _engine is not None:
        await _engine.dispose()
        LOGGER.info("Database connection closed")
    _engine = None
    _session_maker = None
