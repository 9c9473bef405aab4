import logging
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from volley_stats.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def async_database_url(url: str) -> str:
    """Rewrite plain SQLite/PostgreSQL URLs to their async drivers."""
    if url.startswith("sqlite:"):
        return url.replace("sqlite:", "sqlite+aiosqlite:", 1)
    if url.startswith("postgres://"):
        # Heroku/Render style
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql:") and "asyncpg" not in url:
        return url.replace("postgresql:", "postgresql+asyncpg:", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is on for the connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide engine and its connection pool."""
    database_url = async_database_url(settings.database_url)

    if database_url.startswith("sqlite"):
        kwargs = {}
        if ":memory:" in database_url or database_url.endswith("://"):
            # Every session must see the same in-memory database
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(database_url, echo=settings.debug, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
    )


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    async with request.app.state.sessionmaker() as session:
        try:
            yield session
        finally:
            await session.close()


def get_engine(request: Request) -> AsyncEngine:
    return request.app.state.engine


async def init_db(engine: AsyncEngine) -> bool:
    """
    Create any missing tables.

    Failures are logged and swallowed so the server still comes up;
    queries will then fail per request until the database is reachable.
    """
    # Register every model on Base.metadata
    import volley_stats.models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception:
        logger.exception("❌ Database initialization error")
        return False

    logger.info("✅ Database tables created/verified")
    return True
