"""Database connection and session management."""
from collections.abc import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from liftengine.config.settings import get_settings
from liftengine.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """Create the async engine for ``database_url`` (defaults to settings)."""
    settings = get_settings()
    url = database_url or settings.database_url

    if url.startswith("sqlite") and ":memory:" in url:
        # Every pooled connection to :memory: is a separate database.
        return create_async_engine(
            url,
            echo=settings.database_echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.database_echo)

    return create_async_engine(
        url,
        echo=settings.database_echo,
        pool_size=10,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=300,
        pool_pre_ping=True,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Yield a session that commits on success and rolls back on error."""
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db(engine: AsyncEngine) -> None:
    """Create tables for all registered models."""
    # Import models so they register on Base.metadata
    import liftengine.models  # noqa: F401

    url = str(engine.url)
    if url.startswith("sqlite") and ":memory:" not in url:
        async with engine.connect() as conn:
            await conn.execute(text("PRAGMA journal_mode=WAL"))
            await conn.execute(text("PRAGMA busy_timeout=30000"))
            await conn.commit()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("database_initialized", url=engine.url.render_as_string(hide_password=True))


async def close_engine(engine: AsyncEngine) -> None:
    await engine.dispose()
