"""Database engines and session factory.

The application runs on async drivers (asyncpg, aiosqlite). Maintenance
scripts that need a plain ``Connection`` use ``sync_url`` to get the
matching sync driver.
"""

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from oidclink.config import Settings

# Async driver -> sync driver of the same database
_SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql",
    "sqlite+aiosqlite": "sqlite",
}


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    SQLite gets a single shared connection so an in-memory database is
    visible to every session.

    Args:
        settings: Application settings with database URL

    Returns:
        Configured async engine
    """
    url = settings.database.url
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=settings.debug,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory; sessions flush explicitly."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def sync_url(url: str) -> URL:
    """Swap an async driver for its sync counterpart.

    Example:
        >>> sync_url("postgresql+asyncpg://u:p@db/wiki").drivername
        'postgresql'
    """
    parsed = make_url(url)
    return parsed.set(
        drivername=_SYNC_DRIVERS.get(parsed.drivername, parsed.drivername)
    )
