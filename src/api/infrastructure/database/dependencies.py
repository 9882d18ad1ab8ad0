"""Database engine and session factory wiring.

Repositories receive the shared ``async_sessionmaker`` and open one short-lived
session per port call, so the engine is created once per process here.
"""

from __future__ import annotations

import threading

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_engine
from infrastructure.database.models import Base
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings, get_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level engine and sessionmaker (created on first use)
_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """Get the database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.
    Also creates and caches the sessionmaker for efficient session creation.

    Returns:
        Configured async engine
    """
    global _engine, _sessionmaker
    if _engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _engine is None:
                settings = get_database_settings()
                _engine = create_engine(settings, echo=get_settings().debug)
                _sessionmaker = async_sessionmaker(
                    _engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    connection_string=settings.connection_string,
                    pool_size=settings.pool_max_connections,
                )
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the shared session factory handed to repositories."""
    get_engine()
    assert _sessionmaker is not None
    return _sessionmaker


async def create_schema() -> None:
    """Create every ORM table that does not exist yet."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    _probe.schema_created(tables=sorted(Base.metadata.tables))


async def close_database_connections() -> None:
    """Close the database engine.

    Should be called on application shutdown to properly cleanup connections.
    Also resets the sessionmaker to allow reinitialization.
    """
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _probe.pool_closed()
        _engine = None
        _sessionmaker = None
