"""
Async engine and session management for the record store.

The engine is created lazily from ``DATABASE_URL``. Postgres (asyncpg) is the
production target; SQLite (aiosqlite) is accepted for local runs and tests.
"""
from typing import Any, Dict, Optional

import structlog
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from payment_relay.config import Settings, get_settings
from payment_relay.database.models import Base

logger = structlog.get_logger(__name__)

_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def engine_options(database_url: str, echo: bool = False) -> Dict[str, Any]:
    """
    Engine keyword arguments suited to the database backend.

    Args:
        database_url: Async SQLAlchemy URL
        echo: Echo SQL statements

    Returns:
        Dict[str, Any]: Keyword arguments for ``create_async_engine``
    """
    options: Dict[str, Any] = {"echo": echo}
    if make_url(database_url).get_backend_name() == "sqlite":
        # aiosqlite runs the connection on its own thread
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_pre_ping"] = True
    return options


def get_engine(settings: Optional[Settings] = None) -> AsyncEngine:
    """
    Get or create the process-wide engine.

    Args:
        settings: Optional settings (defaults to the cached environment settings)

    Returns:
        AsyncEngine: SQLAlchemy async engine
    """
    global _engine
    if _engine is None:
        settings = settings or get_settings()
        _engine = create_async_engine(
            settings.database_url,
            **engine_options(settings.database_url, settings.database_echo),
        )
        logger.info("database_engine_created", backend=_engine.dialect.name)
    return _engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Build a session factory bound to an engine.

    Sessions keep loaded rows usable after commit so documents can be read
    back without another round trip.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=True,
    )


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the process-wide session factory."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = create_session_factory(get_engine())
    return _async_session_factory


async def init_db(settings: Optional[Settings] = None) -> None:
    """Create the Transactions and Orders tables if they are missing."""
    engine = get_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
