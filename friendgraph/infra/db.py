"""
Database infrastructure

Async SQLAlchemy engine and session factory. The engine is created on first
use so that importing the application does not open a connection pool.
"""

from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from friendgraph.core.config import settings
from friendgraph.core.logging import get_logger
from friendgraph.models import Base

logger = get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it if needed"""
    global _engine, _session_factory
    if _engine is None:
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.db_echo,
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
        _session_factory = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    get_engine()
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session per request.
    Writes are committed by the store; anything left open is rolled back.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables (development only; production uses Alembic)"""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("db.init", tables=sorted(Base.metadata.tables))


async def check_db(session: AsyncSession) -> str:
    """Return 'ok' or an error description for health checks"""
    try:
        await session.execute(text("SELECT 1"))
        return "ok"
    except Exception as e:
        return f"error: {str(e)}"


async def close_db_connection() -> None:
    """Dispose the connection pool on shutdown"""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
