"""
Pytest configuration and fixtures.

Provides:
- an in-memory SQLite database (aiosqlite) with the schema created
- a session, a RelationshipStore and a RelationshipEngine bound to it
- an httpx AsyncClient talking to the FastAPI app with get_db overridden
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from friendgraph.core.errors import AppError
from friendgraph.infra.db import get_db
from friendgraph.main import create_app
from friendgraph.models import Base
from friendgraph.relationships.engine import RelationshipEngine
from friendgraph.relationships.store import RelationshipStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ============ Database Fixtures ============

@pytest_asyncio.fixture
async def async_engine():
    """One in-memory database per test, shared by every session via StaticPool."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(async_engine):
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session) -> RelationshipStore:
    return RelationshipStore(session)


@pytest.fixture
def engine(store) -> RelationshipEngine:
    return RelationshipEngine(store)


# ============ API Fixtures ============

@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ============ Test Data ============

@pytest_asyncio.fixture
async def make_friends(engine):
    """Create friendships, ignoring pairs that are rejected (duplicates etc.)."""
    async def _make(*pairs):
        for pair in pairs:
            try:
                await engine.create_friendship(list(pair))
            except AppError:
                pass

    return _make
