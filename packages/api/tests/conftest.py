# This project was developed with assistance from AI tools.
"""Shared fixtures: in-memory SQLite store, app client, stubbed completion provider."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from db import Base, get_db
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.main import app
from src.services import relay

STUB_REPLY = "Happy to help! Which service do you need?"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def override_db(session_factory):
    """Point the app's ``get_db`` dependency at the in-memory database."""

    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    yield session_factory
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def completion(monkeypatch):
    """Replace the completion provider with an AsyncMock returning STUB_REPLY."""
    mock = AsyncMock(return_value=STUB_REPLY)
    monkeypatch.setattr(relay, "get_completion", mock)
    return mock


@pytest_asyncio.fixture
async def client(override_db, completion):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
