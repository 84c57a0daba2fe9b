"""
tests/conftest.py
"""
from __future__ import annotations

import os

# Settings are read at import time, so the environment has to be ready first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("CREATE_TABLES", "false")

from contextlib import asynccontextmanager
from typing import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.db import Base, get_db, register_sqlite_functions
from app.main import app


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """A brand-new in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    register_sqlite_functions(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)


@asynccontextmanager
async def _bound_client(session_factory: async_sessionmaker, **transport_options) -> AsyncIterator[AsyncClient]:
    """
    HTTP client bound to the app; every request gets its own session
    from the per-test database.
    """
    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app, **transport_options)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as http_client:
            yield http_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(session_factory: async_sessionmaker) -> AsyncIterator[AsyncClient]:
    async with _bound_client(session_factory) as http_client:
        yield http_client


@pytest.fixture
async def crash_client(session_factory: async_sessionmaker) -> AsyncIterator[AsyncClient]:
    """Unhandled errors come back as responses instead of being re-raised in the test."""
    async with _bound_client(session_factory, raise_app_exceptions=False) as http_client:
        yield http_client
