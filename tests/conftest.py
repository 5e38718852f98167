"""
Pytest configuration and shared fixtures.

This file provides common fixtures for all tests.
"""

import os
from collections.abc import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from cats_api.core.database import enable_sqlite_foreign_keys, get_db
from cats_api.main import app as main_app
from cats_api.services.cat_api import CatApiClient, get_cat_api_client
from tests.fakes import CAT_API_BASE_URL, TEST_API_KEY, FakeCatApi

# In-memory SQLite unless a dedicated test database is configured.
# Never point this at a dev/prod database: tables are dropped after each test.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a test engine with a fresh schema for each test function.

    Function scope keeps the engine on the same event loop as the
    function-scoped session fixture.
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        test_engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,  # One shared connection keeps the in-memory DB alive
        )
        enable_sqlite_foreign_keys(test_engine)
    else:
        test_engine = create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)

    # Register all table models with SQLModel.metadata
    from cats_api import models  # noqa: F401

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for each test."""
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_cat_api() -> FakeCatApi:
    return FakeCatApi()


@pytest.fixture
async def cat_api(fake_cat_api: FakeCatApi) -> AsyncGenerator[CatApiClient, None]:
    """CatApiClient wired to the fake upstream."""
    async with httpx.AsyncClient(
        base_url=CAT_API_BASE_URL,
        transport=httpx.MockTransport(fake_cat_api.handler),
    ) as http_client:
        yield CatApiClient(http_client, api_key=TEST_API_KEY, fetch_limit=25)


@pytest.fixture
def app(db_session: AsyncSession, cat_api: CatApiClient) -> FastAPI:
    """
    FastAPI app with the test database session and the fake upstream.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    async def override_get_cat_api_client() -> AsyncGenerator[CatApiClient, None]:
        yield cat_api

    main_app.dependency_overrides[get_db] = override_get_db
    main_app.dependency_overrides[get_cat_api_client] = override_get_cat_api_client

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/api/cats")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def make_cat(db_session: AsyncSession):
    """
    Factory inserting a cat, optionally tagged, and committing it.

    Usage:
        async def test_something(make_cat):
            cat = await make_cat("abc", tags=["Playful"])
    """
    from sqlalchemy import select

    from cats_api.models import Cats, CatTags, Tags
    from cats_api.models.tag import tag_key

    async def _make_cat(
        external_id: str,
        *,
        tags: list[str] | None = None,
        image: bytes | None = None,
    ) -> Cats:
        cat = Cats(
            external_id=external_id,
            width=100,
            height=100,
            image=image,
            image_content_type="image/jpeg" if image is not None else None,
        )
        db_session.add(cat)
        await db_session.flush()

        for name in tags or []:
            result = await db_session.execute(
                select(Tags).where(Tags.name_key == tag_key(name))
            )
            tag = result.scalar_one_or_none()
            if tag is None:
                tag = Tags.from_name(name)
                db_session.add(tag)
                await db_session.flush()
            db_session.add(CatTags(cat_id=cat.id, tag_id=tag.id))

        await db_session.commit()
        return cat

    return _make_cat
