# tests/conftest.py

import os

TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["BASE_URL"] = "http://sho.rt"

import pytest
from httpx import AsyncClient, ASGITransport
from main import app
from database import async_session_maker, engine
from links.models import metadata as links_metadata
from links.store import LinkStore


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def setup_database():
    async with engine.begin() as conn:
        await conn.run_sync(links_metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(links_metadata.drop_all)
    # pooled aiosqlite connections belong to this test's event loop
    await engine.dispose()


@pytest.fixture
async def store(setup_database):
    async with async_session_maker() as session:
        yield LinkStore(session)


@pytest.fixture
async def client(setup_database):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
