import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine

from sqlgateway.main import app
from sqlgateway.core.config import settings
from sqlgateway.core.database import get_engine

# Point the live tests somewhere else with TEST_DATABASE_URL
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", settings.database_url)

# Nothing listens on port 1, connecting fails right away
UNREACHABLE_DATABASE_URL = "postgresql+asyncpg://postgres@127.0.0.1:1/postgres"


async def make_client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


# Client for routes that never reach the database (or whose services are patched)
@pytest_asyncio.fixture(scope="function")
async def client():
    async with await make_client(object()) as ac:
        yield ac

    app.dependency_overrides.clear()


# Engine pointing at a closed port
@pytest_asyncio.fixture(scope="function")
async def unreachable_engine():
    engine = create_async_engine(UNREACHABLE_DATABASE_URL)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def unreachable_client(unreachable_engine):
    async with await make_client(unreachable_engine) as ac:
        yield ac

    app.dependency_overrides.clear()


# Live database, tests using it are skipped when postgres is not running
@pytest_asyncio.fixture(scope="function")
async def db_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    try:
        async with engine.connect() as conn:
            await conn.exec_driver_sql("SELECT 1")
    except Exception as error:
        await engine.dispose()
        pytest.skip(f"PostgreSQL is not reachable: {error}")

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_client(db_engine):
    async with await make_client(db_engine) as ac:
        yield ac

    app.dependency_overrides.clear()
