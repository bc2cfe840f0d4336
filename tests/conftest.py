from __future__ import annotations

import datetime as dt
from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fittrack.api.deps import now
from fittrack.db import get_session
from fittrack.init_db import init_db
from fittrack.main import create_app
from fittrack.models import User
from fittrack.repositories import UserRepo

NOW = dt.datetime(2025, 6, 1, 12, 0)


@pytest.fixture
def fixed_now() -> dt.datetime:
    return NOW


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    maker = async_sessionmaker(engine, expire_on_commit=False)
    async with maker() as session:
        yield session


@pytest_asyncio.fixture
async def user(db: AsyncSession) -> User:
    u = await UserRepo(db).get_or_create("user-1")
    u.height_value = 180
    u.height_unit = "cm"
    u.sex = "male"
    u.date_of_birth = dt.date(1990, 1, 1)
    u.activity_level = "moderate"
    await db.flush()
    return u


@pytest_asyncio.fixture
async def client(engine: AsyncEngine) -> AsyncIterator[httpx.AsyncClient]:
    maker = async_sessionmaker(engine, expire_on_commit=False)

    async def session_override() -> AsyncIterator[AsyncSession]:
        async with maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app(with_lifespan=False)
    app.dependency_overrides[get_session] = session_override
    app.dependency_overrides[now] = lambda: NOW

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://test", headers={"X-User-Id": "tester"}
    ) as c:
        yield c
