"""Pytest configuration and fixtures."""

import os
from urllib.parse import urlparse

import asyncpg
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shopledger.api.auth import get_current_user
from shopledger.core.db import Base, get_db
from shopledger.core.security import hash_password
from shopledger.main import create_app

# Import all models so create_all sees every table
import shopledger.models  # noqa: F401
from shopledger.models.user import User
from tests.factories import UserFactory

TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "postgresql+asyncpg://shopledger:dev_password_change_in_prod@db:5432/shopledger_test",
)


async def _ensure_test_database() -> None:
    """Create the test database if the server does not have it yet."""
    url = urlparse(TEST_DATABASE_URL.replace("+asyncpg", ""))
    conn = await asyncpg.connect(
        host=url.hostname,
        port=url.port or 5432,
        user=url.username,
        password=url.password,
        database="postgres",
    )
    try:
        await conn.execute(f'CREATE DATABASE {url.path.lstrip("/")}')
    except asyncpg.DuplicateDatabaseError:
        pass
    finally:
        await conn.close()


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Engine on a freshly created schema, dropped after the test."""
    try:
        await _ensure_test_database()
    except (OSError, asyncpg.PostgresError) as e:
        print(f"Warning: Could not create test database: {e}")

    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine):
    """Create fresh DB session for each test."""
    async_session_maker = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


def _build_client_app(db_session: AsyncSession, user: User):
    app = create_app()

    # Same session as the test, rolled back when the endpoint raises
    async def override_get_db():
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    user_id = user.id

    # Reloaded per request: a rolled back request expires every instance
    async def override_get_current_user():
        return await db_session.get(User, user_id)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    return app


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """The shopkeeper the default client is logged in as."""
    return await UserFactory.create(
        db_session,
        email="shopkeeper@example.com",
        name="Test Shopkeeper",
        business_name="Test Store",
        hashed_password=hash_password("testpass123"),
    )


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, test_user: User):
    """Create async test client with overridden DB and auth dependencies."""
    app = _build_client_app(db_session, test_user)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ac.test_user = test_user
        ac.shopkeeper_id = test_user.id
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def other_client(db_session: AsyncSession):
    """Client logged in as a second shopkeeper, for tenant isolation checks."""
    other_user = await UserFactory.create(
        db_session,
        email="other@example.com",
        name="Other Shopkeeper",
    )
    app = _build_client_app(db_session, other_user)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ac.test_user = other_user
        ac.shopkeeper_id = other_user.id
        ac.db_session = db_session
        yield ac


@pytest.fixture
async def unauthenticated_client(db_session: AsyncSession) -> AsyncClient:
    """AsyncClient without authentication overrides (for testing auth failures)."""
    app = create_app()

    async def override_get_db():
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ac.db_session = db_session
        yield ac
