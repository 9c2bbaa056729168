"""
Pytest fixtures for test database, client, and authentication.

Every test gets a fresh in-memory SQLite database. Requests run in their own
session, rolled back at the end exactly like get_db (services commit what
they keep), while fixtures write through a separate session.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["REDIS_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-with-at-least-32-bytes!!"

from datetime import date, time, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eventbook.main import app
from eventbook.db.base import Base
from eventbook.db.session import get_db
from eventbook.core.security import hash_password
from eventbook.models import Category, Event, User
from eventbook.services.auth_service import issue_token

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create tables on a private in-memory database, drop them afterwards."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests use the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            finally:
                await session.rollback()

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(db: AsyncSession, email: str, username: str) -> User:
    user = User(
        email=email,
        username=username,
        hashed_password=hash_password("testpassword123"),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "test@example.com", "testuser")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "other@example.com", "otheruser")


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    return {"Authorization": f"Bearer {issue_token(test_user)}"}


@pytest_asyncio.fixture
async def other_auth_headers(other_user: User) -> dict:
    return {"Authorization": f"Bearer {issue_token(other_user)}"}


@pytest_asyncio.fixture
async def category(db_session: AsyncSession) -> Category:
    category = Category(name="Concerts", description="Live music", color="#FF6B6B")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest_asyncio.fixture
async def make_event(db_session: AsyncSession, test_user: User, category: Category):
    """Factory for events organized by test_user."""

    async def _make(**overrides) -> Event:
        capacity = overrides.pop("capacity", 100)
        fields = {
            "title": "Test Concert",
            "description": "A test event",
            "date": date.today() + timedelta(days=30),
            "time": time(19, 30),
            "location": "Test Venue",
            "capacity": capacity,
            "remaining_spots": capacity,
            "price": 25.0,
            "category_id": category.id,
            "organizer_id": test_user.id,
            "is_active": True,
        }
        fields.update(overrides)
        event = Event(**fields)
        db_session.add(event)
        await db_session.commit()
        await db_session.refresh(event)
        return event

    return _make


@pytest_asyncio.fixture
async def test_event(make_event) -> Event:
    """An event with 100 spots."""
    return await make_event()


@pytest_asyncio.fixture
async def sold_out_event(make_event) -> Event:
    """An event with no remaining spots."""
    return await make_event(title="Sold Out Show", capacity=50, remaining_spots=0)
