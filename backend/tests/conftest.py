"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh schema on its own engine (in-memory SQLite by
default, or TEST_DATABASE_URL when set) and an HTTP client whose DB
dependency is overridden with the test session.
"""

import os

# Must be set before app settings are first read
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.core.security import create_access_token, hash_password
from app.models.user import User, UserRole
from app.models.experience import Experience, ExperienceStatus

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")
TEST_PASSWORD = "testpassword123"


def _make_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        return create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(TEST_DATABASE_URL)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(db_session: AsyncSession, email: str, role: UserRole) -> User:
    user = User(email=email, password_hash=hash_password(TEST_PASSWORD), role=role.value)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest_asyncio.fixture
async def host_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "host@example.com", UserRole.HOST)


@pytest_asyncio.fixture
async def other_host(db_session: AsyncSession) -> User:
    return await create_user(db_session, "otherhost@example.com", UserRole.HOST)


@pytest_asyncio.fixture
async def guest_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "guest@example.com", UserRole.USER)


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "admin@example.com", UserRole.ADMIN)


@pytest_asyncio.fixture
async def host_headers(host_user: User) -> dict:
    return bearer(host_user)


@pytest_asyncio.fixture
async def guest_headers(guest_user: User) -> dict:
    return bearer(guest_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return bearer(admin_user)


async def create_experience(
    db_session: AsyncSession,
    host: User,
    status: ExperienceStatus = ExperienceStatus.DRAFT,
    title: str = "Sunset Kayak Tour",
    location: str = "Lisbon",
    start_time: datetime = None,
    price: int = 4500,
) -> Experience:
    experience = Experience(
        title=title,
        description="Two hours on the river",
        location=location,
        price=price,
        start_time=start_time or datetime.now(timezone.utc) + timedelta(days=30),
        created_by=host.id,
        status=status.value,
    )
    db_session.add(experience)
    await db_session.commit()
    await db_session.refresh(experience)
    return experience


@pytest_asyncio.fixture
async def draft_experience(db_session: AsyncSession, host_user: User) -> Experience:
    return await create_experience(db_session, host_user)


@pytest_asyncio.fixture
async def published_experience(db_session: AsyncSession, host_user: User) -> Experience:
    return await create_experience(db_session, host_user, status=ExperienceStatus.PUBLISHED)
