"""Shared test fixtures for async database, sessions, services, and auth tokens."""

import uuid
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from user_api.core.config import Settings
from user_api.core.security import create_access_token, hash_password
from user_api.models.base import Base
from user_api.models.site import Site
from user_api.models.user import User
from user_api.services.user_service import UserService, build_user_service

TEST_SECRET = "test-secret-key-not-for-production"
TEST_ISSUER = "user-api-tests"


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key=TEST_SECRET,
        jwt_algorithm="HS256",
        jwt_issuer=TEST_ISSUER,
        jwt_expire_days=30,
        admin_username="admin",
    )


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_service(async_session: AsyncSession, settings: Settings) -> UserService:
    """UserService wired to the test database."""
    return build_user_service(async_session, settings)


@pytest.fixture
async def admin_user(async_session: AsyncSession) -> User:
    """Create the reserved admin account in the test database."""
    user = User(
        id=uuid.uuid4(),
        username="admin",
        password=hash_password("adminpassword123"),
        full_name="Administrator",
    )
    async_session.add(user)
    await async_session.commit()
    await async_session.refresh(user)
    return user


@pytest.fixture
async def sample_site(async_session: AsyncSession) -> Site:
    """Create a site users can be granted permissions on."""
    site = Site(id=uuid.uuid4(), name="S1")
    async_session.add(site)
    await async_session.commit()
    await async_session.refresh(site)
    return site


@pytest.fixture
def user_token(settings: Settings) -> str:
    """A valid token for a random user id."""
    return create_access_token(
        subject=str(uuid.uuid4()),
        audience="testuser",
        secret_key=settings.jwt_secret_key,
        issuer=settings.jwt_issuer,
        algorithm=settings.jwt_algorithm,
    )
