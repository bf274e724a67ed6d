"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from spamshield.domain.services.session_service import SessionService
from spamshield.persistence.database import Base, get_db
from spamshield.persistence.models import *  # noqa: F401, F403

TEST_PASSWORD = "s3cret-Passw0rd"


@pytest.fixture
async def db_session():
    """Create a test database session."""
    # Use in-memory SQLite for testing; StaticPool keeps a single connection
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_client(db_session):
    """Create a test HTTP client bound to the test database session."""
    from spamshield.main import app

    app.dependency_overrides[get_db] = lambda: db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def register_user(db_session):
    """Factory registering a user through the session service."""

    async def _register(
        name: str = "alice",
        phone: str = "+15550000001",
        email: str | None = None,
        password: str = TEST_PASSWORD,
        contacts: list[dict] | None = None,
    ):
        result = await SessionService(db_session).register(
            name=name,
            phone=phone,
            password=password,
            email=email,
            contacts=contacts,
        )
        return result.user

    return _register
