"""Pytest configuration and shared fixtures."""

import os

# Settings are read at import time; point the app at SQLite before importing it
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import AsyncGenerator
from uuid import UUID

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from villa_onboarding.core.database import Base, build_engine, build_session_maker
from villa_onboarding.database import models  # noqa: F401
from villa_onboarding.main import app
from villa_onboarding.services.onboarding_service import OnboardingService


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """On-disk SQLite database with every table created.

    A file (not ``:memory:``) so that separate sessions see one database.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'onboarding.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_maker(db_engine)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def villa_id(session_maker) -> UUID:
    """A freshly started villa onboarding."""
    async with session_maker() as session:
        progress = await OnboardingService(session).start_onboarding("Villa Serenity", user_id="tester")
    return UUID(progress["villa_id"])


@pytest.fixture
def villa_info_payload() -> dict:
    """A complete stage 1 payload, partly using alias keys."""
    return {
        "name": "Villa Serenity",
        "villaAddress": "Jl. Pantai Berawa 12",
        "villaCity": "Canggu",
        "villaCountry": "Indonesia",
        "bedrooms": "4",
        "bathrooms": 3,
        "maxGuests": 8,
        "propertyType": "villa",
        "googleCoordinates": "-8.6478, 115.1385",
    }
