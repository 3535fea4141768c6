"""Shared pytest fixtures and configurations for the ClosetAI application.

This module provides test fixtures and configurations used across all test files,
including:
- Database session management
- Test data fixtures
- Test client setup
- Authentication fixtures
"""

import os

# Settings are cached on first import; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("WEATHER_API_KEY", None)

import random
from typing import AsyncGenerator, List

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from closetai.api.dependencies import get_weather_service
from closetai.core.security import create_access_token
from closetai.database.session import create_engine_for_url, get_session
from closetai.main import app
from closetai.models.database import Base, WardrobeItem
from closetai.models.domain.common import ItemCategory, ItemColor, Season
from closetai.services.weather import WeatherService

from tests.factories import OTHER_USER_ID, TEST_USER_ID, make_item

# Database fixtures
@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for testing."""
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()

# Service fixtures
@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)

@pytest.fixture
def disabled_weather() -> WeatherService:
    """Weather service without an API key; every lookup yields None."""
    return WeatherService(api_key="", client=httpx.AsyncClient())

# HTTP client fixtures
@pytest.fixture
async def async_client(db_session: AsyncSession, disabled_weather) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client bound to the app with the test session injected."""
    async def override_get_session():
        yield db_session

    async def override_get_weather_service():
        return disabled_weather

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_weather_service] = override_get_weather_service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    await disabled_weather.close()

# Authentication fixtures
@pytest.fixture
def test_user_token() -> str:
    """Create authentication token for test user."""
    return create_access_token({"sub": str(TEST_USER_ID)})

@pytest.fixture
def auth_headers(test_user_token: str) -> dict:
    """Get authentication headers."""
    return {"Authorization": f"Bearer {test_user_token}"}

# Test data fixtures
@pytest.fixture
async def wardrobe(db_session: AsyncSession) -> List[WardrobeItem]:
    """A small wardrobe covering every primary category plus an accessory."""
    items = [
        make_item(ItemCategory.TOP, ItemColor.WHITE, occasions=["business", "casual"], tags=["classic"]),
        make_item(ItemCategory.TOP, ItemColor.RED, season=Season.SUMMER, tags=["trendy"]),
        make_item(ItemCategory.BOTTOM, ItemColor.NAVY, occasions=["business"], tags=["classic"]),
        make_item(ItemCategory.BOTTOM, ItemColor.BLUE, season=Season.WINTER, tags=["casual"]),
        make_item(ItemCategory.SHOES, ItemColor.BLACK, occasions=["business"]),
        make_item(ItemCategory.ACCESSORY, ItemColor.BROWN, tags=["classic"]),
        make_item(ItemCategory.TOP, ItemColor.GREEN, is_active=False),
        make_item(ItemCategory.TOP, ItemColor.ORANGE, user_id=OTHER_USER_ID),
    ]
    db_session.add_all(items)
    await db_session.commit()
    return items
