"""
Test configuration and shared fixtures for the location API test suite.
"""

import pytest
from datetime import datetime
from typing import AsyncGenerator
from unittest.mock import AsyncMock
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from guardian.config import Settings
from guardian.database import init_db
from guardian.main import create_app
from guardian.models.location import LocationPoint
from guardian.services.notification_service import SOSNotifier


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'guardian-test.db'}",
        sos_webhook_url=None,
        history_limit=200,
        log_format="plain"
    )


@pytest.fixture
async def test_app(test_settings):
    """Application with its tables created."""
    app = create_app(test_settings)
    await init_db(app.state.engine)

    yield app

    await app.state.engine.dispose()


@pytest.fixture
async def test_session(test_app) -> AsyncGenerator[AsyncSession, None]:
    """Session on the same engine the application uses."""
    async with test_app.state.session_factory() as session:
        yield session


@pytest.fixture
def mock_notifier(test_app):
    """Replace the application's SOS notifier with a mock."""
    notifier = AsyncMock(spec=SOSNotifier)
    notifier.notify.return_value = True
    test_app.state.notifier = notifier
    return notifier


@pytest.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


class TestDataGenerator:
    """Generate test data for various scenarios."""

    @staticmethod
    def create_report(device_id: str = "dev1", lat: float = 31.23, lng: float = 121.47, **extra):
        report = {"device_id": device_id, "lat": lat, "lng": lng}
        report.update(extra)
        return report

    @staticmethod
    def create_point(device_id: str, created_at: datetime, lat: float = 31.23, lng: float = 121.47):
        return LocationPoint(
            device_id=device_id,
            lat=lat,
            lng=lng,
            accuracy=0,
            speed=0,
            altitude=0,
            is_sos=0,
            timestamp=created_at.isoformat() + "Z",
            created_at=created_at
        )


@pytest.fixture
def test_data_generator():
    """Provide test data generator."""
    return TestDataGenerator
