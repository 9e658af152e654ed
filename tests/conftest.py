"""
Pytest configuration and fixtures for the player finder proxy tests.
"""
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app import create_app
from config import Settings
from fakes import FakeRoblox
from services.roblox_api import RobloxAPI


@pytest.fixture
def test_settings():
    """Settings with a generous rate limit and no session credential."""
    settings = Settings()
    settings.roblosecurity = None
    settings.cache_ttl_seconds = 10
    settings.rate_limit_window_ms = 60_000
    settings.rate_limit_max_requests = 1000
    settings.trust_proxy = False
    settings.find_player_max_servers = 500
    return settings


@pytest.fixture
def fake_roblox():
    """Fake upstream with one well-known player."""
    fake = FakeRoblox()
    fake.add_user(1, "Roblox", "Roblox")
    return fake


@pytest.fixture
def app(test_settings, fake_roblox):
    return create_app(test_settings, transport=fake_roblox.transport)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest_asyncio.fixture
async def roblox_api(test_settings, fake_roblox):
    api = RobloxAPI(test_settings, transport=fake_roblox.transport)
    yield api
    await api.aclose()
