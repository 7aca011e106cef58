"""
Pytest Fixtures for WeatherNow Server Tests

Provides:
- A fresh MessageStore and AdminGate per test
- The FastAPI app built around them
- httpx AsyncClient over ASGITransport for API tests
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from weathernow_server.main import create_app
from weathernow_server.services.admin_gate import AdminGate
from weathernow_server.services.message_store import AnnouncementDraft, MessageStore
from weathernow_server.utils.config import Settings

ADMIN_SECRET = "s3cret"


@pytest.fixture
def store() -> MessageStore:
    return MessageStore()


@pytest.fixture
def gate() -> AdminGate:
    return AdminGate(ADMIN_SECRET)


@pytest.fixture
def app(store, gate):
    test_settings = Settings(admin_password=ADMIN_SECRET, api_rate_limit_enabled=False, log_level="WARNING")
    return create_app(test_settings, store=store, gate=gate)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict:
    return {"x-admin-password": ADMIN_SECRET}


@pytest.fixture
def make_draft():
    """Factory for announcement drafts."""
    def _make(text="Rain expected after 4pm", **kwargs):
        return AnnouncementDraft(text=text, **kwargs)
    return _make
