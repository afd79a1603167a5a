"""Shared fixtures for page/route tests."""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from src.dashboard.api.main import create_app
# Import the dependencies to override
from src.dashboard.api.deps import get_api_client, get_display_timezone, require_user


# --- Test User Fixture ---
@pytest.fixture
def test_user():
    """Signed-in user for protected pages."""
    return {"username": "admin", "email": "admin@workshop.test"}


# --- Mock Settings Fixture ---
@pytest.fixture
def mock_settings():
    """Mock settings for route tests."""
    return {
        "api_base_url": "http://workshop.test",
        "api_timeout": 2.0,
        "session_secret": "test-secret",
        "display_timezone": "",
        "log_level": "WARNING",
    }


def build_app(mock_settings, fake_api):
    async def override_get_api_client():
        yield fake_api

    with patch("src.dashboard.api.main.get_settings", return_value=mock_settings):
        app = create_app()
    app.dependency_overrides[get_api_client] = override_get_api_client
    # Naive timestamps in the fixtures are already local; no conversion
    app.dependency_overrides[get_display_timezone] = lambda: None
    return app


# --- Test Client Fixtures ---
@pytest.fixture
def client(mock_settings, fake_api, test_user):
    """
    TestClient for a signed-in user, with the workshop API replaced by the fake client.
    """
    app = build_app(mock_settings, fake_api)
    app.dependency_overrides[require_user] = lambda: test_user

    with TestClient(app) as test_client:
        yield test_client

    # Clean up dependency overrides after tests
    app.dependency_overrides = {}


@pytest.fixture
def anonymous_client(mock_settings, fake_api):
    """TestClient with the real auth guard (no one signed in yet)."""
    app = build_app(mock_settings, fake_api)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides = {}
