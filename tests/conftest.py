"""Pytest configuration.

Environment defaults are set before the application package is imported,
so the module-level settings and app are built for the testing
environment.

Fixtures:
    services: fresh in-memory services layer (tests/utils/fake_services.py)
    app: application built around `services`
    client: TestClient for `app`
    api_key_headers / session_cookies: credentials for USER_ID
"""

import asyncio
import os
from datetime import UTC, datetime, timedelta

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-with-at-least-32-bytes")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import jwt  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from midcurve_api.core.config import Settings  # noqa: E402
from midcurve_api.main import create_app  # noqa: E402
from tests.utils.fake_services import (  # noqa: E402
    API_KEY,
    OTHER_API_KEY,
    USER_ID,
    WALLET_ADDRESS,
    build_fake_services,
)

SESSION_SECRET = os.environ["SESSION_SECRET"]


def make_session_token(
    user_id: str = USER_ID,
    *,
    secret: str = SESSION_SECRET,
    expires_in: timedelta = timedelta(hours=1),
    **claims: object,
) -> str:
    """Sign a session JWT the way the web sign-in flow does."""
    payload = {
        "sub": user_id,
        "name": "Alice",
        "email": "alice@example.com",
        "wallets": [
            {
                "id": "wallet_1",
                "address": WALLET_ADDRESS,
                "chainId": 1,
                "isPrimary": True,
                "createdAt": "2025-01-15T12:00:00.000Z",
            }
        ],
        "exp": datetime.now(UTC) + expires_in,
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line("markers", "api: HTTP tests through the FastAPI test client")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)


@pytest.fixture
def test_settings():
    """Settings for the testing environment with session auth enabled."""
    return Settings(
        environment="testing",
        session_secret=SESSION_SECRET,
        log_level="WARNING",
    )


@pytest.fixture
def services():
    """Fresh fake services layer per test."""
    return build_fake_services()


@pytest.fixture
def app(test_settings, services):
    """Application wired to the fake services."""
    return create_app(test_settings, services=services)


@pytest.fixture
def client(app):
    """Provide test client."""
    return TestClient(app)


@pytest.fixture
def api_key_headers():
    return {"Authorization": f"Bearer {API_KEY}"}


@pytest.fixture
def other_api_key_headers():
    return {"Authorization": f"Bearer {OTHER_API_KEY}"}


@pytest.fixture
def session_token():
    return make_session_token()


@pytest.fixture
def session_headers(session_token):
    """Session JWT sent as a Bearer token."""
    return {"Authorization": f"Bearer {session_token}"}


@pytest.fixture
def session_client(app, test_settings, session_token):
    """Client carrying the session cookie."""
    return TestClient(app, cookies={test_settings.session_cookie_name: session_token})
