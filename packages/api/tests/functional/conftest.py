# This project was developed with assistance from AI tools.
"""Fixtures for functional tests.

The real app from ``src.main`` is a module singleton. ``_clean_overrides``
ensures dependency_overrides are cleared after every test so persona
configuration from one test never leaks into the next.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from src.main import app as real_app
from src.schemas.auth import UserContext

from .mock_db import configure_app_for_persona


@pytest.fixture(autouse=True)
def _clean_overrides():
    """Clear app dependency overrides after each test."""
    yield
    real_app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _no_audit_lock():
    """Event writes go through a mock session; skip hash-chain bookkeeping."""
    with (
        patch("src.services.document.write_event", new_callable=AsyncMock),
        patch("src.services.dossier.write_event", new_callable=AsyncMock),
        patch("src.services.profile.write_event", new_callable=AsyncMock),
        patch("src.services.payment_link.write_event", new_callable=AsyncMock),
        patch("src.services.order.write_event", new_callable=AsyncMock),
    ):
        yield


@pytest.fixture
def app():
    """Return the real FastAPI app with all routers mounted."""
    return real_app


@pytest.fixture
def make_client(app):
    """Factory fixture: configure persona + mock DB, return TestClient."""

    def _make(user: UserContext, session: AsyncMock) -> TestClient:
        configure_app_for_persona(app, user, session)
        return TestClient(app)

    return _make


@pytest.fixture
def make_public_client(app):
    """TestClient for unauthenticated routes backed by a mock DB."""

    def _make(session: AsyncMock) -> TestClient:
        from db import get_db

        async def fake_db():
            yield session

        app.dependency_overrides[get_db] = fake_db
        return TestClient(app)

    return _make
