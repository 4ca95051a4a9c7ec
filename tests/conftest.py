"""
tests/conftest.py -- Shared test fixtures for CityInfo integration tests.

This module provides:
  - _make_test_store(): creates an isolated, seeded in-memory city store
  - _patch_lifespan(): wires test services into app.state, bypassing real startup
  - api_client: TestClient plus bearer headers and the mocked mail service
  - api_client_no_raise: the same, with unhandled errors returned as 500s
  - bearer_headers: factory for Authorization headers carrying any city claim

Named shared-memory SQLite URIs (not plain :memory:) are required because
TestClient runs sync route handlers in a thread pool. Plain :memory: DBs are
per-connection and would present a blank schema to each worker thread.

Environment variables must be set before any api/auth/core import so
get_settings() sees them: DEBUG auto-generates SECRET_KEY, ALLOWED_HOSTS
admits TestClient's "testserver" host, LOGIN_RATE_LIMIT keeps repeated logins
from tripping the limiter.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import CityInfoUser
from auth.store import DemoUserStore
from auth.tokens import create_access_token
from cities.store import CityInfoStore
from core.mail import LocalMailService

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_store(db_suffix: str) -> CityInfoStore:
    """Create a seeded store on a named shared-memory SQLite database."""
    url = f"sqlite:///file:test_cityinfo_{db_suffix}?mode=memory&cache=shared&uri=true"
    return CityInfoStore(db_url=url)


def _patch_lifespan(store: CityInfoStore, mail_service):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.city_store = store
        app.state.user_store = DemoUserStore()
        app.state.mail_service = mail_service
        yield

    return test_lifespan


def _token_for(city: str | None) -> str:
    return create_access_token(
        CityInfoUser(
            user_id=1,
            username="tester",
            first_name="Test",
            last_name="User",
            city=city or "",
        )
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def bearer_headers() -> Callable[[str | None], dict[str, str]]:
    """Return a factory: bearer_headers("Paris") -> {"Authorization": "Bearer ..."}."""

    def _headers(city: str | None = "Antwerp") -> dict[str, str]:
        return {"Authorization": f"Bearer {_token_for(city)}"}

    return _headers


@pytest.fixture
def store() -> Generator[CityInfoStore, None, None]:
    """Seeded store on a private in-memory database, for repository unit tests."""
    s = CityInfoStore("sqlite:///:memory:")
    yield s
    s.close()


def _client_with_fresh_store(raise_server_exceptions: bool):
    store = _make_test_store(uuid.uuid4().hex)
    mail = MagicMock(spec=LocalMailService)

    app.router.lifespan_context = _patch_lifespan(store, mail)

    with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
        yield client, {"Authorization": f"Bearer {_token_for('Antwerp')}"}, mail

    store.close()


@pytest.fixture
def api_client() -> Generator[tuple[TestClient, dict[str, str], MagicMock], None, None]:
    """Yield (client, headers, mail) for API integration tests.

    Each test gets a freshly seeded database, so mutations in one test never
    leak into another. headers carry a token whose city claim is "Antwerp".
    mail is a MagicMock standing in for the LocalMailService.
    """
    yield from _client_with_fresh_store(raise_server_exceptions=True)


@pytest.fixture
def api_client_no_raise() -> Generator[tuple[TestClient, dict[str, str], MagicMock], None, None]:
    """Same as api_client, but unhandled errors come back as 500 responses instead of raising."""
    yield from _client_with_fresh_store(raise_server_exceptions=False)
