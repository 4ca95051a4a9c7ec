"""
tests/test_api_authentication.py -- Integration tests for POST /api/authentication/authenticate.

Covers:
  - 200 with a bare JSON string token for any non-empty username
  - 401 bad_credentials for an empty or missing username
  - Cache-Control: no-store on every response
  - The issued token is accepted by the protected routes
  - Logins beyond Settings.login_rate_limit get 429 rate_limited with Retry-After
"""

from __future__ import annotations

import pytest

from api.limiter import limiter
from auth.tokens import decode_access_token
from core.config import get_settings

_LOGIN = "/api/authentication/authenticate"


class TestAuthenticate:
    def test_issues_token_string(self, api_client) -> None:
        """Valid credentials return the token itself as a JSON string."""
        client, _, _ = api_client
        body = {"userName": "KevinDockx", "password": "This is a relatively long sentence that acts as my password"}
        resp = client.post(_LOGIN, json=body)
        assert resp.status_code == 200, f"Expected 200, got {resp.status_code}: {resp.text}"
        assert resp.headers["Cache-Control"] == "no-store"

        token = resp.json()
        assert isinstance(token, str)
        payload = decode_access_token(token)
        assert payload is not None
        assert payload["city"] == "Antwerp"
        assert payload["given_name"] == "Kevin"

    @pytest.mark.parametrize("body", [{"userName": "", "password": "pw"}, {"password": "pw"}, {}])
    def test_missing_username_is_unauthorized(self, api_client, body) -> None:
        client, _, _ = api_client
        resp = client.post(_LOGIN, json=body)
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "bad_credentials"
        assert resp.headers["Cache-Control"] == "no-store"

    def test_issued_token_opens_protected_routes(self, api_client) -> None:
        client, _, _ = api_client
        token = client.post(_LOGIN, json={"userName": "kevin", "password": "pw"}).json()
        headers = {"Authorization": f"Bearer {token}"}

        assert client.get("/api/cities", headers=headers).status_code == 200
        assert client.get("/api/cities/2/pointsofinterest", headers=headers).status_code == 200
        assert client.get("/api/v2/cities/2/pointsofinterest", headers=headers).status_code == 200

    def test_no_auth_required_to_log_in(self, api_client) -> None:
        """The login route itself never demands a bearer token."""
        client, _, _ = api_client
        resp = client.post(_LOGIN, json={"userName": "kevin"}, headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 200


class TestLoginRateLimit:
    @pytest.fixture
    def low_limit(self, monkeypatch):
        """Lower the login limit to 3/minute against a clean limiter."""
        monkeypatch.setattr(get_settings(), "login_rate_limit", "3/minute")
        limiter.reset()
        yield
        limiter.reset()

    def test_excess_logins_are_rejected_with_retry_after(self, api_client, low_limit) -> None:
        client, _, _ = api_client
        statuses = [client.post(_LOGIN, json={"userName": "kevin"}).status_code for _ in range(5)]
        assert statuses == [200, 200, 200, 429, 429], f"Unexpected statuses: {statuses}"

        resp = client.post(_LOGIN, json={"userName": "kevin"})
        assert resp.status_code == 429
        assert resp.json()["error"]["code"] == "rate_limited"
        assert int(resp.headers["Retry-After"]) > 0

    def test_limit_does_not_apply_to_other_routes(self, api_client, low_limit) -> None:
        client, headers, _ = api_client
        statuses = {client.get("/api/cities", headers=headers).status_code for _ in range(5)}
        assert statuses == {200}
