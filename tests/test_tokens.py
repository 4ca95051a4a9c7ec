"""Unit tests for auth/store.py, auth/tokens.py and auth/models.py.

Covers:
- DemoUserStore accepts any non-empty username and resolves the demo identity
- authenticate() mints a token carrying the identity claims
- decode_access_token() rejects tampered, foreign-key, expired, and
  wrong-audience/issuer tokens
- CallerClaims treats an empty city claim as absent
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.models import CallerClaims, CityInfoUser
from auth.store import DemoUserStore
from auth.tokens import authenticate, create_access_token, decode_access_token
from core.config import get_settings


@pytest.fixture
def settings():
    return get_settings()


def _claims(settings, **overrides) -> dict:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": "1",
        "city": "Antwerp",
        "iss": settings.auth_issuer,
        "aud": settings.auth_audience,
        "iat": now,
        "exp": now + timedelta(minutes=5),
    }
    claims.update(overrides)
    return claims


class TestDemoUserStore:
    def test_any_username_and_password_resolves_demo_identity(self):
        user = DemoUserStore().validate_credentials("someone", "whatever")
        assert user is not None
        assert user.user_id == 1
        assert user.username == "someone"
        assert (user.first_name, user.last_name, user.city) == ("Kevin", "Dockx", "Antwerp")

    def test_missing_password_still_accepted(self):
        assert DemoUserStore().validate_credentials("someone", None) is not None

    @pytest.mark.parametrize("username", [None, "", "   "])
    def test_empty_username_rejected(self, username):
        assert DemoUserStore().validate_credentials(username, "secret") is None


class TestAuthenticate:
    def test_token_carries_identity_claims(self, settings):
        token = authenticate(DemoUserStore(), "kevin", "pw")
        payload = decode_access_token(token)
        assert payload["city"] == "Antwerp"
        assert payload["sub"] == "1"
        assert payload["given_name"] == "Kevin"
        assert payload["family_name"] == "Dockx"
        assert payload["iss"] == settings.auth_issuer
        assert payload["aud"] == settings.auth_audience

    def test_token_lifetime_is_one_hour(self):
        payload = decode_access_token(authenticate(DemoUserStore(), "kevin", "pw"))
        assert payload["exp"] - payload["iat"] == 3600

    def test_rejected_credentials_yield_no_token(self):
        assert authenticate(DemoUserStore(), "", "pw") is None


class TestDecodeAccessToken:
    def test_round_trip(self):
        user = CityInfoUser(user_id=5, username="amelie", first_name="Amelie", last_name="Poulain", city="Paris")
        payload = decode_access_token(create_access_token(user))
        assert payload["sub"] == "5"
        assert payload["city"] == "Paris"

    def test_tampered_token_rejected(self):
        token = authenticate(DemoUserStore(), "kevin", "pw")
        head, body, sig = token.split(".")
        tampered = ".".join([head, body, sig[::-1]])
        assert decode_access_token(tampered) is None

    def test_foreign_key_rejected(self, settings):
        token = jwt.encode(_claims(settings), "x" * 40, algorithm="HS256")
        assert decode_access_token(token) is None

    def test_expired_token_rejected(self, settings):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            _claims(settings, iat=past, exp=past + timedelta(hours=1)),
            settings.secret_key,
            algorithm="HS256",
        )
        assert decode_access_token(token) is None

    def test_wrong_audience_rejected(self, settings):
        token = jwt.encode(_claims(settings, aud="someone-else"), settings.secret_key, algorithm="HS256")
        assert decode_access_token(token) is None

    def test_wrong_issuer_rejected(self, settings):
        token = jwt.encode(_claims(settings, iss="https://evil.example"), settings.secret_key, algorithm="HS256")
        assert decode_access_token(token) is None

    def test_garbage_rejected(self):
        assert decode_access_token("not-a-jwt") is None


class TestCallerClaims:
    def test_empty_city_becomes_none(self):
        claims = CallerClaims.from_payload({"sub": "1", "city": ""})
        assert claims.city is None

    def test_claims_are_immutable(self):
        claims = CallerClaims.from_payload({"sub": "1", "city": "Antwerp"})
        with pytest.raises(AttributeError):
            claims.city = "Paris"
