"""Unit tests for core/config.py -- SECRET_KEY policy and defaults."""

import pytest

from core.config import Settings


def test_production_without_secret_key_refuses_to_start():
    with pytest.raises(ValueError):
        Settings(_env_file=None, debug=False, secret_key="")


def test_debug_generates_secret_key():
    settings = Settings(_env_file=None, debug=True, secret_key="")
    assert len(settings.secret_key) == 64


def test_short_secret_key_rejected():
    with pytest.raises(ValueError):
        Settings(_env_file=None, debug=True, secret_key="too-short")


def test_defaults():
    settings = Settings(_env_file=None, debug=True, secret_key="k" * 32)
    assert settings.max_cities_page_size == 20
    assert settings.default_cities_page_size == 10
    assert settings.token_expire_seconds == 3600
    assert settings.city_policy_city == "Antwerp"
