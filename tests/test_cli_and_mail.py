"""Unit tests for main.py commands and core/mail.py.

Covers:
- init-db seeds an empty database once, then reports nothing to seed
- cities prints every seeded city
- token prints a decodable bearer token, rejects an empty username
- LocalMailService logs sender, recipient, subject and message
"""

import logging

import pytest

import main
from auth.tokens import decode_access_token
from core.config import Settings
from core.mail import LocalMailService


@pytest.fixture
def file_settings(tmp_path, monkeypatch):
    settings = Settings(_env_file=None, debug=True, database_url=f"sqlite:///{tmp_path / 'cityinfo.db'}")
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    return settings


class TestInitDb:
    def test_seeds_once(self, file_settings, capsys):
        assert main.main(["init-db"]) == 0
        assert "Seeded 3 cities." in capsys.readouterr().out

        assert main.main(["init-db"]) == 0
        assert "nothing to seed" in capsys.readouterr().out

    def test_cities_lists_seeded_rows(self, file_settings, capsys):
        assert main.main(["cities"]) == 0
        out = capsys.readouterr().out
        for name in ("Antwerp", "New York City", "Paris"):
            assert name in out


class TestTokenCommand:
    def test_prints_token(self, capsys):
        assert main.main(["token", "kevin"]) == 0
        token = capsys.readouterr().out.strip()
        assert decode_access_token(token)["city"] == "Antwerp"

    def test_blank_username_rejected(self, capsys):
        assert main.main(["token", " "]) == 1
        assert "rejected" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main.main([]) == 0
    assert "usage:" in capsys.readouterr().out


def test_mail_service_logs_message(caplog):
    mail = LocalMailService(mail_to="admin@mycompany.com", mail_from="noreply@mycompany.com")
    with caplog.at_level(logging.INFO, logger="cityinfo.mail"):
        mail.send("Point Of Interest Deleted", "Point Of interest X with id 7 was deleted.")

    record = caplog.records[-1]
    assert record.name == "cityinfo.mail"
    assert "admin@mycompany.com" in record.getMessage()
    assert "Point Of interest X with id 7 was deleted." in record.getMessage()
