"""
core/mail.py -- Outbound notification mail.

LocalMailService does not talk to an SMTP server; it writes the message to the
"cityinfo.mail" logger. Sender and recipient come from Settings.

Usage:
    mail = LocalMailService.from_settings(get_settings())
    mail.send("Point Of Interest Deleted", "Point Of interest X with id 7 was deleted.")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.config import Settings

logger = logging.getLogger("cityinfo.mail")


class LocalMailService:
    def __init__(self, mail_to: str, mail_from: str) -> None:
        self.mail_to = mail_to
        self.mail_from = mail_from

    @classmethod
    def from_settings(cls, settings: Settings) -> LocalMailService:
        return cls(mail_to=settings.mail_to, mail_from=settings.mail_from)

    def send(self, subject: str, message: str) -> None:
        """Deliver a notification by logging it."""
        logger.info(
            "Mail from %s to %s, with %s. Subject: %s Message: %s",
            self.mail_from,
            self.mail_to,
            type(self).__name__,
            subject,
            message,
        )
