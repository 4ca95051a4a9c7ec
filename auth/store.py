"""
auth/store.py -- Credential store for the token issuer.

DemoUserStore accepts any non-empty username with any password and resolves it
to one fixed demo identity whose city claim is "Antwerp". It exists so the API
can be exercised end to end; a deployment that needs real accounts replaces it
with a store that verifies credentials.

Layer rule: no imports from api/ or cities/.
"""

from __future__ import annotations

import logging

from auth.models import CityInfoUser

logger = logging.getLogger("cityinfo.auth")


class DemoUserStore:
    """Resolve credentials to the demo identity.

    Usage:
        store = DemoUserStore()
        user = store.validate_credentials("kevin", "anything")
    """

    def __init__(
        self,
        user_id: int = 1,
        first_name: str = "Kevin",
        last_name: str = "Dockx",
        city: str = "Antwerp",
    ) -> None:
        self.user_id = user_id
        self.first_name = first_name
        self.last_name = last_name
        self.city = city

    def validate_credentials(self, username: str | None, password: str | None) -> CityInfoUser | None:
        """Return the demo identity for any non-empty username, None otherwise.

        The password is not checked.
        """
        if username is None or not username.strip():
            logger.info("Rejected login with empty username")
            return None
        return CityInfoUser(
            user_id=self.user_id,
            username=username.strip(),
            first_name=self.first_name,
            last_name=self.last_name,
            city=self.city,
        )
