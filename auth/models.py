"""
auth/models.py -- Domain dataclasses for authentication entities.

CityInfoUser is the identity the user store resolves credentials to.
CallerClaims is the immutable request context built from a verified bearer
token; route handlers and authorization checks receive it explicitly.

Layer rule: no imports from api/ or cities/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CityInfoUser:
    """A user known to the token issuer."""

    user_id: int
    username: str
    first_name: str
    last_name: str
    city: str


@dataclass(frozen=True)
class CallerClaims:
    """Claims asserted by a verified bearer token.

    city is None when the token carries no city claim; authorization checks
    treat that as a mismatch, never as a wildcard.
    """

    subject: str
    given_name: str | None = None
    family_name: str | None = None
    city: str | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> CallerClaims:
        return cls(
            subject=str(payload["sub"]),
            given_name=payload.get("given_name"),
            family_name=payload.get("family_name"),
            city=payload.get("city") or None,
        )
