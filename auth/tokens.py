"""
auth/tokens.py -- JWT issuing and verification.

  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry the
       subject id, given and family name, and the caller's city. Issuer,
       audience and lifetime come from Settings. Verification returns None on
       any failure -- the dependency layer turns that into a 401.

  authenticate(): runs the credential store, then mints a token. A failed
       login yields None and no claims.

Layer rule: no imports from api/ or cities/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from jose import JWTError, jwt

from core.config import get_settings

if TYPE_CHECKING:
    from auth.models import CityInfoUser
    from auth.store import DemoUserStore

logger = logging.getLogger("cityinfo.auth")

_settings = get_settings()

_ALGORITHM = "HS256"


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(user: CityInfoUser, expire_seconds: int = 0) -> str:
    """Encode a signed JWT carrying the user's identity claims.

    Args:
        user:           Identity resolved by the credential store.
        expire_seconds: Token lifetime. 0 (default) uses
                        Settings.token_expire_seconds (one hour).
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.user_id),
        "given_name": user.first_name,
        "family_name": user.last_name,
        "city": user.city,
        "iss": _settings.auth_issuer,
        "aud": _settings.auth_audience,
        "iat": now,
        "nbf": now,
        "exp": now + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Verify signature, lifetime, issuer and audience. Returns the payload or None."""
    try:
        payload = jwt.decode(
            token,
            _settings.secret_key,
            algorithms=[_ALGORITHM],
            audience=_settings.auth_audience,
            issuer=_settings.auth_issuer,
        )
    except JWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        return None
    if not payload.get("sub"):
        return None
    return payload


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


def authenticate(store: DemoUserStore, username: str | None, password: str | None) -> str | None:
    """Validate credentials and return a signed token, or None if they are rejected."""
    user = store.validate_credentials(username, password)
    if user is None:
        return None
    logger.info("Issued token for user %s", user.user_id)
    return create_access_token(user)
