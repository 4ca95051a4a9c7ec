"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication and authorization.

Callers authenticate with an "Authorization: Bearer <token>" header. A verified
token becomes a CallerClaims value; handlers receive it as a parameter rather
than reading identity from global state.

get_current_claims() raises HTTP 401 if the request carries no valid token.
require_city_policy() wraps it and raises HTTP 403 unless the caller's city
claim equals Settings.city_policy_city.
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request

from auth.models import CallerClaims
from auth.tokens import decode_access_token
from core.config import get_settings

logger = logging.getLogger("cityinfo.auth")


def try_get_current_claims(request: Request) -> CallerClaims | None:
    """Return the claims of a valid bearer token, None on any failure. Never raises."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    payload = decode_access_token(auth_header[7:].strip())
    if payload is None:
        return None
    return CallerClaims.from_payload(payload)


def get_current_claims(request: Request) -> CallerClaims:
    """Require authentication. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(claims: CallerClaims = Depends(get_current_claims)): ...
    """
    claims = try_get_current_claims(request)
    if claims is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def require_city_policy(claims: CallerClaims = Depends(get_current_claims)) -> CallerClaims:
    """Enforce the named city policy. Raises HTTP 403 when the city claim differs."""
    settings = get_settings()
    if claims.city is None or claims.city != settings.city_policy_city:
        logger.info("Policy %s denied subject %s", settings.city_policy_name, claims.subject)
        raise HTTPException(
            status_code=403,
            detail={
                "code": "forbidden",
                "message": f"Policy '{settings.city_policy_name}' not satisfied.",
            },
        )
    return claims
