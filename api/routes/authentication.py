"""
api/routes/authentication.py -- Token issuing endpoint.

Routes:
  POST /authentication/authenticate   -- exchange credentials for a bearer token

The endpoint is public and rate-limited per client address
(Settings.login_rate_limit). Responses carry Cache-Control: no-store.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.dependencies import get_user_store
from api.limiter import limiter
from api.models import AuthenticationRequest, ErrorDetail, ErrorResponse
from auth.store import DemoUserStore
from auth.tokens import authenticate
from core.config import get_settings

router = APIRouter()


def login_rate_limit() -> str:
    """Current login limit, read per request so a changed setting applies without a restart."""
    return get_settings().login_rate_limit


# The router registers the limiter's wrapper; the reverse order leaves the route unlimited.
@router.post(
    "/authentication/authenticate",
    response_model=str,
    responses={401: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
@limiter.limit(login_rate_limit)
def authenticate_user(
    request: Request,
    body: AuthenticationRequest,
    store: DemoUserStore = Depends(get_user_store),
) -> JSONResponse:
    """Validate credentials and return a signed JWT as a JSON string."""
    token = authenticate(store, body.user_name, body.password)
    if token is None:
        resp = JSONResponse(
            status_code=401,
            content=ErrorResponse(
                error=ErrorDetail(code="bad_credentials", message="Invalid username or password.")
            ).model_dump(),
        )
    else:
        resp = JSONResponse(status_code=200, content=token)
    resp.headers["Cache-Control"] = "no-store"
    return resp
