"""
api/versions.py -- Mounts the shared routers once per API version.

Both versions run the same handlers. A version only changes what is attached
around them:

  v1  /api      -- cities and points of interest require a valid bearer token
  v2  /api/v2   -- points of interest also require the named city policy
                   (Settings.city_policy_name), and the extra error responses
                   are documented in OpenAPI
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, FastAPI

from api.models import ErrorResponse
from api.routes.cities import router as cities_router
from api.routes.points_of_interest import router as points_of_interest_router
from auth.dependencies import get_current_claims, require_city_policy

_DOCUMENTED_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    403: {"model": ErrorResponse, "description": "City claim or policy not satisfied"},
    404: {"model": ErrorResponse, "description": "City or point of interest not found"},
}


@dataclass(frozen=True)
class ApiVersion:
    name: str
    prefix: str
    enforce_city_policy: bool = False
    document_responses: bool = False


API_VERSIONS: tuple[ApiVersion, ...] = (
    ApiVersion(name="v1", prefix="/api"),
    ApiVersion(name="v2", prefix="/api/v2", enforce_city_policy=True, document_responses=True),
)


def include_versioned_routers(app: FastAPI, versions: tuple[ApiVersion, ...] = API_VERSIONS) -> None:
    for version in versions:
        responses = _DOCUMENTED_ERRORS if version.document_responses else None
        poi_guard = require_city_policy if version.enforce_city_policy else get_current_claims
        app.include_router(
            cities_router,
            prefix=version.prefix,
            tags=[f"Cities ({version.name})"],
            responses=responses,
        )
        app.include_router(
            points_of_interest_router,
            prefix=version.prefix,
            tags=[f"Points of interest ({version.name})"],
            dependencies=[Depends(poi_guard)],
            responses=responses,
        )
