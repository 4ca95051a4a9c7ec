"""
api/routes/points_of_interest.py -- Point-of-interest CRUD routes.

Routes (all under /cities/{city_id}/pointsofinterest):
  GET    /                         -- list; caller's city claim must name this city
  GET    /{point_of_interest_id}   -- detail
  POST   /                         -- create; 201 with Location
  PUT    /{point_of_interest_id}   -- full replace; 204
  PATCH  /{point_of_interest_id}   -- RFC 6902 JSON Patch; 204
  DELETE /{point_of_interest_id}   -- delete and send a notification mail; 204

Authentication is attached when the router is mounted (api/versions.py):
v1 requires a valid token, v2 additionally requires the named city policy.

Every mutating route checks that the city and point exist before anything is
staged on the repository.
"""

from __future__ import annotations

import logging

import jsonpatch
import jsonpointer
from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from pydantic import ValidationError

from api.dependencies import get_mail_service, get_repository
from api.models import (
    ErrorDetail,
    JsonPatchOperation,
    PointOfInterestDto,
    PointOfInterestForCreation,
    PointOfInterestForUpdate,
)
from auth.dependencies import get_current_claims
from auth.models import CallerClaims
from cities.models import PointOfInterest
from cities.repository import CityInfoRepository
from core.mail import LocalMailService

logger = logging.getLogger("cityinfo.api")

router = APIRouter()

_BASE = "/cities/{city_id}/pointsofinterest"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _not_found(message: str) -> HTTPException:
    return HTTPException(status_code=404, detail=ErrorDetail(code="not_found", message=message).model_dump())


def _require_city(repo: CityInfoRepository, city_id: int) -> None:
    if not repo.city_exists(city_id):
        logger.info("City with id %d was not found when accessing points of interest.", city_id)
        raise _not_found(f"City {city_id} not found.")


def _require_point(repo: CityInfoRepository, city_id: int, point_of_interest_id: int) -> PointOfInterest:
    _require_city(repo, city_id)
    point = repo.get_point_of_interest(city_id, point_of_interest_id)
    if point is None:
        raise _not_found(f"Point of interest {point_of_interest_id} not found in city {city_id}.")
    return point


def validation_fields(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic validation messages by dotted field location."""
    fields: dict[str, list[str]] = {}
    for err in exc.errors():
        key = ".".join(str(part) for part in err["loc"]) or "body"
        fields.setdefault(key, []).append(err["msg"])
    return fields


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get(_BASE, response_model=list[PointOfInterestDto])
def get_points_of_interest(
    city_id: int,
    claims: CallerClaims = Depends(get_current_claims),
    repo: CityInfoRepository = Depends(get_repository),
) -> list[PointOfInterestDto]:
    """List a city's points of interest. Only callers whose city claim names this city may list."""
    if not repo.city_name_matches_city_id(claims.city, city_id):
        raise HTTPException(
            status_code=403,
            detail=ErrorDetail(code="forbidden", message="City claim does not match the requested city.").model_dump(),
        )
    _require_city(repo, city_id)
    return [PointOfInterestDto.from_domain(p) for p in repo.list_points_of_interest(city_id)]


@router.get(_BASE + "/{point_of_interest_id}", response_model=PointOfInterestDto)
def get_point_of_interest(
    city_id: int,
    point_of_interest_id: int,
    repo: CityInfoRepository = Depends(get_repository),
) -> PointOfInterestDto:
    return PointOfInterestDto.from_domain(_require_point(repo, city_id, point_of_interest_id))


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


@router.post(_BASE, response_model=PointOfInterestDto, status_code=201)
def create_point_of_interest(
    request: Request,
    response: Response,
    city_id: int,
    body: PointOfInterestForCreation,
    repo: CityInfoRepository = Depends(get_repository),
) -> PointOfInterestDto:
    """Create a point of interest; Location points at the new resource."""
    _require_city(repo, city_id)
    point = PointOfInterest(name=body.name, description=body.description)
    repo.add_point_of_interest(city_id, point)
    repo.save_changes()

    location = request.url.replace(path=f"{request.url.path.rstrip('/')}/{point.id}", query="")
    response.headers["Location"] = str(location)
    return PointOfInterestDto.from_domain(point)


@router.put(_BASE + "/{point_of_interest_id}", status_code=204, response_class=Response)
def update_point_of_interest(
    city_id: int,
    point_of_interest_id: int,
    body: PointOfInterestForUpdate,
    repo: CityInfoRepository = Depends(get_repository),
) -> Response:
    """Replace name and description. Fields omitted from the body are cleared."""
    point = _require_point(repo, city_id, point_of_interest_id)
    point.name = body.name
    point.description = body.description
    repo.update_point_of_interest(point)
    repo.save_changes()
    return Response(status_code=204)


@router.patch(_BASE + "/{point_of_interest_id}", status_code=204, response_class=Response)
def partially_update_point_of_interest(
    city_id: int,
    point_of_interest_id: int,
    operations: list[JsonPatchOperation] = Body(..., examples=[[{"op": "replace", "path": "/name", "value": "New name"}]]),
    repo: CityInfoRepository = Depends(get_repository),
) -> Response:
    """Apply a JSON Patch to the point's updatable fields.

    400 when the patch cannot be applied or the patched document fails
    validation (fields carry per-field messages).
    """
    point = _require_point(repo, city_id, point_of_interest_id)
    document = PointOfInterestForUpdate.from_domain(point).model_dump(by_alias=True)

    try:
        patch = jsonpatch.JsonPatch([op.to_patch_dict() for op in operations])
        patched = patch.apply(document)
    except (jsonpatch.JsonPatchException, jsonpointer.JsonPointerException) as exc:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(
                code="invalid_patch",
                message="The patch document could not be applied.",
                detail=str(exc),
            ).model_dump(),
        ) from exc

    try:
        updated = PointOfInterestForUpdate.model_validate(patched)
    except ValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(
                code="validation_error",
                message="The patched point of interest is not valid.",
                fields=validation_fields(exc),
            ).model_dump(),
        ) from exc

    point.name = updated.name
    point.description = updated.description
    repo.update_point_of_interest(point)
    repo.save_changes()
    return Response(status_code=204)


@router.delete(_BASE + "/{point_of_interest_id}", status_code=204, response_class=Response)
def delete_point_of_interest(
    city_id: int,
    point_of_interest_id: int,
    repo: CityInfoRepository = Depends(get_repository),
    mail: LocalMailService = Depends(get_mail_service),
) -> Response:
    """Delete a point of interest and announce it by mail."""
    point = _require_point(repo, city_id, point_of_interest_id)
    repo.delete_point_of_interest(point)
    repo.save_changes()

    mail.send(
        "Point Of Interest Deleted",
        f"Point Of interest {point.name} with id {point.id} was deleted.",
    )
    return Response(status_code=204)
