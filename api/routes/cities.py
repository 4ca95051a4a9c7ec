"""
api/routes/cities.py -- City browsing routes.

Routes:
  GET /cities               -- filtered, paged city list; paging summary in X-Pagination
  GET /cities/{city_id}     -- one city, optionally with its points of interest

The caller's pageSize is capped at Settings.max_cities_page_size before the
repository is queried.
"""

import json
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.dependencies import get_repository
from api.models import CityDto, CityWithoutPointsOfInterestDto, ErrorDetail
from auth.dependencies import get_current_claims
from cities.repository import CityInfoRepository
from core.config import get_settings

router = APIRouter(dependencies=[Depends(get_current_claims)])


def effective_page_size(requested: Optional[int]) -> int:
    """Apply the configured default and cap to a caller-supplied page size."""
    settings = get_settings()
    if requested is None:
        requested = settings.default_cities_page_size
    return min(requested, settings.max_cities_page_size)


@router.get("/cities", response_model=list[CityWithoutPointsOfInterestDto])
def get_cities(
    response: Response,
    name: Optional[str] = Query(None, description="Exact city name (case-insensitive)"),
    search_query: Optional[str] = Query(None, alias="searchQuery", description="Match on name or description"),
    page_number: int = Query(1, alias="pageNumber", ge=1),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1),
    repo: CityInfoRepository = Depends(get_repository),
) -> list[CityWithoutPointsOfInterestDto]:
    """Return one page of cities ordered by name."""
    cities, pagination = repo.list_cities(
        name=name,
        search_query=search_query,
        page_number=page_number,
        page_size=effective_page_size(page_size),
    )
    response.headers["X-Pagination"] = json.dumps(pagination.to_header())
    return [CityWithoutPointsOfInterestDto.from_domain(c) for c in cities]


@router.get(
    "/cities/{city_id}",
    response_model=None,
    responses={200: {"model": CityDto}},
)
def get_city(
    city_id: int,
    include_points_of_interest: bool = Query(False, alias="includePointsOfInterest"),
    repo: CityInfoRepository = Depends(get_repository),
) -> Union[CityDto, CityWithoutPointsOfInterestDto]:
    """Return a city; nested points of interest only when includePointsOfInterest=true."""
    city = repo.get_city(city_id, include_points_of_interest)
    if city is None:
        raise HTTPException(
            status_code=404,
            detail=ErrorDetail(code="not_found", message=f"City {city_id} not found.").model_dump(),
        )
    if include_points_of_interest:
        return CityDto.from_domain(city)
    return CityWithoutPointsOfInterestDto.from_domain(city)
