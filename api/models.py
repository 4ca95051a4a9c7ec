"""
API request and response models for CityInfo REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
separate from the dataclasses in cities/models.py, which own the internal
domain representation. Route handlers map between the two.

JSON field names are camelCase on the wire (alias_generator=to_camel);
Python code uses snake_case.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from cities.models import City, PointOfInterest

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload.

    fields carries per-field validation messages, keyed by field name.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None
    fields: Optional[dict[str, list[str]]] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]


# ---------------------------------------------------------------------------
# Cities
# ---------------------------------------------------------------------------


class PointOfInterestDto(BaseModel):
    model_config = _CAMEL

    id: int
    name: str
    description: Optional[str] = None

    @classmethod
    def from_domain(cls, point: PointOfInterest) -> "PointOfInterestDto":
        return cls(id=point.id, name=point.name, description=point.description)


class CityWithoutPointsOfInterestDto(BaseModel):
    """City summary -- one row of GET /cities, or GET /cities/{id} without points."""

    model_config = _CAMEL

    id: int
    name: str
    description: Optional[str] = None

    @classmethod
    def from_domain(cls, city: City) -> "CityWithoutPointsOfInterestDto":
        return cls(id=city.id, name=city.name, description=city.description)


class CityDto(CityWithoutPointsOfInterestDto):
    """City with its nested points of interest."""

    points_of_interest: list[PointOfInterestDto] = []

    @computed_field(alias="numberOfPointsOfInterest")
    @property
    def number_of_points_of_interest(self) -> int:
        return len(self.points_of_interest)

    @classmethod
    def from_domain(cls, city: City) -> "CityDto":
        return cls(
            id=city.id,
            name=city.name,
            description=city.description,
            points_of_interest=[PointOfInterestDto.from_domain(p) for p in city.points_of_interest],
        )


# ---------------------------------------------------------------------------
# Point-of-interest request bodies
# ---------------------------------------------------------------------------


class PointOfInterestForCreation(BaseModel):
    """Request body for POST /cities/{cityId}/pointsofinterest."""

    model_config = _CAMEL

    name: str = Field(min_length=1, max_length=50, description="You should provide a name value.")
    description: Optional[str] = Field(default=None, max_length=200)


class PointOfInterestForUpdate(BaseModel):
    """Request body for PUT, and the document a PATCH is applied to.

    Unknown fields are rejected so a patch cannot introduce new properties.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    name: str = Field(min_length=1, max_length=50, description="You should provide a name value.")
    description: Optional[str] = Field(default=None, max_length=200)

    @classmethod
    def from_domain(cls, point: PointOfInterest) -> "PointOfInterestForUpdate":
        return cls(name=point.name, description=point.description)


class JsonPatchOperation(BaseModel):
    """One RFC 6902 operation in a PATCH body.

    Example body:
        [{"op": "replace", "path": "/name", "value": "Updated - Central Park"}]
    """

    model_config = ConfigDict(populate_by_name=True)

    op: Literal["add", "remove", "replace", "move", "copy", "test"]
    path: str
    value: Any = None
    from_: Optional[str] = Field(default=None, alias="from")

    def to_patch_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class AuthenticationRequest(BaseModel):
    """Request body for POST /api/authentication/authenticate."""

    model_config = _CAMEL

    user_name: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)
