"""
cities/models.py -- Domain dataclasses for cities and points of interest.

Pure data containers. Query logic lives in cities/store.py; the HTTP contract
lives in api/models.py. Route handlers map between the two.
"""

import math
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PointOfInterest:
    """A named sub-location belonging to exactly one city.

    id is None before the record is written to the database. city_id is filled
    in by the repository when the point is staged for a city.
    """

    name: str
    description: Optional[str] = None
    city_id: Optional[int] = None
    id: Optional[int] = None


@dataclass
class City:
    """A city with an optional list of its points of interest.

    points_of_interest is only populated when the caller asks for it
    (see CityInfoRepository.get_city); otherwise it stays empty.
    """

    name: str
    description: Optional[str] = None
    id: Optional[int] = None
    points_of_interest: list[PointOfInterest] = field(default_factory=list)


@dataclass(frozen=True)
class PaginationMetadata:
    """Paging summary returned alongside one page of cities."""

    total_count: int
    page_size: int
    current_page: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    def to_header(self) -> dict[str, int]:
        """Return the camelCase mapping serialized into the X-Pagination header."""
        return {
            "totalCount": self.total_count,
            "pageSize": self.page_size,
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
        }
