"""
cities/repository.py -- Persistence contract for the city domain.

CityInfoRepository is the only surface route handlers see. It combines three
capabilities over opaque storage:

  query  -- lookups, existence checks, paged listing, claim matching
  stage  -- add/update/delete calls buffer mutations in memory
  commit -- save_changes() applies every staged mutation in one transaction

A repository instance belongs to one request. close() drops whatever is still
staged, so an abandoned request never writes partial state.

cities/store.py provides the SQLAlchemy implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from cities.models import City, PaginationMetadata, PointOfInterest


class CityInfoRepository(ABC):
    # ------------------------------------------------------------------
    # Cities
    # ------------------------------------------------------------------

    @abstractmethod
    def list_all_cities(self) -> list[City]:
        """Return every city ordered by name, without points of interest."""

    @abstractmethod
    def list_cities(
        self,
        name: Optional[str] = None,
        search_query: Optional[str] = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> tuple[list[City], PaginationMetadata]:
        """Return one page of cities matching the filters plus paging metadata.

        name         -- exact, case-insensitive match on the city name
        search_query -- case-insensitive substring match on name or description

        Both filters combine with AND. Results are ordered by name.
        Raises ValueError when page_number or page_size is below 1.
        """

    @abstractmethod
    def get_city(self, city_id: int, include_points_of_interest: bool = False) -> Optional[City]:
        """Fetch a city by id, optionally with its points of interest. None if absent."""

    @abstractmethod
    def city_exists(self, city_id: int) -> bool: ...

    @abstractmethod
    def city_name_matches_city_id(self, city_name: Optional[str], city_id: int) -> bool:
        """Return True iff city_id exists and its name equals city_name exactly.

        A missing or empty city_name is never a match.
        """

    @abstractmethod
    def add_city(self, city: City) -> None:
        """Stage a city insert (its points of interest are inserted with it)."""

    @abstractmethod
    def delete_city(self, city: City) -> None:
        """Stage a city delete. Its points of interest go with it."""

    # ------------------------------------------------------------------
    # Points of interest
    # ------------------------------------------------------------------

    @abstractmethod
    def list_points_of_interest(self, city_id: int) -> list[PointOfInterest]: ...

    @abstractmethod
    def get_point_of_interest(self, city_id: int, point_of_interest_id: int) -> Optional[PointOfInterest]: ...

    @abstractmethod
    def add_point_of_interest(self, city_id: int, point_of_interest: PointOfInterest) -> None:
        """Stage an insert of point_of_interest under city_id."""

    @abstractmethod
    def update_point_of_interest(self, point_of_interest: PointOfInterest) -> None:
        """Stage a full replace of name and description."""

    @abstractmethod
    def delete_point_of_interest(self, point_of_interest: PointOfInterest) -> None: ...

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    @abstractmethod
    def save_changes(self) -> bool:
        """Commit every staged mutation atomically.

        Returns True if at least one row was affected. Generated ids are
        written back onto the staged dataclasses.
        """

    @abstractmethod
    def close(self) -> None:
        """Discard anything still staged."""
