"""
cities/store.py -- SQLAlchemy-backed persistence layer for cities and points of interest.

Uses SQLAlchemy Core (not ORM) so the dataclasses in cities/models.py remain
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change.

Pattern: Repository + Unit of Work + Data Mapper.
  CityInfoStore         -- owns the engine and schema, seeds the demo cities,
                           hands out one repository per request.
  SQLCityInfoRepository -- implements CityInfoRepository; reads go straight to
                           the database, mutations are staged until save_changes().
  _row_to_*             -- translate raw rows into domain dataclasses.

All queries use bound parameters. No f-strings in SQL.

Usage:
    store = CityInfoStore()                               # SQLite default
    store = CityInfoStore("postgresql://user:pw@host/db") # PostgreSQL
    repo = store.repository()
    cities, meta = repo.list_cities(search_query="park", page_size=5)
    repo.add_point_of_interest(1, PointOfInterest(name="High Line"))
    repo.save_changes()
    repo.close()
    store.close()
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    event,
    func,
    or_,
    select,
    text,
)
from sqlalchemy.engine import Connection, Engine

from cities.models import City, PaginationMetadata, PointOfInterest
from cities.repository import CityInfoRepository
from core.config import get_settings

logger = logging.getLogger("cityinfo.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_cities = Table(
    "cities",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False),
    Column("description", String(200)),
)

_points = Table(
    "points_of_interest",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False),
    Column("description", String(200)),
    Column("city_id", Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False, index=True),
)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------


def _seed_cities() -> list[City]:
    """Build the fixed demo set. Fresh instances on every call."""
    return [
        City(
            id=1,
            name="New York City",
            description="The one with the big park.",
            points_of_interest=[
                PointOfInterest(
                    id=1,
                    name="Central Park",
                    description="The most visited urban park in the United States.",
                ),
                PointOfInterest(
                    id=2,
                    name="Empire State Building",
                    description="A 102-story kyscraper located in Midtown Manhattan",
                ),
            ],
        ),
        City(
            id=2,
            name="Antwerp",
            description="The one with the cathedral that really never finished.",
            points_of_interest=[
                PointOfInterest(
                    id=3,
                    name="Cathedral Of Our Lady",
                    description="A gothic style cathedral conceived by Jan and Piete.",
                ),
                PointOfInterest(
                    id=4,
                    name="Antwerp Central Station",
                    description="The finest example of railway architecture in Belgium.",
                ),
            ],
        ),
        City(
            id=3,
            name="Paris",
            description="The one with that big tower.",
            points_of_interest=[
                PointOfInterest(
                    id=5,
                    name="Eiffel Tower",
                    description="A wrought iron lattice tower on the Champ de Mars, named after",
                ),
                PointOfInterest(
                    id=6,
                    name="The Louvre",
                    description="The world's largest museum.",
                ),
            ],
        ),
    ]


# ---------------------------------------------------------------------------
# Mappers
# ---------------------------------------------------------------------------


def _row_to_city(row) -> City:
    return City(id=row.id, name=row.name, description=row.description)


def _row_to_point(row) -> PointOfInterest:
    return PointOfInterest(
        id=row.id,
        name=row.name,
        description=row.description,
        city_id=row.city_id,
    )


def _city_filters(name: Optional[str], search_query: Optional[str]) -> list:
    clauses = []
    if name and name.strip():
        clauses.append(func.lower(_cities.c.name) == name.strip().lower())
    if search_query and search_query.strip():
        query = search_query.strip()
        clauses.append(
            or_(
                _cities.c.name.icontains(query, autoescape=True),
                _cities.c.description.icontains(query, autoescape=True),
            )
        )
    return clauses


# ---------------------------------------------------------------------------
# SQLite connection setup
# ---------------------------------------------------------------------------


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Enable WAL journaling and foreign key enforcement.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool. Without foreign_keys=ON the ON DELETE CASCADE
    on points_of_interest.city_id is ignored.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

# Staged operation kinds
_ADD_CITY = "add_city"
_DELETE_CITY = "delete_city"
_ADD_POINT = "add_point"
_UPDATE_POINT = "update_point"
_DELETE_POINT = "delete_point"


class SQLCityInfoRepository(CityInfoRepository):
    """Request-scoped repository over a CityInfoStore engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._pending: list[tuple[str, object]] = []

    # ------------------------------------------------------------------
    # Cities
    # ------------------------------------------------------------------

    def list_all_cities(self) -> list[City]:
        with self._engine.connect() as conn:
            rows = conn.execute(_cities.select().order_by(_cities.c.name, _cities.c.id)).fetchall()
        return [_row_to_city(r) for r in rows]

    def list_cities(
        self,
        name: Optional[str] = None,
        search_query: Optional[str] = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> tuple[list[City], PaginationMetadata]:
        if page_number < 1:
            raise ValueError("page_number must be at least 1")
        if page_size < 1:
            raise ValueError("page_size must be at least 1")

        clauses = _city_filters(name, search_query)
        count_stmt = select(func.count()).select_from(_cities).where(*clauses)
        page_stmt = (
            _cities.select()
            .where(*clauses)
            .order_by(_cities.c.name, _cities.c.id)
            .limit(page_size)
            .offset((page_number - 1) * page_size)
        )
        with self._engine.connect() as conn:
            total_count = conn.execute(count_stmt).scalar_one()
            rows = conn.execute(page_stmt).fetchall()

        metadata = PaginationMetadata(total_count=total_count, page_size=page_size, current_page=page_number)
        return [_row_to_city(r) for r in rows], metadata

    def get_city(self, city_id: int, include_points_of_interest: bool = False) -> Optional[City]:
        with self._engine.connect() as conn:
            row = conn.execute(_cities.select().where(_cities.c.id == city_id)).fetchone()
            if row is None:
                return None
            city = _row_to_city(row)
            if include_points_of_interest:
                city.points_of_interest = self._points_for(conn, city_id)
        return city

    def city_exists(self, city_id: int) -> bool:
        with self._engine.connect() as conn:
            row = conn.execute(select(_cities.c.id).where(_cities.c.id == city_id)).fetchone()
        return row is not None

    def city_name_matches_city_id(self, city_name: Optional[str], city_id: int) -> bool:
        if not city_name:
            return False
        with self._engine.connect() as conn:
            row = conn.execute(
                select(_cities.c.id).where((_cities.c.id == city_id) & (_cities.c.name == city_name))
            ).fetchone()
        return row is not None

    def add_city(self, city: City) -> None:
        self._pending.append((_ADD_CITY, city))

    def delete_city(self, city: City) -> None:
        self._pending.append((_DELETE_CITY, city))

    # ------------------------------------------------------------------
    # Points of interest
    # ------------------------------------------------------------------

    def list_points_of_interest(self, city_id: int) -> list[PointOfInterest]:
        with self._engine.connect() as conn:
            return self._points_for(conn, city_id)

    def get_point_of_interest(self, city_id: int, point_of_interest_id: int) -> Optional[PointOfInterest]:
        with self._engine.connect() as conn:
            row = conn.execute(
                _points.select().where((_points.c.city_id == city_id) & (_points.c.id == point_of_interest_id))
            ).fetchone()
        return _row_to_point(row) if row is not None else None

    def add_point_of_interest(self, city_id: int, point_of_interest: PointOfInterest) -> None:
        point_of_interest.city_id = city_id
        self._pending.append((_ADD_POINT, point_of_interest))

    def update_point_of_interest(self, point_of_interest: PointOfInterest) -> None:
        self._pending.append((_UPDATE_POINT, point_of_interest))

    def delete_point_of_interest(self, point_of_interest: PointOfInterest) -> None:
        self._pending.append((_DELETE_POINT, point_of_interest))

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    def save_changes(self) -> bool:
        pending, self._pending = self._pending, []
        if not pending:
            return False
        affected = 0
        with self._engine.begin() as conn:
            for kind, item in pending:
                affected += self._apply(conn, kind, item)
        logger.debug("Committed %d staged change(s), %d row(s) affected", len(pending), affected)
        return affected > 0

    def close(self) -> None:
        if self._pending:
            logger.debug("Discarding %d uncommitted change(s)", len(self._pending))
        self._pending = []

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _points_for(conn: Connection, city_id: int) -> list[PointOfInterest]:
        rows = conn.execute(_points.select().where(_points.c.city_id == city_id).order_by(_points.c.id)).fetchall()
        return [_row_to_point(r) for r in rows]

    @staticmethod
    def _insert_point(conn: Connection, point: PointOfInterest) -> int:
        values = {"name": point.name, "description": point.description, "city_id": point.city_id}
        if point.id is not None:
            values["id"] = point.id
        result = conn.execute(_points.insert().values(**values))
        point.id = result.inserted_primary_key[0]
        return 1

    def _apply(self, conn: Connection, kind: str, item) -> int:
        """Execute one staged mutation on conn and return the affected row count."""
        if kind == _ADD_CITY:
            values = {"name": item.name, "description": item.description}
            if item.id is not None:
                values["id"] = item.id
            result = conn.execute(_cities.insert().values(**values))
            item.id = result.inserted_primary_key[0]
            affected = 1
            for point in item.points_of_interest:
                point.city_id = item.id
                affected += self._insert_point(conn, point)
            return affected
        if kind == _DELETE_CITY:
            return conn.execute(_cities.delete().where(_cities.c.id == item.id)).rowcount
        if kind == _ADD_POINT:
            return self._insert_point(conn, item)
        if kind == _UPDATE_POINT:
            return conn.execute(
                _points.update()
                .where(_points.c.id == item.id)
                .values(name=item.name, description=item.description)
            ).rowcount
        if kind == _DELETE_POINT:
            return conn.execute(_points.delete().where(_points.c.id == item.id)).rowcount
        raise ValueError(f"Unknown staged operation: {kind}")


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class CityInfoStore:
    def __init__(self, db_url: Optional[str] = None, seed: bool = True) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # Route handlers run in a thread pool; the same pooled connection
            # may be used from more than one thread.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_sqlite_pragmas)
        metadata.create_all(self.engine)
        if seed:
            self.seed()

    def repository(self) -> SQLCityInfoRepository:
        return SQLCityInfoRepository(self.engine)

    def seed(self) -> int:
        """Insert the demo cities if the cities table is empty.

        Returns the number of cities inserted (0 when data already exists).
        """
        with self.engine.connect() as conn:
            existing = conn.execute(select(func.count()).select_from(_cities)).scalar_one()
        if existing:
            return 0
        repo = self.repository()
        cities = _seed_cities()
        for city in cities:
            repo.add_city(city)
        repo.save_changes()
        logger.info("Seeded %d cities", len(cities))
        return len(cities)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Database ping failed")
            return False

    def close(self) -> None:
        self.engine.dispose()
