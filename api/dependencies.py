"""
api/dependencies.py -- Request-scoped access to application services.

Services are created once in the lifespan (api/main.py) and stored on
app.state. Handlers reach them through these dependencies so tests can swap
app.state entries without touching route code.
"""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request

from auth.store import DemoUserStore
from cities.repository import CityInfoRepository
from core.mail import LocalMailService


def get_repository(request: Request) -> Iterator[CityInfoRepository]:
    """Yield a fresh repository for this request and discard its stage afterwards."""
    repo = request.app.state.city_store.repository()
    try:
        yield repo
    finally:
        repo.close()


def get_mail_service(request: Request) -> LocalMailService:
    return request.app.state.mail_service


def get_user_store(request: Request) -> DemoUserStore:
    return request.app.state.user_store
