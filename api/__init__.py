"""api/ -- FastAPI application, HTTP models, and routers for CityInfo.

Layer rule: api/ may import from auth/, cities/, and core/. Nothing imports
from api/ except the CLI entry point.
"""
