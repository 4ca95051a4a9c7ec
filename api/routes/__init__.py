"""api/routes/ -- Routers shared by every API version (see api/versions.py)."""
