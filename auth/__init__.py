"""auth/ -- Token issuing and claim-based authorization for CityInfo.

Layer rule: auth/ imports from core/ and third-party libraries only.
It does NOT import from api/ or cities/; api/ imports from auth/.
"""
