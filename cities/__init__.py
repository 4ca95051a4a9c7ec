"""cities/ -- City and point-of-interest domain: dataclasses, repository, store.

Layer rule: cities/ imports only core/ besides stdlib and third-party libraries.
It does NOT import from api/ or auth/.
"""
