#!/usr/bin/env python3
"""
CityInfo -- command-line entry point.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080 --reload
  python main.py init-db
  python main.py cities
  python main.py token kevin

Environment variables are read through core.config (SECRET_KEY, DEBUG,
DATABASE_URL, AUTH_ISSUER, AUTH_AUDIENCE, ...).
"""

import argparse

from auth.store import DemoUserStore
from auth.tokens import authenticate
from cities.store import CityInfoStore
from core.config import get_settings


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def _init_db(args: argparse.Namespace) -> int:
    """Create the schema and seed the demo cities if the database is empty."""
    store = CityInfoStore(get_settings().database_url, seed=False)
    try:
        inserted = store.seed()
    finally:
        store.close()
    if inserted:
        print(f"  Seeded {inserted} cities.")
    else:
        print("  Database already contains cities; nothing to seed.")
    return 0


def _list_cities(args: argparse.Namespace) -> int:
    store = CityInfoStore(get_settings().database_url)
    repo = store.repository()
    try:
        cities = repo.list_all_cities()
    finally:
        repo.close()
        store.close()
    if not cities:
        print("  No cities.")
        return 0
    for city in cities:
        print(f"  {city.id:>4}  {city.name:<25} {city.description or ''}")
    return 0


def _token(args: argparse.Namespace) -> int:
    """Mint a demo bearer token for USERNAME and print it."""
    token = authenticate(DemoUserStore(), args.username, args.password)
    if token is None:
        print("  [!] Credentials rejected.")
        return 1
    print(token)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="cityinfo",
        description="CityInfo API server and maintenance commands.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py serve --reload
  DATABASE_URL=sqlite:///./cityinfo.db python main.py init-db
  python main.py token kevin
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve = sub.add_parser("serve", help="Run the API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    serve.set_defaults(func=_serve)

    init_db = sub.add_parser("init-db", help="Create tables and seed the demo cities")
    init_db.set_defaults(func=_init_db)

    cities = sub.add_parser("cities", help="Print every city")
    cities.set_defaults(func=_list_cities)

    token = sub.add_parser("token", help="Print a demo bearer token")
    token.add_argument("username")
    token.add_argument("--password", default="")
    token.set_defaults(func=_token)

    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
