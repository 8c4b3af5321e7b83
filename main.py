#!/usr/bin/env python3
"""
Postboard -- multi-user publishing service.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080 --reload
  python main.py create-user alice --name Alice --email a@example.com

Environment variables (see core/config.py for the full list):
  SECRET_KEY     Token signing key, 32+ characters. Required unless DEBUG=true.
  DEBUG          "true" auto-generates a throwaway SECRET_KEY for local runs.
  DATABASE_URL   SQLAlchemy URL. Defaults to a SQLite file next to this script.
  PORT           Default listen port for `serve` (4000).
"""

import argparse
import getpass
import sys

from core.config import get_settings
from core.errors import AppError


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    port = args.port or get_settings().port
    uvicorn.run("api.main:app", host=args.host, port=port, reload=args.reload)
    return 0


def _create_user(args: argparse.Namespace) -> int:
    from auth import service
    from auth.store import UserStore

    password = args.password or getpass.getpass(f"Password for {args.username}: ")
    if not password:
        print("  [!] Password must not be empty.")
        return 1

    store = UserStore(get_settings().database_url)
    try:
        user = service.register(store, args.username, args.name or args.username, password, email=args.email)
    except AppError as e:
        print(f"  [!] {e.message}")
        return 1
    finally:
        store.close()

    print(f"  Created user {user.username} ({user.id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="postboard", description="Postboard publishing service.")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=None, help="Listen port (default: PORT or 4000).")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development).")
    serve.set_defaults(func=_serve)

    create = sub.add_parser("create-user", help="Register an account from the terminal.")
    create.add_argument("username")
    create.add_argument("--name", help="Display name (defaults to the username).")
    create.add_argument("--email")
    create.add_argument("--password", help="Omit to be prompted without echo.")
    create.set_defaults(func=_create_user)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
