#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
todont-api management commands

Commands:
  migrate             Apply pending schema migrations to the configured database
  serve               Run the HTTP API under uvicorn

Notes:
- DATABASE_URL / PORT / HOST / ENV come from the environment, then config.yaml,
  then built-in defaults (sqlite://default.db, port 3000).
"""

import argparse
import os
import sys

from todont.config import load_settings
from todont.logs import configure_logging


def cmd_migrate(args):
    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url
    from todont.db import get_conn, close_pool
    from todont.migrations import run_migrations

    settings = load_settings()
    configure_logging(settings.log_level)
    try:
        with get_conn() as conn:
            applied = run_migrations(conn)
    finally:
        close_pool()
    if applied:
        print("Applied migrations:", ", ".join(f"{v:04d}" for v in applied))
    else:
        print("Database is up to date:", settings.database_url)


def cmd_serve(args):
    import uvicorn

    settings = load_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    print(f"hello there running the server: {settings.database_url}, {settings.env}")
    uvicorn.run(
        "todont.api:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def main(argv=None):
    ap = argparse.ArgumentParser(description="todont-api")
    sub = ap.add_subparsers(dest="cmd")

    sp = sub.add_parser("migrate", help="apply pending migrations")
    sp.add_argument("--database-url", default=None)
    sp.set_defaults(func=cmd_migrate)

    sp = sub.add_parser("serve", help="run the HTTP server")
    sp.add_argument("--host", default=None)
    sp.add_argument("--port", type=int, default=None)
    sp.add_argument("--reload", action="store_true")
    sp.set_defaults(func=cmd_serve)

    args = ap.parse_args(argv)
    if not getattr(args, "func", None):
        ap.print_help()
        return 1
    args.func(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
