#!/usr/bin/env python3
"""
postgate -- Blog post backend with bearer-token auth and owner-only writes.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 127.0.0.1 --reload

Environment variables:
  JWT_SECRET            Required. HS256 signing key for identity tokens.
  DATABASE_URL          SQLAlchemy URL (default: sqlite:///postgate.db).
  TOKEN_EXPIRE_SECONDS  Token lifetime in seconds (default: 3600).
  LOG_LEVEL             Root log level (default: INFO).
  HOST / PORT           Bind address (default: 0.0.0.0:3000).
"""

import argparse
import sys

import uvicorn
from pydantic import ValidationError

from core.config import get_settings


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="postgate",
        description="Run the postgate HTTP API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  JWT_SECRET=change-me python main.py
  JWT_SECRET=change-me python main.py --port 8080 --reload
        """,
    )
    parser.add_argument("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT or 3000)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    # Load settings up front so a missing JWT_SECRET stops here with a readable
    # message instead of a traceback from inside the server's lifespan.
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"  [!] Invalid configuration:\n{exc}", file=sys.stderr)
        sys.exit(1)

    host = args.host or settings.host
    port = args.port or settings.port
    print(f"Starting postgate on {host}:{port}")
    uvicorn.run("asgi:app", host=host, port=port, reload=args.reload, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
