#!/usr/bin/env python3
"""
Inventory API -- user accounts, categories and products over HTTP/JSON.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 127.0.0.1 --reload

Environment variables (or .env):
  MONGODB_URI   MongoDB connection string (default mongodb://localhost:27017)
  MONGODB_DB    Database name (default inventory)
  JWT_SECRET    Token signing secret, at least 32 characters. Required unless DEBUG=true.
  PORT          Listening port (default 3000)
  DEBUG         true to auto-generate a throwaway JWT_SECRET for local development
"""

import argparse
import sys

import uvicorn
from pydantic import ValidationError

from core.config import get_settings


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the Inventory API server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--host", help="Interface to bind (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: PORT or 3000)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"  [!] Invalid configuration:\n{e}", file=sys.stderr)
        sys.exit(2)

    host = args.host or settings.host
    port = args.port or settings.port
    print(f"  Inventory API listening on {host}:{port}")
    uvicorn.run("asgi:app", host=host, port=port, reload=args.reload)


if __name__ == "__main__":
    main()
