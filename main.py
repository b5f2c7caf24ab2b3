#!/usr/bin/env python3
"""
Transactions Dashboard: run the web app or load the seed data.

Usage:
    python main.py serve                     # http://localhost:5000
    python main.py serve --port 9000         # http://localhost:9000
    python main.py serve --db /path/to/transactions.sqlite
    python main.py serve --reload            # auto-reload on code changes
    python main.py seed                      # fetch + insert seed records
    python main.py seed --url https://example.com/tx.json
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting Transactions Dashboard at {url}")
    print(f"Database: {os.getenv('APP_DB_PATH', 'transactions.sqlite')}")
    print()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )
    return 0


def _seed(args: argparse.Namespace) -> int:
    from api.database import TransactionStore
    from api.errors import QueryError
    from api.routes.seed import load_seed
    from utils.config import AppConfig

    cfg = AppConfig.from_env()
    if args.url:
        cfg.seed.url = args.url

    store = TransactionStore(cfg.db_path)
    store.open()
    try:
        inserted = load_seed(store, cfg.seed)
    except QueryError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    finally:
        store.close()
    print(f"Inserted {inserted:,} transactions into {cfg.db_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Transactions Dashboard: web app and seed loader.",
    )
    parser.add_argument(
        "--db", type=Path, default=None,
        help="Path to SQLite database (default: transactions.sqlite or APP_DB_PATH env var)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the web app with uvicorn")
    serve.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    serve.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "5000")),
        help="Port to listen on (default: 5000 or APP_PORT env var)",
    )
    serve.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    serve.set_defaults(func=_serve)

    seed = sub.add_parser("seed", help="Fetch the seed JSON and insert every record")
    seed.add_argument("--url", default=None, help="Seed URL (default: SEED_URL env var)")
    seed.set_defaults(func=_seed)

    args = parser.parse_args(argv)

    # Set DB path env var if provided via CLI
    if args.db is not None:
        os.environ["APP_DB_PATH"] = str(args.db)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
