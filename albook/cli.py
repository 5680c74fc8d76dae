"""Command line entry point: run the server or apply migrations."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import uvicorn
from loguru import logger

from albook.config import settings
from albook.db import session as db_session
from albook.db.migrate import upgrade_database
from albook.main import create_app


def _sqlite_url(path: str) -> str:
    return f"sqlite:///{Path(path).expanduser()}"


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def _prepare_database(db_path: str | None) -> str:
    """Point the session factory at ``db_path`` (if given) and migrate it."""

    if db_path:
        if not Path(db_path).expanduser().exists():
            logger.warning(f"Database file '{db_path}' does not exist. Creating a new one.")
        db_session.configure_engine(_sqlite_url(db_path))
    url = db_session.engine.url.render_as_string(hide_password=False)
    upgrade_database(url)
    return url


def serve(args: argparse.Namespace) -> int:
    url = _prepare_database(args.db)
    app_settings = settings
    if args.static:
        app_settings = settings.model_copy(update={"STATIC_DIR": Path(args.static)})
    app = create_app(app_settings, run_migrations=False)
    logger.info(f"Using database: {url}")
    logger.info(f"Server starting on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


def migrate(args: argparse.Namespace) -> int:
    _prepare_database(args.db)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="albook",
        description="Spaced-repetition tracker for solved exercises",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        help="Minimum log level (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--db", help="Path to the SQLite database file (default: DATABASE_URL)")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: %(default)s)")
    serve_parser.add_argument("--port", type=int, default=2100, help="Port for the web server (default: %(default)s)")
    serve_parser.add_argument("--static", help="Directory with the web client to serve at /")
    serve_parser.set_defaults(handler=serve)

    migrate_parser = subparsers.add_parser("migrate", help="Apply pending schema migrations and exit")
    migrate_parser.add_argument("--db", help="Path to the SQLite database file (default: DATABASE_URL)")
    migrate_parser.set_defaults(handler=migrate)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
